"""Unit tests for the content services with a mocked asyncpg pool."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import asyncpg
import pytest

from src.models.blog import Author, BlogPostCreate, BlogPostUpdate
from src.models.event import EventStatus, EventUpdate
from src.models.review import ReviewFilter
from src.models.site_settings import SiteSettingsUpdate
from src.models.team import OrderItem, TeamMemberUpdate
from src.services.blog_service import DUPLICATE_SLUG, BlogService, slugify
from src.services.event_service import EventService
from src.services.exceptions import Conflict, ValidationFailed
from src.services.review_service import ReviewService
from src.services.site_settings_service import SiteSettingsService, server_time
from src.services.team_service import TeamService


@pytest.fixture
def conn(mock_pool):
    """Patch get_pool in every content service module."""
    pool, conn = mock_pool
    modules = [
        "src.services.blog_service",
        "src.services.event_service",
        "src.services.review_service",
        "src.services.site_settings_service",
        "src.services.team_service",
    ]
    patches = [patch(f"{m}.get_pool", new_callable=AsyncMock, return_value=pool) for m in modules]
    for p in patches:
        p.start()
    yield conn
    for p in patches:
        p.stop()


def _now():
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class TestEventService:
    """Tests for EventService queries."""

    async def test_completed_events_sort_newest_first(self, conn):
        conn.fetchval.return_value = 0
        conn.fetch.return_value = []

        await EventService().list_events(status=EventStatus.COMPLETED)

        assert "ORDER BY date DESC" in conn.fetch.call_args[0][0]

    async def test_other_events_sort_soonest_first(self, conn):
        conn.fetchval.return_value = 0
        conn.fetch.return_value = []

        await EventService().list_events(featured=True, page=3, limit=5)

        args = conn.fetch.call_args[0]
        assert "ORDER BY date ASC" in args[0]
        assert args[1:] == (True, 5, 10)

    async def test_update_skips_nulls_for_required_columns(self, conn):
        conn.fetchrow.return_value = None

        await EventService().update_event(
            uuid4(),
            EventUpdate.model_validate({"title": None, "location": None, "status": "Completed"}),
            modified_by="admin@codingcouncil.com",
        )

        sql = conn.fetchrow.call_args[0][0]
        assert "title =" not in sql
        assert "location =" in sql
        assert "last_modified_by =" in sql


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

class TestTeamService:
    """Tests for TeamService."""

    async def test_reorder_runs_in_one_batch(self, conn):
        items = [OrderItem(id=uuid4(), order=1), OrderItem(id=uuid4(), order=0)]

        await TeamService().reorder(items)

        conn.executemany.assert_awaited_once()
        rows = conn.executemany.call_args[0][1]
        assert [(r[0], r[2]) for r in rows] == [(1, items[0].id), (0, items[1].id)]

    async def test_update_quotes_order_column(self, conn):
        conn.fetchrow.return_value = None

        await TeamService().update_member(uuid4(), TeamMemberUpdate(order=3))

        assert '"order" = $1' in conn.fetchrow.call_args[0][0]


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------

class TestSlugify:
    @pytest.mark.parametrize(
        "title,slug",
        [
            ("Hello World", "hello-world"),
            ("  C++ & Rust: 2026!  ", "c-rust-2026"),
            ("Already-a-slug", "already-a-slug"),
        ],
    )
    def test_slugify(self, title, slug):
        assert slugify(title) == slug


class TestBlogService:
    """Tests for BlogService."""

    def _create(self, **overrides) -> BlogPostCreate:
        data = {
            "title": "Hello World",
            "content": "Body",
            "excerpt": "Intro",
            "cover_image": "https://example.com/c.png",
            "category": "News",
        }
        data.update(overrides)
        return BlogPostCreate.model_validate(data)

    async def test_create_draft_has_no_publish_date(self, conn):
        conn.fetchrow.return_value = {
            "id": uuid4(),
            "title": "Hello World",
            "slug": "hello-world",
            "content": "Body",
            "excerpt": "Intro",
            "cover_image": "https://example.com/c.png",
            "author": {"name": "Admin", "avatar": "x"},
            "category": "News",
            "tags": [],
            "published": False,
            "published_at": None,
            "read_time": 5,
            "views": 0,
            "created_at": _now(),
            "updated_at": _now(),
        }

        post = await BlogService().create_post(self._create(), Author(name="Admin", avatar="x"))

        assert post.published is False
        args = conn.fetchrow.call_args[0]
        assert args[3] == "hello-world"
        assert args[7] == {"name": "Admin", "avatar": "x"}
        assert args[11] is None

    async def test_create_duplicate_slug(self, conn):
        conn.fetchrow.side_effect = asyncpg.exceptions.UniqueViolationError("blog_posts_slug_key")

        with pytest.raises(Conflict) as exc_info:
            await BlogService().create_post(
                self._create(published=True), Author(name="Admin", avatar="x")
            )

        assert exc_info.value.message == DUPLICATE_SLUG

    async def test_create_rejects_unsluggable_title(self, conn):
        with pytest.raises(ValidationFailed):
            await BlogService().create_post(self._create(title="!!!"), Author(name="A", avatar="x"))

    async def test_publishing_stamps_published_at_once(self, conn):
        conn.fetchrow.return_value = None

        await BlogService().update_post(uuid4(), BlogPostUpdate(published=True))

        assert "published_at = COALESCE(published_at," in conn.fetchrow.call_args[0][0]

    async def test_view_counts_only_published(self, conn):
        conn.fetchrow.return_value = None

        assert await BlogService().view_by_slug("Hello-World") is None

        args = conn.fetchrow.call_args[0]
        assert "views = views + 1" in args[0]
        assert "published = TRUE" in args[0]
        assert args[1] == "hello-world"

    async def test_public_list_omits_content(self, conn):
        conn.fetchval.return_value = 0
        conn.fetch.return_value = []

        await BlogService().list_posts(category="News")

        sql = conn.fetch.call_args[0][0]
        assert "content" not in sql.split("FROM")[0]
        assert "published = TRUE" in sql


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

class TestReviewService:
    """Tests for ReviewService."""

    async def test_public_list_is_capped(self, conn):
        conn.fetch.return_value = []

        await ReviewService().list_public()

        sql = conn.fetch.call_args[0][0]
        assert "is_approved = TRUE" in sql
        assert "LIMIT 20" in sql

    async def test_admin_pending_filter(self, conn):
        conn.fetchval.return_value = 0
        conn.fetch.return_value = []

        await ReviewService().list_admin(status=ReviewFilter.PENDING, featured=True)

        sql = conn.fetch.call_args[0][0]
        assert "is_approved = FALSE" in sql
        assert "is_featured = $1" in sql

    async def test_revoking_approval_clears_approver(self, conn):
        conn.fetchrow.return_value = None

        await ReviewService().set_approval(uuid4(), False, approved_by=uuid4())

        args = conn.fetchrow.call_args[0]
        assert args[1:4] == (False, None, None)


# ---------------------------------------------------------------------------
# Site settings
# ---------------------------------------------------------------------------

class TestSiteSettingsService:
    """Tests for SiteSettingsService."""

    async def test_first_read_stores_defaults(self, conn):
        defaults = {
            "key": "global",
            "home_page_content": {"hero_tagline": "Build. Learn. Connect."},
            "social_links": {},
            "community_stats": {"members": 500},
            "announcement_banner": {"is_active": False},
            "updated_at": _now(),
        }
        conn.fetchrow.side_effect = [None, defaults]

        settings = await SiteSettingsService().get()

        assert settings.home_page_content.hero_tagline == "Build. Learn. Connect."
        assert settings.community_stats.members == 500
        assert "INSERT INTO site_settings" in conn.fetchrow.call_args[0][0]

    async def test_update_merges_given_keys(self, conn):
        conn.fetchval.return_value = 1
        conn.fetchrow.return_value = {
            "key": "global",
            "home_page_content": {},
            "social_links": {},
            "community_stats": {"members": 600, "events": 25},
            "announcement_banner": {},
            "updated_at": _now(),
        }

        settings = await SiteSettingsService().update(
            SiteSettingsUpdate.model_validate({"communityStats": {"members": 600}})
        )

        args = conn.fetchrow.call_args[0]
        assert "community_stats = community_stats || $2::jsonb" in args[0]
        assert args[2] == {"members": 600}
        assert settings.community_stats.events == 25

    def test_server_time(self):
        with patch("src.services.site_settings_service.get_settings") as mock_settings:
            mock_settings.return_value.default_timezone = "Asia/Kolkata"
            result = server_time()

        assert result.timezone == "Asia/Kolkata"
        assert result.iso.endswith("+05:30")
        assert result.timestamp > 1_700_000_000_000
