"""Site settings API endpoints."""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from src.api.dependencies import require_admin
from src.models.site_settings import (
    AnnouncementBanner,
    CommunityStats,
    ServerTimeResponse,
    SiteSettingsResponse,
    SiteSettingsUpdate,
    SiteSocialLinks,
)
from src.models.user import User
from src.services.exceptions import ValidationFailed
from src.services.site_settings_service import SiteSettingsService, server_time

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("")
async def get_site_settings() -> SiteSettingsResponse:
    """Public settings; defaults are stored on first read."""
    return SiteSettingsResponse(data=await SiteSettingsService().get())


@router.get("/time")
async def get_server_time() -> ServerTimeResponse:
    return ServerTimeResponse(data=server_time())


@router.put("")
async def update_site_settings(
    request: SiteSettingsUpdate,
    _: User = Depends(require_admin),
) -> SiteSettingsResponse:
    """Merge any of the four sections. Keys left out keep their value."""
    return SiteSettingsResponse(data=await SiteSettingsService().update(request))


@router.put("/social-links")
async def update_social_links(
    social_links: Optional[SiteSocialLinks] = Body(default=None, alias="socialLinks", embed=True),
    _: User = Depends(require_admin),
) -> SiteSettingsResponse:
    if social_links is None:
        raise ValidationFailed("Social links required")
    settings = await SiteSettingsService().update(SiteSettingsUpdate(social_links=social_links))
    return SiteSettingsResponse(data=settings)


@router.put("/stats")
async def update_community_stats(
    community_stats: Optional[CommunityStats] = Body(default=None, alias="communityStats", embed=True),
    _: User = Depends(require_admin),
) -> SiteSettingsResponse:
    if community_stats is None:
        raise ValidationFailed("Community stats required")
    settings = await SiteSettingsService().update(
        SiteSettingsUpdate(community_stats=community_stats)
    )
    return SiteSettingsResponse(data=settings)


@router.put("/announcement")
async def update_announcement(
    announcement_banner: Optional[AnnouncementBanner] = Body(
        default=None, alias="announcementBanner", embed=True
    ),
    _: User = Depends(require_admin),
) -> SiteSettingsResponse:
    if announcement_banner is None:
        raise ValidationFailed("Announcement banner data required")
    settings = await SiteSettingsService().update(
        SiteSettingsUpdate(announcement_banner=announcement_banner)
    )
    return SiteSettingsResponse(data=settings)
