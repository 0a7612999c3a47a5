"""Site-wide settings models (home page copy, social links, stats, banner)."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from src.models.base import CamelModel

SECTIONS = (
    "home_page_content",
    "social_links",
    "community_stats",
    "announcement_banner",
)


class HomePageContent(CamelModel):
    hero_tagline: Optional[str] = None
    hero_subtitle: Optional[str] = None
    about_mission: Optional[str] = None
    about_vision: Optional[str] = None


class SiteSocialLinks(CamelModel):
    linkedin: Optional[str] = None
    instagram: Optional[str] = None
    github: Optional[str] = None
    email: Optional[str] = None
    whatsapp: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    discord: Optional[str] = None


class CommunityStats(CamelModel):
    members: Optional[int] = Field(default=None, ge=0)
    events: Optional[int] = Field(default=None, ge=0)
    workshops: Optional[int] = Field(default=None, ge=0)
    projects: Optional[int] = Field(default=None, ge=0)


class AnnouncementBanner(CamelModel):
    is_active: Optional[bool] = None
    text: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    action_button_text: Optional[str] = None
    action_button_link: Optional[str] = None


class SiteSettings(CamelModel):
    key: str = "global"
    home_page_content: HomePageContent = Field(default_factory=HomePageContent)
    social_links: SiteSocialLinks = Field(default_factory=SiteSocialLinks)
    community_stats: CommunityStats = Field(default_factory=CommunityStats)
    announcement_banner: AnnouncementBanner = Field(default_factory=AnnouncementBanner)
    updated_at: Optional[datetime] = None


class SiteSettingsUpdate(CamelModel):
    """Any subset of sections; within a section only provided keys change."""

    home_page_content: Optional[HomePageContent] = None
    social_links: Optional[SiteSocialLinks] = None
    community_stats: Optional[CommunityStats] = None
    announcement_banner: Optional[AnnouncementBanner] = None


class SiteSettingsResponse(CamelModel):
    success: bool = True
    data: SiteSettings


class ServerTime(CamelModel):
    timestamp: int
    iso: str
    timezone: str


class ServerTimeResponse(CamelModel):
    success: bool = True
    data: ServerTime
