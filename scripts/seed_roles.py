#!/usr/bin/env python
"""Seed the default media team roles. Existing slugs are skipped."""

import asyncio
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from media_portal.config import get_settings
from media_portal.database import Database
from media_portal.models.domain.permission import Permission
from media_portal.repositories.role_repository import RoleRepository

CONTRIBUTOR = [Permission.VIEW_CALENDAR, Permission.VIEW_MINUTES, Permission.CREATE_CONTENT]

DEFAULT_ROLES = [
    {
        "name": "Media Manager",
        "slug": "media-manager",
        "description": "Oversees all media team operations and coordinates team activities",
        "responsibilities": [
            "Coordinate team activities and meetings",
            "Oversee content creation and distribution",
            "Manage team resources and equipment",
            "Report to church leadership",
        ],
        "permissions": list(Permission),
    },
    {
        "name": "Photographer",
        "slug": "photographer",
        "description": "Captures high-quality photographs of church events and services",
        "responsibilities": [
            "Take photos during services and events",
            "Edit and organize photo collections",
            "Maintain photography equipment",
            "Coordinate with other team members",
        ],
        "permissions": CONTRIBUTOR,
    },
    {
        "name": "Videographer",
        "slug": "videographer",
        "description": "Records video footage of church services and special events",
        "responsibilities": [
            "Record video during services and events",
            "Operate camera equipment professionally",
            "Coordinate with live streaming team",
            "Maintain video equipment",
        ],
        "permissions": CONTRIBUTOR,
    },
    {
        "name": "Video Editor",
        "slug": "video-editor",
        "description": "Edits and produces final video content for distribution",
        "responsibilities": [
            "Edit recorded video footage",
            "Add graphics and transitions",
            "Color correction and audio mixing",
            "Export and deliver final videos",
        ],
        "permissions": CONTRIBUTOR,
    },
    {
        "name": "Graphic Designer",
        "slug": "graphic-designer",
        "description": "Creates visual content and graphics for church communications",
        "responsibilities": [
            "Design promotional materials",
            "Create social media graphics",
            "Develop visual branding elements",
            "Support event marketing",
        ],
        "permissions": CONTRIBUTOR,
    },
    {
        "name": "Social Media Manager",
        "slug": "social-media-manager",
        "description": "Manages church social media presence and online engagement",
        "responsibilities": [
            "Manage social media accounts",
            "Create and schedule posts",
            "Engage with online community",
            "Monitor social media analytics",
        ],
        "permissions": CONTRIBUTOR,
    },
    {
        "name": "Content Writer",
        "slug": "content-writer",
        "description": "Writes content for church communications and marketing materials",
        "responsibilities": [
            "Write blog posts and articles",
            "Create social media captions",
            "Draft announcements and newsletters",
            "Proofread and edit content",
        ],
        "permissions": CONTRIBUTOR,
    },
    {
        "name": "Secretary",
        "slug": "secretary",
        "description": "Documents meetings and manages team records",
        "responsibilities": [
            "Take meeting minutes",
            "Upload meeting documentation",
            "Maintain team records",
            "Coordinate team communications",
        ],
        "permissions": [
            Permission.VIEW_CALENDAR,
            Permission.VIEW_MINUTES,
            Permission.UPLOAD_MINUTES,
            Permission.EDIT_MINUTES,
        ],
    },
    {
        "name": "Live Streaming Operator",
        "slug": "live-streaming-operator",
        "description": "Manages live stream broadcasts of church services",
        "responsibilities": [
            "Set up and operate streaming equipment",
            "Monitor stream quality during broadcasts",
            "Troubleshoot technical issues",
            "Coordinate with videographers and audio team",
        ],
        "permissions": [Permission.VIEW_CALENDAR, Permission.VIEW_MINUTES],
    },
]


async def seed_roles() -> int:
    """Insert missing default roles.

    Returns:
        Number of roles created
    """
    db = Database.from_settings(get_settings())
    created = 0
    try:
        async with db.session() as session:
            repo = RoleRepository(session)
            for role in DEFAULT_ROLES:
                if await repo.get_by_slug(role["slug"]) is not None:
                    print(f"Role {role['name']!r} already exists, skipping")
                    continue
                await repo.create(
                    **{**role, "permissions": [p.value for p in role["permissions"]]},
                    is_active=True,
                )
                created += 1
                print(f"Created role: {role['name']}")
    finally:
        await db.disconnect()
    return created


if __name__ == "__main__":
    count = asyncio.run(seed_roles())
    print(f"Seeding complete: {count} roles created")
