"""Block templates: shared, read-only reference data.

Templates are listed by callers and installed by ``seed_block_templates``;
there is no public create, update or delete.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .db import Database, now_iso
from .models import BlockTemplate

logger = logging.getLogger(__name__)


DEFAULT_BLOCK_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Hero Section",
        "category": "Header",
        "description": "Large hero section with title, subtitle and CTA button",
        "default_content": {
            "title": "Welcome to Our Website",
            "subtitle": "We provide amazing services",
            "buttonText": "Get Started",
            "backgroundImage": "/hero-bg.jpg",
        },
        "settings_schema": {
            "backgroundType": {"type": "select", "options": ["image", "gradient", "solid"]},
            "textAlign": {"type": "select", "options": ["left", "center", "right"]},
        },
    },
    {
        "name": "About Us",
        "category": "Content",
        "description": "About section with text and image",
        "default_content": {
            "title": "About Us",
            "content": "We are a company dedicated to providing excellent services...",
            "image": "/about-image.jpg",
        },
        "settings_schema": {
            "layout": {"type": "select", "options": ["text-left", "text-right", "text-center"]},
        },
    },
    {
        "name": "Contact Form",
        "category": "Forms",
        "description": "Contact form with name, email and message fields",
        "default_content": {
            "title": "Contact Us",
            "subtitle": "Get in touch with us today",
            "fields": ["name", "email", "message"],
        },
        "settings_schema": {
            "submitButtonText": {"type": "text", "default": "Send Message"},
            "showSubtitle": {"type": "boolean", "default": True},
        },
    },
]


def list_block_templates(db: Database) -> list[BlockTemplate]:
    """List all block templates in creation order."""
    return [BlockTemplate.from_row(row) for row in db.query("SELECT * FROM block_templates ORDER BY id")]


def seed_block_templates(
    db: Database,
    templates: list[dict[str, Any]] | None = None,
) -> list[BlockTemplate]:
    """Install block templates into an empty catalog.

    Does nothing if any template already exists, so it is safe to run on
    every start.

    Args:
        db: The database.
        templates: Template definitions with name, category, description,
            default_content and settings_schema keys. Defaults to
            DEFAULT_BLOCK_TEMPLATES.

    Returns:
        The full template catalog after seeding.
    """
    templates = DEFAULT_BLOCK_TEMPLATES if templates is None else templates
    now = now_iso()

    with db.transaction() as conn:
        existing = conn.execute("SELECT COUNT(*) FROM block_templates").fetchone()[0]
        if existing:
            logger.debug("Block templates already present (%d), skipping seed", existing)
        else:
            for template in templates:
                conn.execute(
                    """
                    INSERT INTO block_templates
                    (name, category, description, default_content, settings_schema, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        template["name"],
                        template["category"],
                        template.get("description"),
                        json.dumps(template.get("default_content", {})),
                        json.dumps(template.get("settings_schema", {})),
                        now,
                    ),
                )
            logger.info("Seeded %d block template(s)", len(templates))

    return list_block_templates(db)
