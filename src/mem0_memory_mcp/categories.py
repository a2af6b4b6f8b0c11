"""
Topic labels for stored memories.

Content is tagged by testing it against a fixed, ordered table of patterns.
The joined labels become a bracketed prefix on the stored text, so the order
of CATEGORY_RULES is part of the output format.
"""

import re
from typing import NamedTuple, Pattern

GENERAL_LABEL = "general"


class CategoryRule(NamedTuple):
    label: str
    pattern: Pattern[str]


def _rule(label: str, *alternatives: str) -> CategoryRule:
    return CategoryRule(label, re.compile("|".join(alternatives), re.IGNORECASE))


# May Marketing SEO workflow categories
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    _rule("lifestyle_management_concerns",
          "daily routines", "habits", "hobbies", "cooking", "time management", "work-life balance"),
    _rule("daily_tracking",
          "daily work", "left off", "session", "accomplished", "today", "yesterday"),
    _rule("clients",
          "may marketing", "cowboy property", "flyers edge", "woods roofing", "pave worx",
          "client", "project"),
    _rule("ai_projects",
          "ai automation", "bot development", "notion database", "ai project", "automation"),
    _rule("seo_content",
          "seo", "blog post", "google my business", "keyword", "content generation", "ranking"),
    _rule("billing_payments",
          "payment", "invoice", "subscription", "billing", "financial", "monthly fee"),
    _rule("technical_infrastructure",
          "railway", "docker", "supabase", "n8n", "api", "deployment", "error log"),
    _rule("meeting_notes",
          "meeting", "discussion", "decision", "action item", "follow-up", "call"),
    _rule("personal_family",
          "raven", "family", "home automation", "personal"),
    _rule("preferences",
          "preference", "like", "dislike", "favorite", "prefer", "setting"),
)


def categorize(content: str) -> list[str]:
    """Return the labels whose pattern occurs in content, or ["general"]."""
    labels = [rule.label for rule in CATEGORY_RULES if rule.pattern.search(content)]
    return labels or [GENERAL_LABEL]


def format_enhanced_content(content: str) -> str:
    """Prefix content with its bracketed label list, e.g. "[clients] ..."."""
    return f"[{', '.join(categorize(content))}] {content}"
