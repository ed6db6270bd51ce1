"""
Display helpers for the revision dashboard: priority tiers, stats, table sorting, labels.
Tier thresholds are presentation constants and are not part of PriorityConfig.
"""
from datetime import datetime
from typing import Dict, List, Optional

from src.engine import days_since_revision

HIGH_PRIORITY_THRESHOLD = 10
MEDIUM_PRIORITY_THRESHOLD = 5

TIER_HIGH = "high"
TIER_MEDIUM = "medium"
TIER_LOW = "low"

TIER_LABELS = {
    TIER_HIGH: "🔴 High Priority",
    TIER_MEDIUM: "🟡 Medium Priority",
    TIER_LOW: "🟢 Low Priority",
}

# score -> (emoji, label) for the rating buttons
SCORE_LABELS = {
    1: ("😢", "Hard"),
    2: ("😐", "Okay"),
    3: ("😊", "Easy"),
}

SORT_KEYS = ("priority", "name", "revisions", "date")


def priority_tier(priority: float) -> str:
    if priority > HIGH_PRIORITY_THRESHOLD:
        return TIER_HIGH
    if priority > MEDIUM_PRIORITY_THRESHOLD:
        return TIER_MEDIUM
    return TIER_LOW


def tier_counts(ranked: List[Dict]) -> Dict[str, int]:
    """Returns dict with total, high, medium, low counts (for the sidebar cards)."""
    counts = {"total": len(ranked), TIER_HIGH: 0, TIER_MEDIUM: 0, TIER_LOW: 0}
    for material in ranked:
        counts[priority_tier(material["priority"])] += 1
    return counts


def sort_materials(
    ranked: List[Dict],
    sort_by: str = "priority",
    descending: bool = True,
    now: Optional[datetime] = None,
) -> List[Dict]:
    """Re-sort an already ranked list by a table column."""
    if sort_by == "priority":
        key = lambda m: m["priority"]
    elif sort_by == "name":
        key = lambda m: (m.get("filename") or "").casefold()
    elif sort_by == "revisions":
        key = lambda m: m.get("revision_count") or 0
    elif sort_by == "date":
        key = lambda m: days_since_revision(m, now)
    else:
        raise ValueError(f"Unknown sort column {sort_by!r}, expected one of {SORT_KEYS}")
    return sorted(ranked, key=key, reverse=descending)


def format_time_ago(days: int) -> str:
    if days == 0:
        return "Today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"
