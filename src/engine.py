"""
Priority Engine: ranks study materials by how urgently they need revising.
Pure functions over stored material rows. No I/O, no UI.

Formula: Priority = Age Factor x Performance Factor x Repetition Factor
"""
import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# Score domain: 1 = hard (worst recall), 3 = easy (best recall)
MAX_SCORE = 3
VALID_SCORES = (1, 2, 3)


@dataclass(frozen=True)
class PriorityConfig:
    """Tunable knobs of the priority formula."""

    age_exponent: float = 1.2
    default_score: int = 2  # used until a material gets its first rating
    age_weight: float = 1.0
    performance_weight: float = 1.0
    repetition_weight: float = 1.0

    @classmethod
    def from_env(cls) -> "PriorityConfig":
        """Build a config from PRIORITY_* environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            age_exponent=_env_number("PRIORITY_AGE_EXPONENT", float, defaults.age_exponent),
            default_score=_env_number("PRIORITY_DEFAULT_SCORE", int, defaults.default_score),
            age_weight=_env_number("PRIORITY_AGE_WEIGHT", float, defaults.age_weight),
            performance_weight=_env_number("PRIORITY_PERFORMANCE_WEIGHT", float, defaults.performance_weight),
            repetition_weight=_env_number("PRIORITY_REPETITION_WEIGHT", float, defaults.repetition_weight),
        )


def _env_number(name: str, cast, default):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


DEFAULT_CONFIG = PriorityConfig()


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Normalize a stored timestamp to an aware UTC datetime.

    Supabase returns ISO strings (sometimes with a trailing 'Z'); naive values are taken as UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _whole_days_since(material: Dict, now: Optional[datetime]) -> int:
    last_revised = parse_timestamp(material["last_revised"])
    now = parse_timestamp(now) if now is not None else utc_now()
    return math.floor((now - last_revised).total_seconds() / SECONDS_PER_DAY)


def days_since_revision(material: Dict, now: Optional[datetime] = None) -> int:
    """Whole days since the material was last revised, never negative."""
    return max(_whole_days_since(material, now), 0)


def calculate_priority(
    material: Dict,
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_CONFIG,
) -> float:
    """
    Calculate the priority score for a single material.

    Args:
        material: Row with last_revised, last_score, revision_count
        now: Reference time (defaults to the current UTC time)
        config: Formula exponents and weights

    Returns:
        Priority rounded to 2 decimals. Higher = revise sooner.
    """
    # 1. Age factor: superlinear in days, floored at 1 day so it is never zero
    days_since = max(_whole_days_since(material, now), 1)
    age_factor = math.pow(days_since, config.age_exponent) * config.age_weight

    # 2. Performance factor: invert the score so hard material weighs more
    last_score = material.get("last_score")
    effective_score = last_score if last_score is not None else config.default_score
    performance_factor = (MAX_SCORE + 1 - effective_score) * config.performance_weight

    # 3. Repetition factor: diminishing with every revision
    revision_count = material.get("revision_count") or 0
    repetition_factor = (1 / (1 + revision_count)) * config.repetition_weight

    return round(age_factor * performance_factor * repetition_factor, 2)


def rank_all(
    materials: Iterable[Dict],
    now: Optional[datetime] = None,
    config: PriorityConfig = DEFAULT_CONFIG,
) -> List[Dict]:
    """
    Attach a priority to every material and sort by descending priority.

    Input rows are copied, not mutated. Equal priorities keep their input order
    (sorted() is stable).
    """
    now = parse_timestamp(now) if now is not None else utc_now()
    ranked = [{**material, "priority": calculate_priority(material, now, config)} for material in materials]
    ranked = sorted(ranked, key=lambda m: m["priority"], reverse=True)
    logger.debug(f"Ranked {len(ranked)} materials")
    return ranked
