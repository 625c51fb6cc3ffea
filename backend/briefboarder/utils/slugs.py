"""
Short random slugs for shareable board/landing URLs.

Format: adjective-noun-NNNN (e.g. "swift-falcon-7829").
"""
from __future__ import annotations

import random
import re

ADJECTIVES = [
    "swift", "bright", "bold", "smart", "fresh", "clear", "prime", "rapid",
    "sharp", "sleek", "cool", "pure", "keen", "wise", "brave", "agile",
    "vital", "noble", "crisp", "vivid", "stellar", "mighty", "cosmic",
    "radiant", "dynamic",
]

NOUNS = [
    "falcon", "rocket", "spark", "wave", "bloom", "flash", "pulse", "storm",
    "dream", "leap", "quest", "forge", "nexus", "prism", "beacon", "phoenix",
    "comet", "aurora", "zenith", "vertex", "matrix", "cipher", "quantum",
    "fusion", "orbit",
]

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def generate_random_slug(rng: random.Random | None = None) -> str:
    rng = rng or random
    adjective = rng.choice(ADJECTIVES)
    noun = rng.choice(NOUNS)
    number = rng.randrange(10000)
    return f"{adjective}-{noun}-{number:04d}"


def is_valid_slug(slug: str) -> bool:
    """Lowercase alphanumeric words joined by single hyphens."""
    return bool(_SLUG_RE.match(slug or ""))


def sanitize_slug(value: str) -> str:
    slug = _NON_ALNUM_RE.sub("-", (value or "").lower().strip())
    # The substitution already collapses runs, so only the ends need trimming.
    return slug.strip("-")
