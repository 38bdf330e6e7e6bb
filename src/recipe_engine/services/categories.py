"""Keyword classification of modification requests."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ModificationCategory:
    """A kind of modification recognised by keywords."""

    slug: str
    label: str
    keywords: tuple[str, ...]


CATEGORIES: tuple[ModificationCategory, ...] = (
    ModificationCategory("dietary_modification", "Vegan Version", ("vegan", "plant-based")),
    ModificationCategory("gluten_free", "Gluten-Free", ("gluten-free", "gluten free")),
    ModificationCategory("spice_adjustment", "Spicy Version", ("spicy", "spicier")),
    ModificationCategory("health_optimization", "Healthy Version", ("healthy", "lighter")),
    ModificationCategory("time_optimization", "Quick Version", ("quick", "faster")),
    ModificationCategory(
        "ingredient_substitution", "Modified", ("substitute", "replace")
    ),
)

FALLBACK_LABEL = "Variation"


def classify(text: str | None) -> list[ModificationCategory]:
    """Return every category whose keywords appear in ``text``, in rank order."""
    lowered = (text or "").lower()
    return [
        category
        for category in CATEGORIES
        if any(keyword in lowered for keyword in category.keywords)
    ]


def variation_name(original_name: str, modification_request: str) -> str:
    """Build a display name such as ``"Pasta (Vegan Version)"``."""
    matches = classify(modification_request)
    label = matches[0].label if matches else FALLBACK_LABEL
    return f"{original_name} ({label})"


def popular_types(descriptions: Iterable[str | None], limit: int = 3) -> list[str]:
    """Rank category slugs by how often they occur, most frequent first."""
    counts: Counter[str] = Counter()
    for description in descriptions:
        for category in classify(description):
            counts[category.slug] += 1
    return [slug for slug, _count in counts.most_common(limit)]
