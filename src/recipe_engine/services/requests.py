"""Turn free-text chat prompts into structured recipe requests."""

import re
from uuid import UUID

from recipe_engine.domain.preferences import UserPreferences
from recipe_engine.domain.routing import RecipeRequest

MAX_SERVINGS = 20

_RESTRICTION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(?:vegan|plant.based)\b"), "vegan"),
    (re.compile(r"\bvegetarian\b"), "vegetarian"),
    (re.compile(r"\bgluten.free\b"), "gluten-free"),
    (re.compile(r"\bdairy.free\b"), "dairy-free"),
    (re.compile(r"\bnut.free\b"), "nut-free"),
    (re.compile(r"\bketo\b"), "keto"),
    (re.compile(r"\bpaleo\b"), "paleo"),
    (re.compile(r"\blow.carb\b"), "low-carb"),
    (re.compile(r"\blow.sodium\b"), "low-sodium"),
)
_NO_INGREDIENT = re.compile(r"\bno ([a-z][a-z-]*)")

CUISINES: tuple[str, ...] = (
    "italian",
    "mexican",
    "chinese",
    "japanese",
    "thai",
    "indian",
    "french",
    "mediterranean",
    "american",
    "korean",
    "vietnamese",
    "greek",
    "spanish",
    "middle eastern",
    "moroccan",
    "brazilian",
    "german",
    "british",
)

_COOKING_TIME_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bquick\b|\bfast\b|\b15.min\b|\b20.min\b"), "quick"),
    (re.compile(r"\b30.min\b|\bhalf.hour\b"), "30 minutes"),
    (re.compile(r"\b1.hour\b|\bone.hour\b"), "1 hour"),
    (re.compile(r"\bslow\b|\ball.day\b"), "slow cooking"),
)

_DIFFICULTY_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\beasy\b|\bsimple\b|\bbeginner\b"), "Easy"),
    (re.compile(r"\bmedium\b|\bintermediate\b"), "Medium"),
    (re.compile(r"\bhard\b|\bdifficult\b|\badvanced\b|\bcomplex\b"), "Hard"),
)

_SERVING_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bfor (\d+)\b"),
    re.compile(r"\bserves? (\d+)\b"),
    re.compile(r"\b(\d+) people\b"),
    re.compile(r"\b(\d+) person\b"),
)

_MEAL_TYPE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bbreakfast\b|\bmorning\b|\bbrunch\b"), "breakfast"),
    (re.compile(r"\blunch\b|\bmidday\b|\bnoon\b"), "lunch"),
    (re.compile(r"\bdinner\b|\bevening\b|\bsupper\b"), "dinner"),
)


def build_recipe_request(
    prompt: str,
    preferences: UserPreferences,
    *,
    session_id: UUID | None = None,
    enhanced_dietary_clause: str = "",
    default_meal_type: str = "dinner",
) -> RecipeRequest:
    """Build a conversational request from a chat prompt and stored preferences."""
    lowered = prompt.lower()
    restrictions = list(
        dict.fromkeys(
            [*preferences.dietary_restrictions, *extract_dietary_restrictions(lowered)]
        )
    )
    cuisine = extract_cuisine(lowered)
    if cuisine is None and preferences.preferred_cuisines:
        cuisine = preferences.preferred_cuisines[0]
    return RecipeRequest(
        prompt=prompt,
        meal_type=extract_meal_type(lowered) or default_meal_type,
        dietary_restrictions=restrictions,
        preferred_cuisine=cuisine,
        cooking_time=extract_cooking_time(lowered),
        difficulty=extract_difficulty(lowered),
        servings=extract_servings(lowered),
        enhanced_dietary_clause=enhanced_dietary_clause,
        session_id=session_id,
    )


def extract_dietary_restrictions(text: str) -> list[str]:
    lowered = text.lower()
    found = [label for pattern, label in _RESTRICTION_PATTERNS if pattern.search(lowered)]
    match = _NO_INGREDIENT.search(lowered)
    if match:
        found.append(f"no {match.group(1)}")
    return found


def extract_cuisine(text: str) -> str | None:
    lowered = text.lower()
    return next((cuisine for cuisine in CUISINES if cuisine in lowered), None)


def extract_cooking_time(text: str) -> str | None:
    return _first_label(_COOKING_TIME_PATTERNS, text)


def extract_difficulty(text: str) -> str | None:
    return _first_label(_DIFFICULTY_PATTERNS, text)


def extract_meal_type(text: str) -> str | None:
    return _first_label(_MEAL_TYPE_PATTERNS, text)


def extract_servings(text: str) -> int | None:
    """Return a serving count between 1 and 20 mentioned in ``text``."""
    lowered = text.lower()
    for pattern in _SERVING_PATTERNS:
        match = pattern.search(lowered)
        if match:
            servings = int(match.group(1))
            if 0 < servings <= MAX_SERVINGS:
                return servings
    return None


def _first_label(
    patterns: tuple[tuple[re.Pattern[str], str], ...], text: str
) -> str | None:
    lowered = text.lower()
    for pattern, label in patterns:
        if pattern.search(lowered):
            return label
    return None
