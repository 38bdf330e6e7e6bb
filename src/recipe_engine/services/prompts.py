"""Prompt construction for recipe generation and modification.

Every prompt carries the household dietary policy verbatim: the fixed
exclusions and the allowed ingredient groups. These are policy constants and
never come from user input.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import assert_never

from recipe_engine.domain.preferences import UserPreferences
from recipe_engine.domain.routing import RecipeRequest

DIETARY_RESTRICTIONS: tuple[str, ...] = (
    "No rice",
    "No chicken",
    "No red meat (beef, lamb, pork)",
    "No lentils",
    "No chickpeas",
)

ALLOWED_INGREDIENTS: tuple[str, ...] = (
    "fish",
    "eggs",
    "vegetables",
    "fruits",
    "dairy",
    "alternative grains (quinoa, bulgur, couscous, barley, oats)",
)

DIETARY_CLAUSE = "STRICT DIETARY RESTRICTIONS (MUST FOLLOW):\n" + "\n".join(
    f"- {restriction}" for restriction in DIETARY_RESTRICTIONS
)

ALLOWED_INGREDIENTS_CLAUSE = "ALLOWED INGREDIENTS:\n" + "\n".join(
    f"- {food}" for food in ALLOWED_INGREDIENTS
)

BASIC_SCHEMA = """{
  "recipe_name": "Name of the recipe",
  "ingredients": [
    {"name": "ingredient name", "quantity": "amount with unit"}
  ],
  "instructions": "Step-by-step instructions as a single string with numbered steps",
  "prep_time": number (in minutes),
  "cook_time": number (in minutes),
  "servings": number,
  "estimated_cost": number (in dollars),
  "nutritional_info": {
    "calories": number (per serving),
    "protein": "amount in grams",
    "carbs": "amount in grams",
    "fats": "amount in grams",
    "highlights": "brief nutritional highlights"
  }
}"""

PREMIUM_SCHEMA = """{
  "recipe_name": "Name of the recipe",
  "ingredients": [
    {"name": "ingredient name", "quantity": "amount with unit", "notes": "optional preparation note"}
  ],
  "instructions": "Step-by-step instructions as a single string with numbered steps",
  "prep_time": number (in minutes),
  "cook_time": number (in minutes),
  "servings": number,
  "estimated_cost": number (in dollars),
  "difficulty": "Easy|Medium|Hard",
  "cuisine_type": "cuisine type",
  "tags": ["short descriptive tags"],
  "variations": ["ideas for adapting the recipe"],
  "cooking_tips": ["professional cooking tips"],
  "nutritional_info": {
    "calories": number (per serving),
    "protein": "amount in grams",
    "carbs": "amount in grams",
    "fats": "amount in grams",
    "fiber": "amount in grams",
    "sugar": "amount in grams",
    "sodium": "amount in milligrams",
    "highlights": "brief nutritional highlights"
  }
}"""

_JSON_ONLY = "Return ONLY the JSON object, no additional text."


class PromptKind(StrEnum):
    """How a generation request was phrased."""

    TEMPLATED = "templated"
    CONVERSATIONAL = "conversational"


@dataclass(frozen=True)
class PromptContext:
    """Everything a generation prompt may mention."""

    meal_type: str = "dinner"
    season: str = "spring"
    location: str = "United States"
    premium: bool = False
    request_text: str | None = None
    dietary_restrictions: list[str] = field(default_factory=list)
    cooking_skill_level: str | None = None
    preferred_cuisines: list[str] = field(default_factory=list)
    preferred_cuisine: str | None = None
    cooking_time: str | None = None
    difficulty: str | None = None
    servings: int | None = None
    enhanced_dietary_clause: str = ""


def current_season(today: date | None = None) -> str:
    """Return the northern-hemisphere season for a date."""
    month = (today or date.today()).month
    if 3 <= month <= 5:  # noqa: PLR2004
        return "spring"
    if 6 <= month <= 8:  # noqa: PLR2004
        return "summer"
    if 9 <= month <= 11:  # noqa: PLR2004
        return "fall"
    return "winter"


def context_for_request(
    request: RecipeRequest,
    preferences: UserPreferences,
    *,
    premium: bool,
    today: date | None = None,
) -> PromptContext:
    """Combine a request with stored preferences into a prompt context."""
    restrictions = list(
        dict.fromkeys([*preferences.dietary_restrictions, *request.dietary_restrictions])
    )
    return PromptContext(
        meal_type=request.meal_type,
        season=current_season(today),
        location=preferences.location,
        premium=premium,
        request_text=request.prompt,
        dietary_restrictions=restrictions,
        cooking_skill_level=preferences.cooking_skill_level,
        preferred_cuisines=list(preferences.preferred_cuisines),
        preferred_cuisine=request.preferred_cuisine,
        cooking_time=request.cooking_time,
        difficulty=request.difficulty,
        servings=request.servings,
        enhanced_dietary_clause=request.enhanced_dietary_clause,
    )


def build_prompt(kind: PromptKind, context: PromptContext) -> str:
    """Build a backend-agnostic generation prompt."""
    match kind:
        case PromptKind.TEMPLATED:
            return _templated_prompt(context)
        case PromptKind.CONVERSATIONAL:
            return _conversational_prompt(context)
        case _:
            assert_never(kind)


def _templated_prompt(context: PromptContext) -> str:
    schema = PREMIUM_SCHEMA if context.premium else BASIC_SCHEMA
    return f"""Generate a {context.meal_type} recipe that meets these criteria:

{DIETARY_CLAUSE}

{ALLOWED_INGREDIENTS_CLAUSE}

REQUIREMENTS:
- Uses seasonal ingredients for {context.season} in {context.location}
- Easy to prepare (under 30 minutes total time)
- Budget-friendly (estimated cost under $15)
- Nutritionally balanced
- Simple ingredients commonly found in grocery stores

RESPONSE FORMAT (must be valid JSON):
{schema}

{_JSON_ONLY}"""


def _conversational_prompt(context: PromptContext) -> str:
    schema = PREMIUM_SCHEMA if context.premium else BASIC_SCHEMA
    request_text = context.request_text or f"a {context.meal_type} recipe"
    lines = [
        f'Create a recipe based on this request: "{request_text}"',
        "",
        DIETARY_CLAUSE,
        "",
        ALLOWED_INGREDIENTS_CLAUSE,
        "",
        "USER CONTEXT:",
        f"- Meal: {context.meal_type}",
        f"- Season: {context.season} in {context.location}",
    ]
    if context.dietary_restrictions:
        lines.append(
            f"- Additional dietary preferences: {', '.join(context.dietary_restrictions)}"
        )
    if context.cooking_skill_level:
        lines.append(f"- Cooking skill: {context.cooking_skill_level}")
    if context.preferred_cuisines:
        lines.append(f"- Preferred cuisines: {', '.join(context.preferred_cuisines)}")
    if context.preferred_cuisine:
        lines.append(f"- Requested cuisine: {context.preferred_cuisine}")
    if context.cooking_time:
        lines.append(f"- Cooking time preference: {context.cooking_time}")
    if context.difficulty:
        lines.append(f"- Difficulty level: {context.difficulty}")
    if context.servings:
        lines.append(f"- Servings needed: {context.servings}")
    prompt = "\n".join(lines)
    if context.enhanced_dietary_clause:
        prompt += f"\n\n{context.enhanced_dietary_clause.strip()}"
    if context.premium:
        prompt += (
            "\n\nInclude professional cooking tips, cultural context in the tags, "
            "and a few variation ideas."
        )
    return f"""{prompt}

RESPONSE FORMAT (must be valid JSON):
{schema}

{_JSON_ONLY}"""


def build_modification_prompt(
    snapshot: dict[str, object],
    modification_request: str,
    preferences: UserPreferences,
) -> str:
    """Build the prompt asking a model to modify a recipe and explain why."""
    restrictions = ", ".join(preferences.dietary_restrictions) or "None"
    cuisines = ", ".join(preferences.preferred_cuisines) or "Any"
    ingredients = json.dumps(snapshot.get("ingredients", []), indent=2)
    nutrition = json.dumps(snapshot.get("nutritional_info", {}), indent=2)
    return f"""You are a professional chef helping modify a recipe. Provide both the modified recipe and a detailed explanation.

ORIGINAL RECIPE:
Name: {snapshot.get("recipe_name", "")}
Ingredients: {ingredients}
Instructions: {snapshot.get("instructions", "")}
Prep Time: {snapshot.get("prep_time", 0)} minutes
Cook Time: {snapshot.get("cook_time", 0)} minutes
Servings: {snapshot.get("servings", 0)}
Estimated Cost: ${snapshot.get("estimated_cost", 0)}
Difficulty: {snapshot.get("difficulty") or "Not specified"}
Cuisine: {snapshot.get("cuisine_type") or "Not specified"}
Nutritional Info: {nutrition}

USER MODIFICATION REQUEST: "{modification_request}"

USER CONTEXT:
- Dietary Restrictions: {restrictions}
- Cooking Skill: {preferences.cooking_skill_level}
- Preferred Cuisines: {cuisines}

{DIETARY_CLAUSE}

{ALLOWED_INGREDIENTS_CLAUSE}

REQUIREMENTS:
1. Apply the requested modification while maintaining recipe quality
2. Ensure dietary restrictions are still met
3. Adjust cooking times, temperatures, and techniques as needed
4. Update nutritional information and estimated cost based on ingredient changes
5. Maintain or improve the recipe's difficulty level appropriately

RESPONSE FORMAT (must be valid JSON):
{{
  "modified_recipe": {{
    "recipe_name": "Updated recipe name",
    "ingredients": [{{"name": "ingredient name", "quantity": "amount with unit"}}],
    "instructions": "Updated step-by-step instructions",
    "prep_time": number,
    "cook_time": number,
    "servings": number,
    "estimated_cost": number,
    "difficulty": "Easy|Medium|Hard",
    "cuisine_type": "cuisine type",
    "nutritional_info": {{"calories": number, "protein": "g", "carbs": "g", "fats": "g"}},
    "tags": ["..."],
    "cooking_tips": ["..."]
  }},
  "explanation": {{
    "changes_made": ["List of specific changes made"],
    "reasoning": ["Explanation for each major change"],
    "impact_on_nutrition": "How nutrition changed",
    "impact_on_cooking_time": "How timing changed",
    "impact_on_difficulty": "How difficulty changed",
    "suggestions": ["Additional suggestions for the user"]
  }}
}}

{_JSON_ONLY}"""
