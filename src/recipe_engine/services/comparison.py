"""Structured differences between two recipe versions.

Everything here is pure and works on ``RecipeSnapshot`` values, so stored
recipes and variation snapshots compare the same way. The qualitative notes
are coarse heuristics and can be swapped without touching the engine.
"""

import re
from collections import defaultdict
from fractions import Fraction

from recipe_engine.domain.comparison import (
    CalorieDelta,
    CostDiff,
    DiffResult,
    DifficultyDiff,
    IngredientChange,
    IngredientDiff,
    IngredientModification,
    InstructionDiff,
    MacroDelta,
    NutritionDiff,
    Recommendation,
    TimingDiff,
    UnchangedIngredient,
)
from recipe_engine.domain.generation import GeneratedIngredient, RecipeSnapshot

DEFAULT_DIFFICULTY = "Medium"
DIFFICULTY_LEVELS = {"Easy": 1, "Medium": 2, "Hard": 3}
SKILL_REQUIREMENTS = {
    "Easy": ["Basic knife skills", "Following instructions"],
    "Medium": [
        "Intermediate cooking techniques",
        "Timing coordination",
        "Seasoning to taste",
    ],
    "Hard": [
        "Advanced techniques",
        "Precise timing",
        "Multiple cooking methods",
        "Professional skills",
    ],
}
TECHNIQUES: dict[str, tuple[str, ...]] = {
    "bake": ("bake",),
    "fry": ("fry",),
    "grill": ("grill",),
    "steam": ("steam",),
    "boil": ("boil",),
    "sauté": ("sauté", "saute"),
}
ORIGINAL_USE_CASES = [
    "Traditional preparation",
    "Special occasions",
    "When time is not a constraint",
]
VARIATION_USE_CASES = [
    "Quick weeknight meals",
    "Health-conscious cooking",
    "Budget-friendly options",
]
HEALTH_DECREASE_RATIO = 1.2
SIGNIFICANT_MINUTES = 10

_MIXED_NUMBER = re.compile(r"^\s*(\d+)\s+(\d+)\s*/\s*(\d+)")
_FRACTION = re.compile(r"^\s*(\d+)\s*/\s*(\d+)")
_DECIMAL = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)")
_STEP_SPLIT = re.compile(r"\d+\.|\n")


def diff_recipes(original: RecipeSnapshot, target: RecipeSnapshot) -> DiffResult:
    """Compute every difference between ``original`` and ``target``."""
    return DiffResult(
        ingredients=diff_ingredients(original.ingredients, target.ingredients),
        instructions=diff_instructions(original.instructions, target.instructions),
        nutrition=diff_nutrition(original, target),
        timing=diff_timing(original, target),
        difficulty=diff_difficulty(original.difficulty, target.difficulty),
        cost=diff_cost(original.estimated_cost, target.estimated_cost),
    )


def diff_ingredients(
    original: list[GeneratedIngredient], target: list[GeneratedIngredient]
) -> IngredientDiff:
    """Match ingredients by lowercase name.

    Repeated names pair up in order of appearance. A renamed ingredient shows
    up as one removal plus one addition.
    """
    target_by_name: dict[str, list[GeneratedIngredient]] = defaultdict(list)
    for item in target:
        target_by_name[item.name.lower()].append(item)

    removed: list[IngredientChange] = []
    modified: list[IngredientModification] = []
    unchanged: list[UnchangedIngredient] = []
    for item in original:
        candidates = target_by_name[item.name.lower()]
        if not candidates:
            removed.append(
                IngredientChange(
                    item.name, item.quantity, ingredient_impact(item.name, added=False)
                )
            )
            continue
        counterpart = candidates.pop(0)
        if counterpart.quantity == item.quantity:
            unchanged.append(UnchangedIngredient(item.name, item.quantity))
            continue
        change_type = quantity_change_type(item.quantity, counterpart.quantity)
        modified.append(
            IngredientModification(
                name=item.name,
                original_quantity=item.quantity,
                new_quantity=counterpart.quantity,
                change_type=change_type,
                impact=quantity_change_impact(item.name, change_type),
            )
        )

    leftovers = {id(item) for items in target_by_name.values() for item in items}
    added = [
        IngredientChange(item.name, item.quantity, ingredient_impact(item.name, added=True))
        for item in target
        if id(item) in leftovers
    ]
    return IngredientDiff(added=added, removed=removed, modified=modified, unchanged=unchanged)


def parse_quantity(quantity: str) -> float | None:
    """Return the leading amount of a quantity such as ``"1 1/2 cups"``."""
    if match := _MIXED_NUMBER.match(quantity):
        whole, numerator, denominator = (int(group) for group in match.groups())
        if denominator == 0:
            return None
        return float(whole + Fraction(numerator, denominator))
    if match := _FRACTION.match(quantity):
        numerator, denominator = (int(group) for group in match.groups())
        if denominator == 0:
            return None
        return float(Fraction(numerator, denominator))
    if match := _DECIMAL.match(quantity):
        return float(match.group(1))
    return None


def quantity_change_type(original: str, target: str) -> str:
    before = parse_quantity(original)
    after = parse_quantity(target)
    if before is None or after is None or before == after:
        return "unit_changed"
    return "increased" if after > before else "decreased"


def ingredient_impact(name: str, *, added: bool) -> str:
    lowered = name.lower()
    if "salt" in lowered or "pepper" in lowered:
        return "Enhanced seasoning" if added else "Reduced seasoning"
    if "oil" in lowered or "butter" in lowered:
        return "Increased richness" if added else "Reduced fat content"
    return "Added flavor complexity" if added else "Simplified recipe"


def quantity_change_impact(name: str, change_type: str) -> str:
    lowered = name.lower()
    increased = change_type == "increased"
    if "salt" in lowered or "pepper" in lowered:
        return "More seasoned" if increased else "Less seasoned"
    return "More prominent flavor" if increased else "Subtler flavor"


def diff_instructions(original: str, target: str) -> InstructionDiff:
    """Compare instructions step by step and note cooking technique changes."""
    original_steps = _steps(original)
    target_steps = _steps(target)
    return InstructionDiff(
        added_steps=[step for step in target_steps if step not in original_steps],
        removed_steps=[step for step in original_steps if step not in target_steps],
        technique_changes=technique_changes(original, target),
    )


def technique_changes(original: str, target: str) -> list[str]:
    before = original.lower()
    after = target.lower()
    changes: list[str] = []
    for technique, spellings in TECHNIQUES.items():
        in_original = any(spelling in before for spelling in spellings)
        in_target = any(spelling in after for spelling in spellings)
        if in_target and not in_original:
            changes.append(f"Added {technique} technique")
        elif in_original and not in_target:
            changes.append(f"Removed {technique} technique")
    return changes


def _steps(instructions: str) -> list[str]:
    return [step.strip() for step in _STEP_SPLIT.split(instructions) if step.strip()]


def diff_nutrition(original: RecipeSnapshot, target: RecipeSnapshot) -> NutritionDiff:
    before = original.nutritional_info
    after = target.nutritional_info
    calories_before = before.calories or 0.0
    calories_after = after.calories or 0.0
    change = calories_after - calories_before
    return NutritionDiff(
        calories=CalorieDelta(
            original=calories_before,
            new=calories_after,
            change=change,
            percentage=_percentage(change, calories_before),
        ),
        protein=_macro_delta("protein", before.protein, after.protein),
        carbs=_macro_delta("carbs", before.carbs, after.carbs),
        fats=_macro_delta("fats", before.fats, after.fats),
        overall_health_impact=health_impact(calories_before, calories_after),
    )


def _macro_delta(nutrient: str, original: str | None, target: str | None) -> MacroDelta:
    return MacroDelta(
        original=original or "0g",
        new=target or "0g",
        impact=nutrient_impact(nutrient, original, target),
    )


def nutrient_impact(nutrient: str, original: str | None, target: str | None) -> str:
    if not original or not target:
        return "No change"
    before = parse_quantity(original)
    after = parse_quantity(target)
    if before is None or after is None or before == after:
        return "No significant change"
    return f"Increased {nutrient}" if after > before else f"Decreased {nutrient}"


def health_impact(original_calories: float, target_calories: float) -> str:
    """Classify a calorie change as improved, neutral or decreased."""
    if 0 < target_calories < original_calories:
        return "improved"
    if target_calories > original_calories * HEALTH_DECREASE_RATIO:
        return "decreased"
    return "neutral"


def diff_timing(original: RecipeSnapshot, target: RecipeSnapshot) -> TimingDiff:
    prep_diff = target.prep_time - original.prep_time
    cook_diff = target.cook_time - original.cook_time
    total = prep_diff + cook_diff
    return TimingDiff(
        prep_time_original=original.prep_time,
        prep_time_new=target.prep_time,
        prep_time_diff=prep_diff,
        cook_time_original=original.cook_time,
        cook_time_new=target.cook_time,
        cook_time_diff=cook_diff,
        total_time_diff=total,
        efficiency_impact=efficiency_impact(total),
    )


def efficiency_impact(total_time_diff: int) -> str:
    if total_time_diff < -SIGNIFICANT_MINUTES:
        return "Significantly faster"
    if total_time_diff < 0:
        return "Slightly faster"
    if total_time_diff > SIGNIFICANT_MINUTES:
        return "Takes longer"
    return "Similar timing"


def diff_difficulty(original: str | None, target: str | None) -> DifficultyDiff:
    new = target or DEFAULT_DIFFICULTY
    return DifficultyDiff(
        original=original or DEFAULT_DIFFICULTY,
        new=new,
        change_reason=difficulty_change_reason(original, target),
        skill_requirements=list(
            SKILL_REQUIREMENTS.get(new, SKILL_REQUIREMENTS[DEFAULT_DIFFICULTY])
        ),
    )


def difficulty_change_reason(original: str | None, target: str | None) -> str:
    default_level = DIFFICULTY_LEVELS[DEFAULT_DIFFICULTY]
    before = DIFFICULTY_LEVELS.get(original or "", default_level)
    after = DIFFICULTY_LEVELS.get(target or "", default_level)
    if not original or not target or before == after:
        return "No difficulty change"
    if after > before:
        return "Added complexity through technique or ingredients"
    return "Simplified preparation or techniques"


def diff_cost(original: float, target: float) -> CostDiff:
    change = round(target - original, 2)
    return CostDiff(
        original=original,
        new=target,
        cost_diff=change,
        percentage=_percentage(change, original),
        cost_factors=cost_factors(change),
    )


def cost_factors(cost_diff: float) -> list[str]:
    if cost_diff > 0:
        return ["Premium ingredients added", "Increased portion size"]
    if cost_diff < 0:
        return ["Substituted with budget ingredients", "Reduced portion size"]
    return ["Similar ingredient costs"]


def recommend(differences: DiffResult) -> Recommendation:
    """Prefer the variation when any tracked metric improves."""
    reasoning: list[str] = []
    if differences.nutrition.overall_health_impact == "improved":
        reasoning.append("Improved nutritional profile")
    if differences.timing.total_time_diff < 0:
        reasoning.append("Reduced cooking time")
    if differences.cost.cost_diff < 0:
        reasoning.append("Lower cost")
    return Recommendation(
        preferred_version="variation" if reasoning else "original",
        reasoning=reasoning or ["Both versions have their merits"],
        original_use_cases=list(ORIGINAL_USE_CASES),
        variation_use_cases=list(VARIATION_USE_CASES),
    )


def _percentage(change: float, base: float) -> int:
    if base <= 0:
        return 0
    return round(change / base * 100)
