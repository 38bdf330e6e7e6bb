"""Domain models for comparing two recipe versions."""

from dataclasses import dataclass, field

from recipe_engine.domain.recipes import Recipe, RecipeVariation


@dataclass(frozen=True)
class IngredientChange:
    """An ingredient present on only one side."""

    name: str
    quantity: str
    impact: str


@dataclass(frozen=True)
class IngredientModification:
    """An ingredient present on both sides with a different quantity."""

    name: str
    original_quantity: str
    new_quantity: str
    change_type: str
    impact: str


@dataclass(frozen=True)
class UnchangedIngredient:
    """An ingredient with the same quantity on both sides."""

    name: str
    quantity: str


@dataclass(frozen=True)
class IngredientDiff:
    """Ingredient deltas matched by case-insensitive name."""

    added: list[IngredientChange] = field(default_factory=list)
    removed: list[IngredientChange] = field(default_factory=list)
    modified: list[IngredientModification] = field(default_factory=list)
    unchanged: list[UnchangedIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class InstructionDiff:
    """Step-level instruction deltas."""

    added_steps: list[str] = field(default_factory=list)
    removed_steps: list[str] = field(default_factory=list)
    technique_changes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CalorieDelta:
    """Numeric calorie change."""

    original: float
    new: float
    change: float
    percentage: int


@dataclass(frozen=True)
class MacroDelta:
    """Qualitative change for a free-text macro value."""

    original: str
    new: str
    impact: str


@dataclass(frozen=True)
class NutritionDiff:
    """Nutrition deltas with a coarse health classification."""

    calories: CalorieDelta
    protein: MacroDelta
    carbs: MacroDelta
    fats: MacroDelta
    overall_health_impact: str


@dataclass(frozen=True)
class TimingDiff:
    """Timing deltas in minutes."""

    prep_time_original: int
    prep_time_new: int
    prep_time_diff: int
    cook_time_original: int
    cook_time_new: int
    cook_time_diff: int
    total_time_diff: int
    efficiency_impact: str


@dataclass(frozen=True)
class DifficultyDiff:
    """Difficulty change with its explanation."""

    original: str
    new: str
    change_reason: str
    skill_requirements: list[str]


@dataclass(frozen=True)
class CostDiff:
    """Estimated cost change."""

    original: float
    new: float
    cost_diff: float
    percentage: int
    cost_factors: list[str]


@dataclass(frozen=True)
class DiffResult:
    """Structured difference between two recipe versions."""

    ingredients: IngredientDiff
    instructions: InstructionDiff
    nutrition: NutritionDiff
    timing: TimingDiff
    difficulty: DifficultyDiff
    cost: CostDiff


@dataclass(frozen=True)
class Recommendation:
    """Which version to prefer and why."""

    preferred_version: str
    reasoning: list[str]
    original_use_cases: list[str]
    variation_use_cases: list[str]


@dataclass(frozen=True)
class RecipeComparison:
    """An original recipe compared with its most recent variation."""

    original: Recipe
    variations: list[RecipeVariation]
    differences: DiffResult


@dataclass(frozen=True)
class DetailedComparison:
    """An original recipe compared with one chosen variation."""

    original: Recipe
    comparison_target: RecipeVariation
    differences: DiffResult
    recommendation: Recommendation
