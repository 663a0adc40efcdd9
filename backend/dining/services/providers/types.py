"""Wire types for the dining data source. Same shape regardless of which client produced them."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upstream JSON is camelCase; python attributes are snake_case with aliases.
# Unknown fields are ignored and missing text fields default to "" so one odd record
# does not fail a whole day's decode.


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class HoursException(_WireModel):
    """Date-scoped override of an event's hours. open=False means closed all day."""

    id: int = 0
    name: str = ""
    start_time: str = Field(default="", alias="startTime")
    end_time: str = Field(default="", alias="endTime")
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    open: bool = True


class RawEvent(_WireModel):
    """One scheduled opening rule (base hours) for a location."""

    start_time: str = Field(default="", alias="startTime")
    end_time: str = Field(default="", alias="endTime")
    exceptions: list[HoursException] | None = None


class RawMenu(_WireModel):
    """Menu label: either a visiting chef or a daily special (by category). Specials have no description."""

    name: str = ""
    description: str | None = None
    category: str = ""


class RawLocation(_WireModel):
    """One location's record for one requested date."""

    id: int
    name: str = ""
    summary: str = ""
    description: str = ""
    maps_url: str = Field(default="", alias="mapsUrl")
    mdo_id: int | None = Field(default=None, alias="mdoId")
    events: list[RawEvent] = Field(default_factory=list)
    menus: list[RawMenu] = Field(default_factory=list)


class RawOccupancy(_WireModel):
    """First record of the occupancy endpoint; hourly breakdown is not used."""

    count: int = 0
    max_occ: int = 0
    location: str = ""
    open_status: str = ""


class RawMenuRecipe(_WireModel):
    """One recipe from the meal-planner menu for a single meal period."""

    component_id: int = Field(default=0, alias="componentId")
    component_name: str = Field(default="", alias="componentName")
    english_alternate_name: str = Field(default="", alias="englishAlternateName")
    category: str = ""
    allergen_name: str = Field(default="", alias="allergenName")
    recipe_product_dietary_name: str = Field(default="", alias="recipeProductDietaryName")
    calories: str = ""
    ingredient_statement: str = Field(default="", alias="ingredientStatement")
    selling_price: float = Field(default=0.0, alias="sellingPrice")
    product_measuring_size: float = Field(default=0.0, alias="productMeasuringSize")
    product_measuring_size_unit: str = Field(default="", alias="productMeasuringSizeUnit")

    @field_validator(
        "component_name",
        "english_alternate_name",
        "category",
        "allergen_name",
        "recipe_product_dietary_name",
        "calories",
        "ingredient_statement",
        "product_measuring_size_unit",
        mode="before",
    )
    @classmethod
    def null_as_text(cls, v: Any) -> str:
        # upstream sends null for blank text and sometimes a number for calories
        return "" if v is None else str(v)

    @field_validator("selling_price", "product_measuring_size", mode="before")
    @classmethod
    def null_as_zero(cls, v: Any) -> Any:
        return 0.0 if v in (None, "") else v


class RawMealPlannerDay(_WireModel):
    all_menu_recipes: list[RawMenuRecipe] | None = Field(default=None, alias="allMenuRecipes")


class RawMealPlannerMenu(_WireModel):
    """Meal-planner menu response: `result` holds one entry per requested day (we request one)."""

    result: list[RawMealPlannerDay] = Field(default_factory=list)


def parse_locations(payload: Any) -> list[RawLocation]:
    """Decode a dining-all payload ({"locations": [...]}) into RawLocation records."""
    if not isinstance(payload, dict):
        raise ValueError(f"expected an object with 'locations', got {type(payload).__name__}")
    return [RawLocation.model_validate(item) for item in payload.get("locations") or []]
