"""
Menu parsers: visiting chef appearances and daily specials from location menu labels,
plus meal-planner recipes (parse_menu_items).

Both split a label on the first "(":
  "Example Chef (4-7p.m.)"      -> chef "Example Chef", 16:00-19:00
  "Chef Name (11 a.m.-2 p.m.)"  -> chef "Chef Name", 11:00-14:00
  "Tomato Soup (Soup)"          -> special "Tomato Soup", type "Soup"

Chef times are hour-only. A start without "a.m" is read as p.m. and the end is
always p.m.; upstream labels have never shown an appearance ending before noon.
"""
import logging
import math
import re
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from dining.core.constants import (
    MENU_CATEGORY_DAILY_SPECIAL,
    MENU_CATEGORY_VISITING_CHEF,
    STATUS_LOOKAHEAD,
)
from dining.services.providers.types import RawMealPlannerMenu, RawMenu, RawMenuRecipe
from dining.services.schedule.intervals import anchor, wrap_close
from dining.services.schedule.status import chef_status
from dining.services.schedule.types import ChefAppearance, DailySpecial, MenuItem, NormalizedInterval

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")
PM_OFFSET = 12
MAX_HOUR = 24


class ChefLabelError(ValueError):
    """Chef label does not match "<Name> (<start>-<end>)"."""


def split_label(label: str) -> tuple[str, str | None]:
    """("name", "rest without trailing ')'") on the first "("; rest is None when there is no "("."""
    name, sep, rest = (label or "").partition("(")
    if not sep:
        return name.strip(), None
    rest = rest.strip()
    if rest.endswith(")"):
        rest = rest[:-1]
    return name.strip(), rest


def _hour_digits(token: str, label: str) -> int:
    digits = _NON_DIGITS.sub("", token)
    if not digits:
        raise ChefLabelError(f"no hour in {token!r} of chef label {label!r}")
    return int(digits)


def parse_chef_hours(label: str) -> tuple[str, int, int]:
    """(name, start_hour, end_hour) from a chef label. Raises ChefLabelError."""
    name, rest = split_label(label)
    if rest is None:
        raise ChefLabelError(f"no time range in chef label {label!r}")
    start_token, sep, end_token = rest.partition("-")
    if not sep:
        raise ChefLabelError(f"no '-' in chef label {label!r}")

    start_hour = _hour_digits(start_token, label)
    if "a.m" not in start_token:
        start_hour += PM_OFFSET
    end_hour = _hour_digits(end_token, label) + PM_OFFSET

    if start_hour > MAX_HOUR or end_hour > MAX_HOUR:
        raise ChefLabelError(f"hour out of range in chef label {label!r}")
    return name, start_hour, end_hour


def parse_chef_appearance(
    label: str,
    description: str | None,
    day: date,
    now: datetime,
    *,
    tz: tzinfo,
    lookahead: timedelta = STATUS_LOOKAHEAD,
) -> ChefAppearance:
    """Chef label -> ChefAppearance with its status at `now`. Raises ChefLabelError."""
    name, start_hour, end_hour = parse_chef_hours(label)
    open_at = anchor(day, start_hour, tz=tz)
    close_at = wrap_close(open_at, anchor(day, end_hour, tz=tz))
    window = NormalizedInterval(open=open_at, close=close_at)
    return ChefAppearance(
        name=name,
        description=description or "",
        open=open_at,
        close=close_at,
        status=chef_status(now, window, lookahead),
    )


def parse_daily_special(label: str) -> DailySpecial:
    """Special label -> DailySpecial. No "(" means an empty type."""
    name, rest = split_label(label)
    return DailySpecial(name=name, type=rest or "")


def parse_menus(
    menus: Iterable[RawMenu],
    day: date,
    now: datetime,
    *,
    tz: tzinfo,
    lookahead: timedelta = STATUS_LOOKAHEAD,
    location_name: str = "",
) -> tuple[list[ChefAppearance], list[DailySpecial]]:
    """
    Split a location's menus into chefs and specials, in upstream order.

    The first malformed chef label stops parsing for the rest of this location's
    menus (entries after it are dropped, entries before it are kept).
    """
    chefs: list[ChefAppearance] = []
    specials: list[DailySpecial] = []
    for menu in menus:
        if menu.category == MENU_CATEGORY_VISITING_CHEF:
            try:
                chefs.append(
                    parse_chef_appearance(menu.name, menu.description, day, now, tz=tz, lookahead=lookahead)
                )
            except ChefLabelError as e:
                logger.warning(
                    "Stopping menu parse for %s on %s after malformed chef label: %s",
                    location_name or "location",
                    day.isoformat(),
                    e,
                )
                break
        elif menu.category == MENU_CATEGORY_DAILY_SPECIAL:
            specials.append(parse_daily_special(menu.name))
    return chefs, specials


DIETARY_VEGAN = "Vegan"
DIETARY_VEGETARIAN = "Vegetarian"


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in (value or "").split(",") if part.strip())


def _dietary_markers(value: str) -> tuple[str, ...]:
    """Comma-separated markers; "Vegetarian" is redundant next to "Vegan" and is dropped."""
    markers = _split_list(value)
    if DIETARY_VEGAN in markers:
        markers = tuple(m for m in markers if m != DIETARY_VEGETARIAN)
    return markers


def _calories(value: str) -> int | None:
    """Calories rounded half up; None when the field is blank or not a number."""
    try:
        calories = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(calories):
        return None
    return math.floor(calories + 0.5)


def parse_menu_item(recipe: RawMenuRecipe) -> MenuItem:
    return MenuItem(
        id=recipe.component_id,
        # the alternate name is the display name but is blank for some recipes
        name=recipe.english_alternate_name.strip() or recipe.component_name,
        exact_name=recipe.component_name,
        category=recipe.category,
        allergens=_split_list(recipe.allergen_name),
        calories=_calories(recipe.calories),
        dietary_markers=_dietary_markers(recipe.recipe_product_dietary_name),
        ingredients=recipe.ingredient_statement,
        price=recipe.selling_price,
        serving_size=recipe.product_measuring_size,
        serving_size_unit=recipe.product_measuring_size_unit,
    )


def parse_menu_items(menu: RawMealPlannerMenu) -> list[MenuItem]:
    """
    Meal-planner menu -> MenuItem list, in upstream order.
    Only the first day of `result` is read; a menu is requested for one day at a time.
    """
    if not menu.result:
        return []
    recipes = menu.result[0].all_menu_recipes or []
    return [parse_menu_item(recipe) for recipe in recipes]
