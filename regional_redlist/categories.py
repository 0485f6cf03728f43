"""Regional risk categories and the ordering rules used to compare and shift them."""

from __future__ import annotations

from enum import Enum


class Category(Enum):
    """Regional Red List category."""

    CR = "CR"
    EN = "EN"
    VU = "VU"
    NT = "NT"
    LC = "LC"
    DD = "DD"


# Index 0 is the most at risk; adjustment moves along this tuple.
SCALE: tuple[Category, ...] = (
    Category.CR,
    Category.EN,
    Category.VU,
    Category.NT,
    Category.LC,
)

SEVERITY: dict[Category, int] = {
    Category.CR: 4,
    Category.EN: 3,
    Category.VU: 2,
    Category.NT: 1,
    Category.LC: 0,
}

CATEGORY_NAMES: dict[Category, str] = {
    Category.CR: "Critically Endangered",
    Category.EN: "Endangered",
    Category.VU: "Vulnerable",
    Category.NT: "Near Threatened",
    Category.LC: "Least Concern",
    Category.DD: "Data Deficient",
}


def parse_category(value: Category | str | None) -> Category | str | None:
    """Coerce a stored category code to :class:`Category`.

    Unrecognized strings are returned unchanged so callers can pass them
    through instead of failing.

    Parameters
    ----------
    value : Category | str | None
        A category member, a category code such as ``"EN"``, or ``None``.

    Returns
    -------
    Category | str | None
    """
    if value is None or isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError:
        return value


def category_code(value: Category | str | None) -> str:
    """Return the plain string code for a category (``""`` for ``None``)."""
    if value is None:
        return ""
    if isinstance(value, Category):
        return value.value
    return value


def scale_index(category: Category | str | None) -> int | None:
    """Position of *category* on :data:`SCALE`, or ``None`` when it is not a scale member."""
    category = parse_category(category)
    if not isinstance(category, Category) or category not in SCALE:
        return None
    return SCALE.index(category)


def shift(category: Category, steps: int) -> Category:
    """Move *category* along the scale, clamping at both ends.

    Positive *steps* move toward LC (less risk), negative toward CR.

    Raises
    ------
    ValueError
        If *category* is not on the five-member scale.
    """
    index = scale_index(category)
    if index is None:
        msg = f"Category {category!r} is not on the adjustment scale"
        raise ValueError(msg)
    new_index = min(max(index + steps, 0), len(SCALE) - 1)
    return SCALE[new_index]


def at_least_as_severe(candidate: Category, current: Category | None) -> bool:
    """Return ``True`` when *candidate* is at least as severe as *current*.

    ``None`` stands for "nothing selected yet" and loses against any category.
    """
    if current is None:
        return True
    return SEVERITY[candidate] >= SEVERITY[current]
