"""Step 2: preliminary regional category from population and range metrics.

A deliberately simplified subset of the Red List criteria:

- **A** population decline,
- **B** geographic range (EOO with few locations or severe fragmentation),
- **C** small population size, with decline for EN and VU.

Every criterion that fires raises the category to at least its own level
and adds its letter to the criteria label, so the label can list a
criterion that is not the one the final category came from.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from regional_redlist.categories import Category, at_least_as_severe
from regional_redlist.models import RescueEffect, Step2Result

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_LABEL = "Insufficient data"
LEAST_CONCERN_LABEL = "None (Least Concern)"

# Points each present field contributes to the confidence score.
CONFIDENCE_POINTS: dict[str, int] = {
    "population_size": 20,
    "decline_percent": 20,
    "eoo": 15,
    "aoo": 15,
    "locations": 10,
    "threats": 20,
}
MAX_CONFIDENCE = 100
THREATS_DETAIL_CHARS = 50
CONFIDENCE_TARGET = 80


@dataclass
class PreliminaryResult:
    """Outcome of the Step 2 rules.

    Parameters
    ----------
    category : Category
        Preliminary category (CR, EN, VU, LC or DD).
    criteria : str
        Comma-joined criteria letters, or a descriptive label.
    """

    category: Category
    criteria: str


def _decline_category(decline: float) -> Category | None:
    if decline >= 80:
        return Category.CR
    if decline >= 50:
        return Category.EN
    if decline >= 30:
        return Category.VU
    return None


def _range_category(eoo: float, locations: int, fragmented: bool) -> Category | None:
    if eoo < 100 and (locations <= 1 or fragmented):
        return Category.CR
    if eoo < 5000 and (locations <= 5 or fragmented):
        return Category.EN
    if eoo < 20000 and (locations <= 10 or fragmented):
        return Category.VU
    return None


def _population_category(population: float, decline: float) -> Category | None:
    if population < 250:
        return Category.CR
    if population < 2500 and decline >= 25:
        return Category.EN
    if population < 10000 and decline >= 10:
        return Category.VU
    return None


def evaluate_preliminary(
    *,
    population_size: float | None = None,
    decline_percent: float | None = None,
    eoo: float | None = None,
    aoo: float | None = None,
    locations: int | None = None,
    severely_fragmented: bool = False,
) -> PreliminaryResult:
    """Compute the preliminary category and the criteria that fired.

    Unknown metrics (``None``) are read as ``0`` by the rules. When
    population size, decline, EOO and AOO are all unknown the result is
    ``DD`` without consulting the rules.

    Parameters
    ----------
    population_size : float | None
        Mature individuals in the region.
    decline_percent : float | None
        Population decline in percent.
    eoo : float | None
        Extent of occurrence, km².
    aoo : float | None
        Area of occupancy, km². Only used for the data-deficient check.
    locations : int | None
        Number of locations.
    severely_fragmented : bool
        Severe fragmentation flag.

    Returns
    -------
    PreliminaryResult
    """
    if population_size is None and decline_percent is None and eoo is None and aoo is None:
        return PreliminaryResult(category=Category.DD, criteria=INSUFFICIENT_DATA_LABEL)

    population = population_size if population_size is not None else 0.0
    decline = decline_percent if decline_percent is not None else 0.0
    extent = eoo if eoo is not None else 0.0
    n_locations = locations if locations is not None else 0

    candidates = (
        ("A", _decline_category(decline)),
        ("B", _range_category(extent, n_locations, severely_fragmented)),
        ("C", _population_category(population, decline)),
    )

    category: Category | None = None
    letters: list[str] = []
    for letter, candidate in candidates:
        if candidate is None or not at_least_as_severe(candidate, category):
            continue
        category = candidate
        letters.append(letter)

    if category is None:
        return PreliminaryResult(category=Category.LC, criteria=LEAST_CONCERN_LABEL)

    result = PreliminaryResult(category=category, criteria=", ".join(letters))
    logger.debug("Preliminary category %s (criteria %s)", result.category.value, result.criteria)
    return result


def score_confidence(
    *,
    population_size: float | None = None,
    decline_percent: float | None = None,
    eoo: float | None = None,
    aoo: float | None = None,
    locations: int | None = None,
    threats: str = "",
    threats_detail_chars: int = THREATS_DETAIL_CHARS,
) -> int:
    """Score how much of the Step 2 evidence has been supplied.

    This is a coverage heuristic, not a statistical confidence.

    Returns
    -------
    int
        Score between 0 and 100.
    """
    present = {
        "population_size": population_size is not None,
        "decline_percent": decline_percent is not None,
        "eoo": eoo is not None,
        "aoo": aoo is not None,
        "locations": locations is not None,
        "threats": len(threats or "") > threats_detail_chars,
    }
    score = sum(points for name, points in CONFIDENCE_POINTS.items() if present[name])
    return min(MAX_CONFIDENCE, score)


def evaluate_step2(step2: Step2Result, *, threats_detail_chars: int = THREATS_DETAIL_CHARS) -> Step2Result:
    """Return a copy of *step2* with its derived fields filled in."""
    result = evaluate_preliminary(
        population_size=step2.population_size,
        decline_percent=step2.decline_percent,
        eoo=step2.eoo,
        aoo=step2.aoo,
        locations=step2.locations,
        severely_fragmented=step2.severely_fragmented,
    )
    confidence = score_confidence(
        population_size=step2.population_size,
        decline_percent=step2.decline_percent,
        eoo=step2.eoo,
        aoo=step2.aoo,
        locations=step2.locations,
        threats=step2.threats,
        threats_detail_chars=threats_detail_chars,
    )
    return dataclasses.replace(
        step2,
        preliminary_category=result.category,
        criteria_met=result.criteria,
        confidence=confidence,
    )


def suggest_data_gaps(
    step2: Step2Result,
    rescue_effect: RescueEffect = RescueEffect.UNANSWERED,
    *,
    confidence_target: int = CONFIDENCE_TARGET,
    threats_detail_chars: int = THREATS_DETAIL_CHARS,
) -> list[str]:
    """List the evidence that would raise a low confidence score.

    Parameters
    ----------
    step2 : Step2Result
        Confirmed Step 2 data, including its ``confidence``.
    rescue_effect : RescueEffect
        Step 3 rescue-effect answer, if any.
    confidence_target : int
        No suggestions are made at or above this confidence.
    threats_detail_chars : int
        Threat descriptions shorter than this are flagged.

    Returns
    -------
    list[str]
    """
    if step2.confidence >= confidence_target:
        return []
    gaps: list[str] = []
    if step2.eoo is None:
        gaps.append("Extent of Occurrence (EOO)")
    if step2.aoo is None:
        gaps.append("Area of Occupancy (AOO)")
    if step2.locations is None:
        gaps.append("Number of locations")
    if len(step2.threats) < threats_detail_chars:
        gaps.append("Detailed threat assessment")
    if rescue_effect is RescueEffect.UNCERTAIN:
        gaps.append("Extra-regional population status")
    return gaps
