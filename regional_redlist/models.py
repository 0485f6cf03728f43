"""Assessment records and per-stage results.

Records serialise to plain JSON-compatible dicts with camelCase keys so a
stored assessment reads the same regardless of the storage backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from regional_redlist.categories import Category, category_code, parse_category

logger = logging.getLogger(__name__)


class Answer(Enum):
    """Tri-state answer to a yes/no question."""

    YES = "yes"
    NO = "no"
    UNANSWERED = "unanswered"

    @classmethod
    def from_value(cls, value: Answer | bool | str | None) -> Answer:
        """Coerce ``True``/``False``/``None`` (or their string forms) to an answer."""
        if isinstance(value, Answer):
            return value
        if value is True or value == "yes":
            return cls.YES
        if value is False or value == "no":
            return cls.NO
        return cls.UNANSWERED

    def to_json(self) -> bool | None:
        """Stored form: ``true``, ``false`` or ``null``."""
        if self is Answer.YES:
            return True
        if self is Answer.NO:
            return False
        return None


class RescueEffect(Enum):
    """Answer to "can immigration rescue the regional population?"."""

    YES = "yes"
    NO = "no"
    UNCERTAIN = "uncertain"
    UNANSWERED = "unanswered"

    @classmethod
    def from_value(cls, value: RescueEffect | str | None) -> RescueEffect:
        if isinstance(value, RescueEffect):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNANSWERED

    def to_json(self) -> str | None:
        return None if self is RescueEffect.UNANSWERED else self.value


class PopulationTrend(Enum):
    """Direction of change of the regional population."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECLINING = "declining"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: PopulationTrend | str | None) -> PopulationTrend:
        if isinstance(value, PopulationTrend):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class Status(Enum):
    """Lifecycle status of an assessment record."""

    DRAFT = "draft"
    READY_FOR_REVIEW = "ready-for-review"
    COMPLETED = "completed"


class Stage(IntEnum):
    """Workflow stages in order; ``OUTPUT`` is the review/completion screen."""

    STAGE1 = 1
    STAGE2 = 2
    STAGE3 = 3
    OUTPUT = 4


def to_optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric value %r", value)
        return None


def to_optional_int(value: Any) -> int | None:
    number = to_optional_float(value)
    return None if number is None else int(number)


def to_flag(value: Any) -> bool:
    """Coerce a stored or entered flag; only ``True``/``"true"``/``"yes"`` are set."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes")
    return value is True or value == 1


def to_text(value: Any) -> str:
    """Coerce free text; ``None`` is empty."""
    return "" if value is None else str(value)


@dataclass
class Step1Result:
    """Eligibility answers for Step 1.

    ``eligible`` is derived from the four answers by
    :func:`~regional_redlist.evaluate.evaluate_step1`; it is not an input.

    Parameters
    ----------
    is_native : Answer
        Population is native or a benign introduction.
    has_breeding : Answer
        A breeding population exists in the region.
    has_visiting : Answer
        A visiting (non-breeding) population exists in the region.
    is_vagrant : Answer
        Occurrence is vagrant (occasional or unpredictable).
    rationale : str
        Free-text justification.
    eligible : bool
        Derived eligibility.
    """

    is_native: Answer = Answer.UNANSWERED
    has_breeding: Answer = Answer.UNANSWERED
    has_visiting: Answer = Answer.UNANSWERED
    is_vagrant: Answer = Answer.UNANSWERED
    rationale: str = ""
    eligible: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "isNative": self.is_native.to_json(),
            "hasBreeding": self.has_breeding.to_json(),
            "hasVisiting": self.has_visiting.to_json(),
            "isVagrant": self.is_vagrant.to_json(),
            "eligible": self.eligible,
            "rationale": self.rationale,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Step1Result:
        return cls(
            is_native=Answer.from_value(data.get("isNative")),
            has_breeding=Answer.from_value(data.get("hasBreeding")),
            has_visiting=Answer.from_value(data.get("hasVisiting")),
            is_vagrant=Answer.from_value(data.get("isVagrant")),
            rationale=data.get("rationale") or "",
            eligible=to_flag(data.get("eligible")),
        )


@dataclass
class Step2Result:
    """Regional metrics for Step 2 plus the derived preliminary category.

    Numeric metrics use ``None`` for "unknown"; ``0`` is a real value.

    Parameters
    ----------
    population_size : float | None
        Number of mature individuals in the region.
    population_trend : PopulationTrend
        Direction of population change.
    decline_percent : float | None
        Observed or projected decline, 0-100.
    eoo : float | None
        Extent of occurrence in km².
    aoo : float | None
        Area of occupancy in km².
    locations : int | None
        Number of threat-defined locations.
    severely_fragmented : bool
        Whether the population is severely fragmented.
    threats : str
        Free-text description of threats.
    preliminary_category : Category | str | None
        Derived category; ``None`` until evaluated.
    criteria_met : str
        Derived criteria label, e.g. ``"A, B"``.
    confidence : int
        Derived data-coverage score, 0-100.
    """

    population_size: float | None = None
    population_trend: PopulationTrend = PopulationTrend.UNKNOWN
    decline_percent: float | None = None
    eoo: float | None = None
    aoo: float | None = None
    locations: int | None = None
    severely_fragmented: bool = False
    threats: str = ""
    preliminary_category: Category | str | None = None
    criteria_met: str = ""
    confidence: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "populationSize": self.population_size,
            "populationTrend": self.population_trend.value,
            "declinePercent": self.decline_percent,
            "eoo": self.eoo,
            "aoo": self.aoo,
            "locations": self.locations,
            "severelyFragmented": self.severely_fragmented,
            "threats": self.threats,
            "preliminaryCategory": category_code(self.preliminary_category),
            "criteriaMet": self.criteria_met,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Step2Result:
        return cls(
            population_size=to_optional_float(data.get("populationSize")),
            population_trend=PopulationTrend.from_value(data.get("populationTrend")),
            decline_percent=to_optional_float(data.get("declinePercent")),
            eoo=to_optional_float(data.get("eoo")),
            aoo=to_optional_float(data.get("aoo")),
            locations=to_optional_int(data.get("locations")),
            severely_fragmented=to_flag(data.get("severelyFragmented")),
            threats=data.get("threats") or "",
            preliminary_category=parse_category(data.get("preliminaryCategory") or None),
            criteria_met=data.get("criteriaMet") or "",
            confidence=int(data.get("confidence") or 0),
        )


@dataclass
class Step3Result:
    """Extra-regional adjustment answers for Step 3 plus the derived final category.

    Parameters
    ----------
    rescue_effect : RescueEffect
        Whether immigration could rescue the regional population.
    immigration_likely : Answer
        Immigration of propagules into the region is likely.
    source_stable : Answer
        The extra-regional source population is stable.
    is_sink : Answer
        The regional population is a sink.
    adjustment_rationale : str
        Free-text justification.
    final_category : Category | str | None
        Derived regional category after adjustment.
    adjustment_steps : int
        Signed step count: positive downlisted, negative uplisted.
    """

    rescue_effect: RescueEffect = RescueEffect.UNANSWERED
    immigration_likely: Answer = Answer.UNANSWERED
    source_stable: Answer = Answer.UNANSWERED
    is_sink: Answer = Answer.UNANSWERED
    adjustment_rationale: str = ""
    final_category: Category | str | None = None
    adjustment_steps: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "rescueEffect": self.rescue_effect.to_json(),
            "immigrationLikely": self.immigration_likely.to_json(),
            "sourceStable": self.source_stable.to_json(),
            "isSink": self.is_sink.to_json(),
            "adjustmentRationale": self.adjustment_rationale,
            "finalCategory": category_code(self.final_category),
            "adjustmentSteps": self.adjustment_steps,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Step3Result:
        return cls(
            rescue_effect=RescueEffect.from_value(data.get("rescueEffect")),
            immigration_likely=Answer.from_value(data.get("immigrationLikely")),
            source_stable=Answer.from_value(data.get("sourceStable")),
            is_sink=Answer.from_value(data.get("isSink")),
            adjustment_rationale=data.get("adjustmentRationale") or "",
            final_category=parse_category(data.get("finalCategory") or None),
            adjustment_steps=int(data.get("adjustmentSteps") or 0),
        )


@dataclass
class AssessmentSummary:
    """Fields frozen onto a record by the terminal "complete" action."""

    completed_at: str
    final_category: str
    criteria_string: str
    adjusted: bool
    steps_changed: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "completedAt": self.completed_at,
            "finalCategory": self.final_category,
            "criteriaString": self.criteria_string,
            "adjusted": self.adjusted,
            "stepsChanged": self.steps_changed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssessmentSummary:
        return cls(
            completed_at=data.get("completedAt", ""),
            final_category=data.get("finalCategory", ""),
            criteria_string=data.get("criteriaString", ""),
            adjusted=to_flag(data.get("adjusted")),
            steps_changed=int(data.get("stepsChanged") or 0),
        )


@dataclass
class AssessmentRecord:
    """One regional assessment and everything confirmed so far.

    Parameters
    ----------
    id : str
        Opaque assessment identifier.
    taxon_name : str
        Common name (display only).
    scientific_name : str
        Scientific name (display only).
    status : Status
        Lifecycle status.
    current_stage : int
        Furthest stage the record may be opened at (1-4).
    created_at : str
        ISO-8601 creation timestamp.
    last_modified : str
        ISO-8601 timestamp of the last save.
    region : str
        Assessed region identifier (display only).
    population_type : str
        ``"breeding"``, ``"visiting"`` or ``"combined"`` (display only).
    step1, step2, step3 : Step1Result | Step2Result | Step3Result | None
        Confirmed stage results.
    summary : AssessmentSummary | None
        Frozen outcome, set on completion.
    """

    id: str
    taxon_name: str = ""
    scientific_name: str = ""
    status: Status = Status.DRAFT
    current_stage: int = Stage.STAGE1
    created_at: str = ""
    last_modified: str = ""
    region: str = ""
    population_type: str = ""
    step1: Step1Result | None = None
    step2: Step2Result | None = None
    step3: Step3Result | None = None
    summary: AssessmentSummary | None = None

    def flat_summary(self) -> dict[str, Any]:
        """Finalized fields for external exporters.

        Returns
        -------
        dict[str, Any]
            Keys ``finalCategory``, ``criteriaMet``, ``preliminaryCategory``,
            ``adjustmentSteps``, ``adjustmentRationale`` and ``confidence``.
        """
        step2 = self.step2 or Step2Result()
        step3 = self.step3 or Step3Result()
        final = step3.final_category or step2.preliminary_category
        return {
            "finalCategory": category_code(final),
            "criteriaMet": step2.criteria_met,
            "preliminaryCategory": category_code(step2.preliminary_category),
            "adjustmentSteps": step3.adjustment_steps,
            "adjustmentRationale": step3.adjustment_rationale,
            "confidence": step2.confidence,
        }

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "taxonName": self.taxon_name,
            "scientificName": self.scientific_name,
            "status": self.status.value,
            "currentStep": int(self.current_stage),
            "createdAt": self.created_at,
            "lastModified": self.last_modified,
            "region": self.region,
            "populationType": self.population_type,
        }
        if self.step1 is not None:
            data["step1"] = self.step1.to_dict()
        if self.step2 is not None:
            data["step2"] = self.step2.to_dict()
        if self.step3 is not None:
            data["step3"] = self.step3.to_dict()
        if self.summary is not None:
            data["summary"] = self.summary.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssessmentRecord:
        """Rebuild a record from its stored dict.

        Raises
        ------
        KeyError
            If ``id`` is missing.
        """
        try:
            status = Status(data.get("status", Status.DRAFT.value))
        except ValueError:
            logger.warning("Unknown status %r for assessment %s; using draft", data.get("status"), data["id"])
            status = Status.DRAFT
        stage = int(data.get("currentStep") or Stage.STAGE1)
        return cls(
            id=data["id"],
            taxon_name=data.get("taxonName", ""),
            scientific_name=data.get("scientificName", ""),
            status=status,
            current_stage=min(max(stage, Stage.STAGE1), Stage.OUTPUT),
            created_at=data.get("createdAt", ""),
            last_modified=data.get("lastModified", ""),
            region=data.get("region") or "",
            population_type=data.get("populationType") or "",
            step1=Step1Result.from_dict(data["step1"]) if data.get("step1") else None,
            step2=Step2Result.from_dict(data["step2"]) if data.get("step2") else None,
            step3=Step3Result.from_dict(data["step3"]) if data.get("step3") else None,
            summary=AssessmentSummary.from_dict(data["summary"]) if data.get("summary") else None,
        )
