"""Assessment workflow: a linear, stage-gated state machine over one record.

Stages run ``STAGE1 -> STAGE2 -> STAGE3 -> OUTPUT``. Each forward move has
one guard; a rejected move leaves the workflow where it was. Moving back is
always allowed and never discards entered data. Only the open stage's
inputs are evaluated live; confirmed results of earlier stages are read
as-is.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from regional_redlist.config import RedListConfig, WorkflowConfig, load_config
from regional_redlist.evaluate import (
    evaluate_step1,
    evaluate_step2,
    evaluate_step3,
    gate_step3_answers,
    suggest_data_gaps,
)
from regional_redlist.events import ASSESSMENT_COMPLETED, STAGE_COMPLETED, EventHub
from regional_redlist.models import (
    Answer,
    AssessmentRecord,
    AssessmentSummary,
    PopulationTrend,
    RescueEffect,
    Stage,
    Status,
    Step1Result,
    Step2Result,
    Step3Result,
    to_flag,
    to_optional_float,
    to_optional_int,
    to_text,
)
from regional_redlist.repository import AssessmentRepository

logger = logging.getLogger(__name__)

FORWARD_TRANSITIONS: dict[Stage, Stage] = {
    Stage.STAGE1: Stage.STAGE2,
    Stage.STAGE2: Stage.STAGE3,
    Stage.STAGE3: Stage.OUTPUT,
}

_STEP1_FIELDS: dict[str, Callable[[Any], Any]] = {
    "is_native": Answer.from_value,
    "has_breeding": Answer.from_value,
    "has_visiting": Answer.from_value,
    "is_vagrant": Answer.from_value,
    "rationale": to_text,
}

_STEP2_FIELDS: dict[str, Callable[[Any], Any]] = {
    "population_size": to_optional_float,
    "population_trend": PopulationTrend.from_value,
    "decline_percent": to_optional_float,
    "eoo": to_optional_float,
    "aoo": to_optional_float,
    "locations": to_optional_int,
    "severely_fragmented": to_flag,
    "threats": to_text,
}

_STEP3_FIELDS: dict[str, Callable[[Any], Any]] = {
    "rescue_effect": RescueEffect.from_value,
    "immigration_likely": Answer.from_value,
    "source_stable": Answer.from_value,
    "is_sink": Answer.from_value,
    "adjustment_rationale": to_text,
}


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_assessment_id() -> str:
    """Return a fresh opaque assessment id."""
    return f"new-{uuid.uuid4().hex}"


def _coerce(fields: dict[str, Callable[[Any], Any]], changes: dict[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(changes) - set(fields))
    if unknown:
        msg = f"Unknown or derived field(s): {', '.join(unknown)}"
        raise TypeError(msg)
    return {name: fields[name](value) for name, value in changes.items()}


class AssessmentWorkflow:
    """Drive one assessment record through the three steps.

    Parameters
    ----------
    record : AssessmentRecord
        The record being worked on. It is updated in place and persisted
        after every confirmed stage.
    repository : AssessmentRepository
        Where the record is saved.
    events : EventHub | None
        Receives ``stage_completed`` and ``assessment_completed``.
    config : WorkflowConfig | None
        Thresholds and defaults.
    """

    def __init__(
        self,
        record: AssessmentRecord,
        repository: AssessmentRepository,
        *,
        events: EventHub | None = None,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._record = record
        self._repository = repository
        self._events = events or EventHub()
        self._config = config or WorkflowConfig()
        self._stage = Stage(record.current_stage)
        self._step1 = evaluate_step1(record.step1) if record.step1 else Step1Result()
        self._step2 = dataclasses.replace(record.step2) if record.step2 else Step2Result()
        self._step3 = dataclasses.replace(record.step3) if record.step3 else Step3Result()

    @classmethod
    def open(
        cls,
        repository: AssessmentRepository,
        assessment_id: str | None = None,
        *,
        taxon_name: str | None = None,
        scientific_name: str | None = None,
        region: str = "",
        population_type: str = "",
        events: EventHub | None = None,
        config: RedListConfig | dict | str | None = None,
    ) -> AssessmentWorkflow:
        """Resume a stored assessment, or start a new draft if none exists.

        Parameters
        ----------
        repository : AssessmentRepository
            Record storage.
        assessment_id : str | None
            Id to resume. A missing id, or one with no stored record,
            creates a new draft (under that id when one was given).
        taxon_name, scientific_name : str | None
            Names for a new draft; configured defaults when omitted.
        region, population_type : str
            Metadata for a new draft.
        events : EventHub | None
            Notification hub.
        config : RedListConfig | dict | str | None
            Configuration source.

        Returns
        -------
        AssessmentWorkflow
        """
        workflow_config = load_config(config).workflow
        record = repository.get(assessment_id) if assessment_id else None
        if record is not None:
            logger.info("Resuming assessment %s at stage %d", record.id, record.current_stage)
            return cls(record, repository, events=events, config=workflow_config)

        now = _utcnow()
        record = AssessmentRecord(
            id=assessment_id or new_assessment_id(),
            taxon_name=taxon_name or workflow_config.default_taxon_name,
            scientific_name=scientific_name or workflow_config.default_scientific_name,
            status=Status.DRAFT,
            current_stage=Stage.STAGE1,
            created_at=now,
            last_modified=now,
            region=region,
            population_type=population_type,
        )
        repository.upsert(record)
        logger.info("Created draft assessment %s", record.id)
        return cls(record, repository, events=events, config=workflow_config)

    # -- State ----------------------------------------------------------------

    @property
    def record(self) -> AssessmentRecord:
        """The persisted record (confirmed results only). Treat as read-only."""
        return self._record

    @property
    def stage(self) -> Stage:
        """The stage currently displayed."""
        return self._stage

    @property
    def events(self) -> EventHub:
        return self._events

    @property
    def frozen(self) -> bool:
        return self._record.status is Status.COMPLETED

    @property
    def step1(self) -> Step1Result:
        """In-progress Step 1 answers; ``eligible`` reflects them live."""
        return self._step1

    @property
    def step2(self) -> Step2Result:
        """In-progress Step 2 metrics with live category, criteria and confidence."""
        return evaluate_step2(self._step2, threats_detail_chars=self._config.threats_detail_chars)

    @property
    def step3(self) -> Step3Result:
        """In-progress Step 3 answers with the live adjusted category.

        Adjustment is applied to the *confirmed* Step 2 category.
        """
        preliminary = self._record.step2.preliminary_category if self._record.step2 else None
        return evaluate_step3(self._step3, preliminary)

    # -- Editing the open stage ---------------------------------------------

    def _editable(self, stage: Stage) -> bool:
        if self.frozen:
            logger.warning("Assessment %s is completed; ignoring edits", self._record.id)
            return False
        if self._stage is not stage:
            logger.warning(
                "Stage %d is not open (open stage is %d); ignoring edits", int(stage), int(self._stage)
            )
            return False
        return True

    def update_step1(self, **changes: Any) -> Step1Result:
        """Change Step 1 answers and return the live result.

        Accepts ``is_native``, ``has_breeding``, ``has_visiting``,
        ``is_vagrant`` (``True``/``False``/``None`` or :class:`Answer`) and
        ``rationale``. Answers made irrelevant by an earlier answer are cleared.

        Raises
        ------
        TypeError
            If an unknown or derived field is passed.
        """
        values = _coerce(_STEP1_FIELDS, changes)
        if self._editable(Stage.STAGE1):
            self._step1 = evaluate_step1(dataclasses.replace(self._step1, **values))
        return self.step1

    def update_step2(self, **changes: Any) -> Step2Result:
        """Change Step 2 metrics and return the live result.

        Numbers may be given as numbers, numeric strings, or ``None``/``""``
        for unknown.

        Raises
        ------
        TypeError
            If an unknown or derived field is passed.
        """
        values = _coerce(_STEP2_FIELDS, changes)
        if self._editable(Stage.STAGE2):
            self._step2 = dataclasses.replace(self._step2, **values)
        return self.step2

    def update_step3(self, **changes: Any) -> Step3Result:
        """Change Step 3 answers and return the live result.

        Answers that the rescue-effect branch does not reach are cleared.

        Raises
        ------
        TypeError
            If an unknown or derived field is passed.
        """
        values = _coerce(_STEP3_FIELDS, changes)
        if self._editable(Stage.STAGE3):
            draft = dataclasses.replace(self._step3, **values)
            immigration, source, sink = gate_step3_answers(
                draft.rescue_effect, draft.immigration_likely, draft.source_stable, draft.is_sink
            )
            self._step3 = dataclasses.replace(draft, immigration_likely=immigration, source_stable=source, is_sink=sink)
        return self.step3

    # -- Guards ---------------------------------------------------------------

    def blocking_reasons(self) -> list[str]:
        """Why the open stage cannot move forward (empty when it can)."""
        if self._stage is Stage.OUTPUT:
            if self._record.status is Status.COMPLETED:
                return ["Assessment is already completed"]
            if self._record.status is not Status.READY_FOR_REVIEW:
                return ["Assessment is not ready for review"]
            return []
        if self.frozen:
            return ["Assessment is completed and can no longer be edited"]

        reasons: list[str] = []
        if self._stage is Stage.STAGE1:
            if not self._step1.eligible:
                reasons.append("Taxon is not eligible for regional assessment")
            if not self._step1.rationale.strip():
                reasons.append("Eligibility rationale is required")
        elif self._stage is Stage.STAGE2:
            if self._step2.population_size is None:
                reasons.append("Population size is required")
            if self._step2.decline_percent is None:
                reasons.append("Decline percent is required")
            if not self._step2.threats.strip():
                reasons.append("Threats description is required")
        elif self._stage is Stage.STAGE3:
            if self._step3.rescue_effect is RescueEffect.UNANSWERED:
                reasons.append("Rescue effect question must be answered")
            if not self._step3.adjustment_rationale.strip():
                reasons.append("Adjustment rationale is required")
        return reasons

    def can_continue(self) -> bool:
        return self._stage is not Stage.OUTPUT and not self.blocking_reasons()

    # -- Transitions ----------------------------------------------------------

    def continue_stage(self) -> bool:
        """Confirm the open stage and move to the next one.

        Returns
        -------
        bool
            ``False`` when the guard rejects the move; nothing changes then.
        """
        if self._stage is Stage.OUTPUT:
            return False
        reasons = self.blocking_reasons()
        if reasons:
            logger.warning(
                "Cannot continue assessment %s from stage %d: %s",
                self._record.id,
                int(self._stage),
                "; ".join(reasons),
            )
            return False

        # Later confirmed results were derived from what is being replaced;
        # the in-progress drafts of those stages are kept.
        completed = self._stage
        if completed is Stage.STAGE1:
            self._record.step1 = dataclasses.replace(self._step1)
            self._record.step2 = None
            self._record.step3 = None
        elif completed is Stage.STAGE2:
            self._record.step2 = self.step2
            self._record.step3 = None
        else:
            self._record.step3 = self.step3

        next_stage = FORWARD_TRANSITIONS[completed]
        self._record.current_stage = next_stage
        if next_stage is Stage.OUTPUT:
            self._record.status = Status.READY_FOR_REVIEW
        else:
            self._record.status = Status.DRAFT
        self._save()
        self._stage = next_stage

        logger.info("Assessment %s completed stage %d", self._record.id, int(completed))
        self._events.emit(STAGE_COMPLETED, assessment_id=self._record.id, stage=int(completed))
        return True

    def go_back(self) -> bool:
        """Show the previous stage. Entered data is kept."""
        if self._stage is Stage.STAGE1:
            return False
        self._stage = Stage(self._stage - 1)
        return True

    def go_to(self, stage: Stage | int) -> bool:
        """Show *stage* if it has been unlocked (``stage <= record.current_stage``)."""
        stage = Stage(stage)
        if stage > self._record.current_stage:
            return False
        self._stage = stage
        return True

    def complete(self) -> bool:
        """Freeze the outcome onto the record and mark it completed.

        Only allowed from the output stage of a record that is ready for review.

        Returns
        -------
        bool
        """
        if self._stage is not Stage.OUTPUT or self.blocking_reasons():
            logger.warning("Assessment %s cannot be completed from its current state", self._record.id)
            return False

        flat = self._record.flat_summary()
        now = _utcnow()
        self._record.summary = AssessmentSummary(
            completed_at=now,
            final_category=flat["finalCategory"],
            criteria_string=flat["criteriaMet"],
            adjusted=flat["adjustmentSteps"] != 0,
            steps_changed=flat["adjustmentSteps"],
        )
        self._record.status = Status.COMPLETED
        self._record.current_stage = Stage.OUTPUT
        self._save(now)

        logger.info("Assessment %s completed with category %s", self._record.id, flat["finalCategory"])
        self._events.emit(ASSESSMENT_COMPLETED, assessment_id=self._record.id)
        return True

    # -- Output helpers ---------------------------------------------------------

    def data_gaps(self) -> list[str]:
        """Evidence worth collecting to raise a low confidence score."""
        step2 = self._record.step2 or Step2Result()
        rescue = self._record.step3.rescue_effect if self._record.step3 else RescueEffect.UNANSWERED
        return suggest_data_gaps(
            step2,
            rescue,
            confidence_target=self._config.confidence_target,
            threats_detail_chars=self._config.threats_detail_chars,
        )

    def _save(self, timestamp: str | None = None) -> None:
        self._record.last_modified = timestamp or _utcnow()
        self._repository.upsert(self._record)
