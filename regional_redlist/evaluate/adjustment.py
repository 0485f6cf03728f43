"""Step 3: adjust the preliminary category for extra-regional populations."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from regional_redlist.categories import Category, parse_category, scale_index, shift
from regional_redlist.models import Answer, RescueEffect, Step3Result

logger = logging.getLogger(__name__)

DOWNLIST = 1
UPLIST = -1


@dataclass
class AdjustmentResult:
    """Outcome of the Step 3 rules.

    Parameters
    ----------
    final_category : Category | str
        Category after adjustment.
    adjustment_steps : int
        ``+1`` downlisted, ``-1`` uplisted, ``0`` unchanged. A move that is
        clamped at either end of the scale still reports ``±1``.
    """

    final_category: Category | str
    adjustment_steps: int


def evaluate_adjustment(
    preliminary_category: Category | str,
    immigration_likely: Answer = Answer.UNANSWERED,
    source_stable: Answer = Answer.UNANSWERED,
    is_sink: Answer = Answer.UNANSWERED,
) -> AdjustmentResult:
    """Apply the rescue-effect and sink rules to a preliminary category.

    Rules, first match wins:

    1. Immigration likely, source stable and not a sink: downlist one step.
    2. A sink whose source is not stable: uplist one step.
    3. Otherwise unchanged.

    Categories outside the CR-LC scale (e.g. ``DD``) pass through unchanged.

    Parameters
    ----------
    preliminary_category : Category | str
        Category from Step 2.
    immigration_likely : Answer
    source_stable : Answer
    is_sink : Answer

    Returns
    -------
    AdjustmentResult
    """
    category = parse_category(preliminary_category)
    if scale_index(category) is None:
        return AdjustmentResult(final_category=category, adjustment_steps=0)

    if immigration_likely is Answer.YES and source_stable is Answer.YES and is_sink is Answer.NO:
        steps = DOWNLIST
    elif is_sink is Answer.YES and source_stable is Answer.NO:
        steps = UPLIST
    else:
        return AdjustmentResult(final_category=category, adjustment_steps=0)

    final = shift(category, steps)
    logger.debug("Adjusted %s -> %s (steps=%+d)", category.value, final.value, steps)
    return AdjustmentResult(final_category=final, adjustment_steps=steps)


def gate_step3_answers(
    rescue_effect: RescueEffect,
    immigration_likely: Answer,
    source_stable: Answer,
    is_sink: Answer,
) -> tuple[Answer, Answer, Answer]:
    """Blank out answers to questions that were never reachable.

    Immigration and source stability are only asked when a rescue effect is
    expected; the sink question only when immigration is likely from a
    stable source.

    Returns
    -------
    tuple[Answer, Answer, Answer]
        ``(immigration_likely, source_stable, is_sink)``
    """
    if rescue_effect is not RescueEffect.YES:
        return Answer.UNANSWERED, Answer.UNANSWERED, Answer.UNANSWERED
    if immigration_likely is not Answer.YES or source_stable is not Answer.YES:
        return immigration_likely, source_stable, Answer.UNANSWERED
    return immigration_likely, source_stable, is_sink


def evaluate_step3(step3: Step3Result, preliminary_category: Category | str) -> Step3Result:
    """Return a gated copy of *step3* with its derived fields filled in."""
    immigration, source, sink = gate_step3_answers(
        step3.rescue_effect, step3.immigration_likely, step3.source_stable, step3.is_sink
    )
    result = evaluate_adjustment(preliminary_category, immigration, source, sink)
    return dataclasses.replace(
        step3,
        immigration_likely=immigration,
        source_stable=source,
        is_sink=sink,
        final_category=result.final_category,
        adjustment_steps=result.adjustment_steps,
    )
