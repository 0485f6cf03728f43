"""Step 1: decide whether a regional population qualifies for assessment."""

from __future__ import annotations

import dataclasses

from regional_redlist.models import Answer, Step1Result


def evaluate_eligibility(
    is_native: Answer,
    has_breeding: Answer,
    has_visiting: Answer,
    is_vagrant: Answer,
) -> bool:
    """Return ``True`` when the taxon should be assessed in the region.

    A population is eligible when it is native (or a benign introduction),
    not a vagrant, and either breeds in or regularly visits the region.
    Unanswered questions count as not satisfied.

    Parameters
    ----------
    is_native : Answer
    has_breeding : Answer
    has_visiting : Answer
    is_vagrant : Answer

    Returns
    -------
    bool
    """
    if is_native is not Answer.YES:
        return False
    if is_vagrant is not Answer.NO:
        return False
    return has_breeding is Answer.YES or has_visiting is Answer.YES


def gate_step1_answers(answers: Step1Result) -> Step1Result:
    """Clear answers to questions that an earlier answer makes irrelevant.

    Answering "not native" clears the vagrant, breeding and visiting
    answers; answering "vagrant" clears breeding and visiting. Unanswered
    questions clear nothing.
    """
    if answers.is_native is Answer.NO:
        return dataclasses.replace(
            answers,
            has_breeding=Answer.UNANSWERED,
            has_visiting=Answer.UNANSWERED,
            is_vagrant=Answer.UNANSWERED,
        )
    if answers.is_vagrant is Answer.YES:
        return dataclasses.replace(answers, has_breeding=Answer.UNANSWERED, has_visiting=Answer.UNANSWERED)
    return answers


def evaluate_step1(answers: Step1Result) -> Step1Result:
    """Return a gated copy of *answers* with ``eligible`` filled in."""
    gated = gate_step1_answers(answers)
    eligible = evaluate_eligibility(gated.is_native, gated.has_breeding, gated.has_visiting, gated.is_vagrant)
    return dataclasses.replace(gated, eligible=eligible)
