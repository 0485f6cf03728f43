"""Pure evaluators for the three assessment steps."""

from regional_redlist.evaluate.adjustment import (
    AdjustmentResult,
    evaluate_adjustment,
    evaluate_step3,
    gate_step3_answers,
)
from regional_redlist.evaluate.eligibility import evaluate_eligibility, evaluate_step1, gate_step1_answers
from regional_redlist.evaluate.preliminary import (
    PreliminaryResult,
    evaluate_preliminary,
    evaluate_step2,
    score_confidence,
    suggest_data_gaps,
)

__all__ = [
    "AdjustmentResult",
    "PreliminaryResult",
    "evaluate_adjustment",
    "evaluate_eligibility",
    "evaluate_preliminary",
    "evaluate_step1",
    "evaluate_step2",
    "evaluate_step3",
    "gate_step1_answers",
    "gate_step3_answers",
    "score_confidence",
    "suggest_data_gaps",
]
