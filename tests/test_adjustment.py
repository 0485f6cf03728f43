"""Tests for the Step 3 extra-regional adjustment."""

import pytest

from regional_redlist.categories import Category
from regional_redlist.evaluate import evaluate_adjustment, evaluate_step3, gate_step3_answers
from regional_redlist.models import Answer, RescueEffect, Step3Result

YES, NO, UNANSWERED = Answer.YES, Answer.NO, Answer.UNANSWERED


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (Category.CR, Category.EN),
        (Category.EN, Category.VU),
        (Category.NT, Category.LC),
        (Category.LC, Category.LC),
    ],
)
def test_rescue_downlists_one_step(category, expected):
    result = evaluate_adjustment(category, YES, YES, NO)
    assert result.final_category is expected
    assert result.adjustment_steps == 1


@pytest.mark.parametrize(
    ("category", "expected"),
    [(Category.LC, Category.NT), (Category.VU, Category.EN), (Category.CR, Category.CR)],
)
def test_sink_with_unstable_source_uplists(category, expected):
    result = evaluate_adjustment(category, UNANSWERED, NO, YES)
    assert result.final_category is expected
    assert result.adjustment_steps == -1


def test_rescue_takes_precedence():
    result = evaluate_adjustment(Category.VU, YES, YES, NO)
    assert result.adjustment_steps == 1


@pytest.mark.parametrize(
    ("immigration", "source", "sink"),
    [
        (UNANSWERED, UNANSWERED, UNANSWERED),
        (YES, YES, UNANSWERED),
        (YES, NO, NO),
        (NO, YES, NO),
        (YES, YES, YES),
    ],
)
def test_no_rule_leaves_category(immigration, source, sink):
    result = evaluate_adjustment(Category.VU, immigration, source, sink)
    assert result.final_category is Category.VU
    assert result.adjustment_steps == 0


def test_off_scale_category_passes_through():
    result = evaluate_adjustment(Category.DD, YES, YES, NO)
    assert result.final_category is Category.DD
    assert result.adjustment_steps == 0


def test_unknown_category_string_passes_through():
    result = evaluate_adjustment("RE", YES, YES, NO)
    assert result.final_category == "RE"
    assert result.adjustment_steps == 0


def test_string_category_is_parsed():
    assert evaluate_adjustment("EN", YES, YES, NO).final_category is Category.VU


class TestGating:
    def test_no_rescue_clears_everything(self):
        assert gate_step3_answers(RescueEffect.NO, YES, YES, NO) == (UNANSWERED, UNANSWERED, UNANSWERED)
        assert gate_step3_answers(RescueEffect.UNCERTAIN, YES, YES, NO) == (UNANSWERED, UNANSWERED, UNANSWERED)

    def test_sink_needs_immigration_and_stable_source(self):
        assert gate_step3_answers(RescueEffect.YES, YES, NO, YES) == (YES, NO, UNANSWERED)

    def test_reachable_answers_kept(self):
        assert gate_step3_answers(RescueEffect.YES, YES, YES, NO) == (YES, YES, NO)

    def test_stale_sink_cannot_uplist(self):
        step3 = Step3Result(rescue_effect=RescueEffect.YES, immigration_likely=YES, source_stable=NO, is_sink=YES)
        result = evaluate_step3(step3, Category.VU)
        assert result.is_sink is UNANSWERED
        assert result.final_category is Category.VU
        assert result.adjustment_steps == 0


def test_evaluate_step3_fills_derived_fields():
    step3 = Step3Result(rescue_effect=RescueEffect.YES, immigration_likely=YES, source_stable=YES, is_sink=NO)
    result = evaluate_step3(step3, Category.CR)
    assert result.final_category is Category.EN
    assert result.adjustment_steps == 1
    assert step3.final_category is None
