"""Human-readable Markdown report rendered from a Jinja2 template."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

from regional_redlist.categories import CATEGORY_NAMES, parse_category
from regional_redlist.evaluate import suggest_data_gaps
from regional_redlist.evaluate.preliminary import CONFIDENCE_TARGET, THREATS_DETAIL_CHARS
from regional_redlist.export.base import Exporter, ExporterRegistry, display_category
from regional_redlist.models import AssessmentRecord, RescueEffect, Step2Result

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = TEMPLATES_DIR / "summary.md"


def _format_number(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:g}"


@ExporterRegistry.register("markdown")
class MarkdownExporter(Exporter):
    """Plain-language summary with the outcome, rationale and data gaps.

    Parameters
    ----------
    template_path : str | Path | None
        Jinja2 template to render; the packaged ``summary.md`` by default.
    confidence_target : int
        Below this confidence the data-gap checklist is included.
    threats_detail_chars : int
        Threat descriptions shorter than this are listed as a gap.
    """

    name = "markdown"
    file_extension = "md"

    def __init__(
        self,
        template_path: str | Path | None = None,
        *,
        confidence_target: int = CONFIDENCE_TARGET,
        threats_detail_chars: int = THREATS_DETAIL_CHARS,
    ) -> None:
        self.template_path = Path(template_path) if template_path else DEFAULT_TEMPLATE
        self.confidence_target = confidence_target
        self.threats_detail_chars = threats_detail_chars

    def context(self, record: AssessmentRecord) -> dict[str, Any]:
        flat = record.flat_summary()
        step2 = record.step2 or Step2Result()
        rescue = record.step3.rescue_effect if record.step3 else RescueEffect.UNANSWERED
        final = parse_category(flat["finalCategory"] or None)
        return {
            "record": record,
            "summary": flat,
            "category": display_category(record),
            "category_name": CATEGORY_NAMES.get(final, ""),
            "adjusted": flat["adjustmentSteps"] != 0,
            "eligible": bool(record.step1 and record.step1.eligible),
            "population_size": _format_number(step2.population_size),
            "decline_percent": _format_number(step2.decline_percent),
            "data_gaps": suggest_data_gaps(
                step2,
                rescue,
                confidence_target=self.confidence_target,
                threats_detail_chars=self.threats_detail_chars,
            ),
        }

    def render(self, record: AssessmentRecord) -> str:
        template = self.template_path.read_text(encoding="utf-8")
        env = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)
        return env.from_string(template).render(**self.context(record))
