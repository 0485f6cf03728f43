"""Regional Red List assessment: three-step classification and workflow."""

from regional_redlist.categories import Category
from regional_redlist.config import RedListConfig, load_config
from regional_redlist.evaluate import (
    evaluate_adjustment,
    evaluate_eligibility,
    evaluate_preliminary,
    score_confidence,
    suggest_data_gaps,
)
from regional_redlist.events import ASSESSMENT_COMPLETED, STAGE_COMPLETED, EventHub
from regional_redlist.export import ExporterRegistry, export_assessment, write_export
from regional_redlist.models import (
    Answer,
    AssessmentRecord,
    PopulationTrend,
    RescueEffect,
    Stage,
    Status,
    Step1Result,
    Step2Result,
    Step3Result,
)
from regional_redlist.repository import AssessmentRepository
from regional_redlist.store import JsonFileStore, KeyValueStore, MemoryStore, StoreRegistry
from regional_redlist.workflow import AssessmentWorkflow

__all__ = [
    "ASSESSMENT_COMPLETED",
    "STAGE_COMPLETED",
    "Answer",
    "AssessmentRecord",
    "AssessmentRepository",
    "AssessmentWorkflow",
    "Category",
    "EventHub",
    "ExporterRegistry",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PopulationTrend",
    "RedListConfig",
    "RescueEffect",
    "Stage",
    "Status",
    "Step1Result",
    "Step2Result",
    "Step3Result",
    "StoreRegistry",
    "evaluate_adjustment",
    "evaluate_eligibility",
    "evaluate_preliminary",
    "export_assessment",
    "load_config",
    "score_confidence",
    "suggest_data_gaps",
    "write_export",
]
