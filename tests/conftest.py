"""Shared fixtures for regional assessment tests."""

import pytest

from regional_redlist.events import EventHub
from regional_redlist.repository import AssessmentRepository
from regional_redlist.store import MemoryStore
from regional_redlist.workflow import AssessmentWorkflow

THREATS = "Wetland drainage and collisions with power lines along the main migration corridor."


@pytest.fixture()
def repository():
    """Repository over a fresh in-memory store."""
    return AssessmentRepository(MemoryStore())


@pytest.fixture()
def events():
    return EventHub()


@pytest.fixture()
def workflow(repository, events):
    """New draft assessment at Stage 1."""
    return AssessmentWorkflow.open(
        repository,
        taxon_name="White Stork",
        scientific_name="Ciconia ciconia",
        region="europe",
        population_type="breeding",
        events=events,
    )


@pytest.fixture()
def eligible_answers():
    return {
        "is_native": True,
        "is_vagrant": False,
        "has_breeding": True,
        "rationale": "Native breeding population present every year.",
    }


@pytest.fixture()
def critical_metrics():
    """Step 2 metrics that trigger all three criteria at CR."""
    return {
        "population_size": 200,
        "decline_percent": 85,
        "eoo": 50,
        "aoo": 12,
        "locations": 1,
        "severely_fragmented": True,
        "threats": THREATS,
    }


@pytest.fixture()
def rescue_answers():
    """Step 3 answers that downlist by one step."""
    return {
        "rescue_effect": "yes",
        "immigration_likely": True,
        "source_stable": True,
        "is_sink": False,
        "adjustment_rationale": "Stable neighbouring populations supply immigrants.",
    }


@pytest.fixture()
def workflow_at_stage2(workflow, eligible_answers):
    workflow.update_step1(**eligible_answers)
    assert workflow.continue_stage()
    return workflow


@pytest.fixture()
def workflow_at_stage3(workflow_at_stage2, critical_metrics):
    workflow_at_stage2.update_step2(**critical_metrics)
    assert workflow_at_stage2.continue_stage()
    return workflow_at_stage2


@pytest.fixture()
def workflow_at_output(workflow_at_stage3, rescue_answers):
    workflow_at_stage3.update_step3(**rescue_answers)
    assert workflow_at_stage3.continue_stage()
    return workflow_at_stage3
