"""Shared fixtures built on the scripted model in tests/stubs.py."""

import pytest

from orchestrator.agent import ResumeOptimizerAgent
from orchestrator.models import OptimizationRequest
from tests.stubs import ScriptedModel
from tools.catalog import build_default_registry


@pytest.fixture
def request_obj():
    return OptimizationRequest(
        source_text="Jane Doe, 5 years backend engineering...",
        target_description="Senior Backend Engineer at Acme",
    )


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def make_agent(registry):
    def _make(turns, **kwargs):
        model = ScriptedModel(turns)
        return ResumeOptimizerAgent(model=model, tools=registry, **kwargs), model

    return _make
