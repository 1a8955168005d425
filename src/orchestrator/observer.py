"""
src/orchestrator/observer.py

Lifecycle logging for agent runs. The agent calls the observer at run start,
after each step and at the terminal event; it never logs directly.
"""


import uuid
from typing import List, Optional

from loguru import logger

from orchestrator.models import OptimizationRequest, RunOutcome, StepRecord


CONTEXT_PREFIX = "[agent]"


class RunObserver:
    """Default observer: loguru records bound to a per-run id."""

    def __init__(self, run_id: Optional[str] = None):

        self.run_id = run_id or uuid.uuid4().hex[:8]
        self._log = logger.bind(run_id=self.run_id)

    def run_started(self, request: OptimizationRequest, model_name: str, tool_names: List[str]) -> None:

        self._log.info(f"{CONTEXT_PREFIX} Starting optimization with {model_name}")
        self._log.debug(
            f"{CONTEXT_PREFIX}   Input lengths: resume={len(request.source_text)}, "
            f"job={len(request.target_description)}"
        )
        self._log.debug(f"{CONTEXT_PREFIX}   Tools: {', '.join(tool_names)}")

    def step_finished(self, record: StepRecord, text: str) -> None:

        self._log.info(f"{CONTEXT_PREFIX} Step {record.step_index}: {', '.join(record.tool_names)}")
        if text:
            self._log.debug(f"{CONTEXT_PREFIX}   Model text: {text[:200]}")

    def run_finished(self, outcome: RunOutcome, finish_reason: str) -> None:

        result = outcome.result
        self._log.success(
            f"{CONTEXT_PREFIX} Completed in {outcome.execution_time_ms}ms "
            f"({len(outcome.steps)} steps, finish={finish_reason})"
        )
        self._log.info(
            f"{CONTEXT_PREFIX}   payload={'yes' if result and result.structured_payload is not None else 'no'}, "
            f"sections={sorted(result.free_text_sections) if result else []}, "
            f"tools={outcome.tools_used}"
        )

    def run_failed(self, outcome: RunOutcome) -> None:

        self._log.error(f"{CONTEXT_PREFIX} Failed after {outcome.execution_time_ms}ms: {outcome.error}")

    def emit_failed(self, event_type: str, err: Exception) -> None:

        self._log.warning(f"{CONTEXT_PREFIX} Progress sink rejected {event_type} event: {err}")
