"""
src/orchestrator/agent.py

Resume optimizer agent: runs one bounded tool-calling conversation per request,
reports progress to an event sink and returns a RunOutcome.
"""


import time
from typing import Any, Callable, Dict, List, Optional

from config import DONE_MESSAGE, MILESTONE_MESSAGES, START_MESSAGE, STEP_BUDGET
from orchestrator import prompts
from orchestrator.channel import EventSink
from orchestrator.extraction import extract_result
from orchestrator.llm_openai import ChatModel, OpenAIChatModel
from orchestrator.loop import RunControl, generate
from orchestrator.models import (
    CompleteEvent, FailureEvent, OptimizationRequest, ProgressEvent, RunEvent, RunOutcome, StepRecord,
)
from orchestrator.observer import RunObserver
from tools.catalog import build_default_registry
from tools.registry import ToolRegistry


class _Run:
    """Mutable bookkeeping for a single run. Never shared between runs."""

    def __init__(self, sink: Optional[EventSink], observer: RunObserver, step_budget: int):

        self.sink = sink
        self.observer = observer
        self.step_budget = step_budget
        self.started = time.perf_counter()
        self.steps: List[StepRecord] = []
        self.tools_used: List[str] = []
        self.finished = False

    def elapsed_ms(self) -> int:

        return int((time.perf_counter() - self.started) * 1000)

    def emit(self, event: RunEvent) -> None:
        """Fire-and-forget: a broken sink is logged and never fails the run."""

        if self.finished or self.sink is None:
            return
        if event.type != "progress":
            self.finished = True
        try:
            self.sink.emit(event)
        except Exception as e:
            self.observer.emit_failed(event.type, e)

    def progress(self, message: str, step: int) -> None:

        self.emit(ProgressEvent(
            message=message, step=step, total_steps=self.step_budget, tools_used=list(self.tools_used),
        ))

    def record(self, record: StepRecord) -> None:

        self.steps.append(record)
        for name in record.tool_names:
            if name not in self.tools_used:
                self.tools_used.append(name)


class ResumeOptimizerAgent:
    """
    Orchestrates one run per optimize() call.

    Args:
        model: Turn-level chat model (default: OpenAIChatModel()).
        tools: Read-only tool registry (default: build_default_registry()).
        step_budget: Max model turns per run.
        milestones: Tool name -> progress message for tools worth announcing.
        observer_factory: Builds the per-run lifecycle logger.
        timeout_s: Per-run wall-clock limit used when no RunControl is passed.
    """

    def __init__(
        self,
        model: Optional[ChatModel] = None,
        tools: Optional[ToolRegistry] = None,
        *,
        step_budget: int = STEP_BUDGET,
        milestones: Optional[Dict[str, str]] = None,
        observer_factory: Callable[[], RunObserver] = RunObserver,
        timeout_s: Optional[float] = None,
    ):

        self.model = model if model is not None else OpenAIChatModel()
        self.tools = tools if tools is not None else build_default_registry()
        self.step_budget = step_budget
        self.milestones = MILESTONE_MESSAGES if milestones is None else milestones
        self.observer_factory = observer_factory
        self.timeout_s = timeout_s

    def available_tools(self) -> List[str]:

        return self.tools.names()

    def tool_inventory(self) -> Dict[str, Any]:

        names = self.tools.names()

        return {"total": len(names), "allTools": names}

    def new_control(self) -> RunControl:

        return RunControl() if self.timeout_s is None else RunControl(self.timeout_s)

    def optimize(
        self,
        request: OptimizationRequest,
        sink: Optional[EventSink] = None,
        control: Optional[RunControl] = None,
    ) -> RunOutcome:
        """
        Run the optimisation conversation for `request`.

        Emits a start progress event, milestone progress events, a completion
        progress event and exactly one terminal event (complete or error) to
        `sink`. Model failures, timeouts and cancellation come back as
        RunOutcome(success=False) with the error text unchanged.
        """

        observer = self.observer_factory()
        run = _Run(sink, observer, self.step_budget)

        control = control or self.new_control()
        control.start()

        observer.run_started(request, getattr(self.model, "name", type(self.model).__name__), self.tools.names())
        run.progress(START_MESSAGE, 0)

        def on_step_finish(record: StepRecord, text: str) -> None:

            run.record(record)
            observer.step_finished(record, text)
            for name in dict.fromkeys(record.tool_names):
                if name in self.milestones:
                    run.progress(self.milestones[name], record.step_index)

        try:
            generation = generate(
                self.model,
                prompts.SYSTEM_PROMPT,
                prompts.build_task_prompt(request),
                self.tools,
                step_budget=self.step_budget,
                on_step_finish=on_step_finish,
                should_stop=control.check,
            )
        except Exception as e:
            outcome = RunOutcome(
                success=False,
                error=str(e) or type(e).__name__,
                execution_time_ms=run.elapsed_ms(),
                tools_used=list(run.tools_used),
                steps=list(run.steps),
            )
            run.emit(FailureEvent(
                error=outcome.error, execution_time_ms=outcome.execution_time_ms, tools_used=outcome.tools_used,
            ))
            observer.run_failed(outcome)
            return outcome

        result = extract_result(generation.final_text)
        run.progress(DONE_MESSAGE, len(run.steps))

        outcome = RunOutcome(
            success=True,
            result=result,
            execution_time_ms=run.elapsed_ms(),
            tools_used=list(run.tools_used),
            steps=list(run.steps),
        )
        run.emit(CompleteEvent(
            payload=result.to_payload(), execution_time_ms=outcome.execution_time_ms, tools_used=outcome.tools_used,
        ))
        observer.run_finished(outcome, generation.finish_reason)

        return outcome
