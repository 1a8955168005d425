"""
src/orchestrator/loop.py

Bounded tool-calling loop, written as an explicit state machine:

    RUNNING(n) -> TOOL_DISPATCH -> RUNNING(n+1) -> ... -> FINISHED | BUDGET_EXHAUSTED

Each RUNNING state is one model turn. A turn with tool calls moves to
TOOL_DISPATCH, which runs every call in order through the tool registry, feeds
results back as tool messages and records a StepRecord. A turn without tool
calls finishes the loop. The step counter is owned here, not by the provider.
"""


import json
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from config import RUN_TIMEOUT_S, STEP_BUDGET
from orchestrator.exceptions import RunAborted
from orchestrator.llm_openai import ChatModel
from orchestrator.models import Generation, ModelTurn, StepRecord
from tools.registry import ToolRegistry


StepCallback = Callable[[StepRecord, str], None]
StopCheck = Callable[[], Optional[str]]


class LoopState(str, Enum):

    RUNNING = "running"
    TOOL_DISPATCH = "tool_dispatch"
    FINISHED = "finished"
    BUDGET_EXHAUSTED = "budget_exhausted"


class RunControl:
    """
    Wall-clock deadline and cancellation flag for one run.

    `check()` returns a reason string once the run should stop, else None.
    The loop calls it before every model turn; an in-flight model call is
    bounded by the client's own timeout.
    """

    def __init__(self, timeout_s: Optional[float] = RUN_TIMEOUT_S, *,
                 clock: Callable[[], float] = time.monotonic):

        self.timeout_s = timeout_s
        self._clock = clock
        self._cancelled = threading.Event()
        self._started: Optional[float] = None

    def start(self) -> None:

        self._started = self._clock()

    def cancel(self) -> None:

        self._cancelled.set()

    @property
    def cancelled(self) -> bool:

        return self._cancelled.is_set()

    def check(self) -> Optional[str]:

        if self._cancelled.is_set():
            return "Run cancelled"

        if self.timeout_s is not None and self._started is not None:
            if self._clock() - self._started >= self.timeout_s:
                return f"Run timed out after {self.timeout_s:g}s"

        return None


def _tool_message(call_id: str, name: str, content: Dict[str, Any]) -> Dict[str, Any]:

    return {
        "role": "tool",
        "tool_call_id": call_id,
        "name": name,
        "content": json.dumps(content, ensure_ascii=False, default=str),
    }


def generate(
    model: ChatModel,
    system: str,
    prompt: str,
    tools: ToolRegistry,
    step_budget: int = STEP_BUDGET,
    on_step_finish: Optional[StepCallback] = None,
    should_stop: Optional[StopCheck] = None,
) -> Generation:
    """
    Drive `model` through at most `step_budget` turns, dispatching tool calls via `tools`.

    Returns the last turn's text. Running out of budget is a normal stop
    (finish_reason "step_budget"), not an error. Model exceptions propagate;
    RunAborted is raised when `should_stop` reports a reason.
    """

    messages: List[Dict[str, Any]] = [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]
    tool_specs = tools.specs()
    steps: List[StepRecord] = []

    state = LoopState.RUNNING
    step_index = 0
    turn: Optional[ModelTurn] = None
    final_text = ""

    while state in (LoopState.RUNNING, LoopState.TOOL_DISPATCH):
        if state is LoopState.RUNNING:
            if step_index >= step_budget:
                state = LoopState.BUDGET_EXHAUSTED
                continue

            reason = should_stop() if should_stop else None
            if reason:
                raise RunAborted(reason, step_index)

            turn = model.respond(messages, tool_specs)
            step_index += 1
            final_text = turn.text

            for i, tc in enumerate(turn.tool_calls):
                if not tc.id:
                    tc.id = f"call_{step_index}_{i}"
            messages.append(turn.as_message())

            state = LoopState.TOOL_DISPATCH if turn.tool_calls else LoopState.FINISHED

        else:
            # Strictly sequential: the next turn needs every result of this one
            for tc in turn.tool_calls:
                result = tools.execute(tc.name, tc.arguments)
                messages.append(_tool_message(tc.id, tc.name, result.model_dump()))

            record = StepRecord(step_index=step_index, tool_names=[tc.name for tc in turn.tool_calls])
            steps.append(record)
            if on_step_finish:
                on_step_finish(record, turn.text)

            state = LoopState.RUNNING

    if state is LoopState.FINISHED:
        finish_reason = (turn.finish_reason if turn else None) or "stop"
    else:
        finish_reason = "step_budget"

    return Generation(final_text=final_text, finish_reason=finish_reason, steps=steps)
