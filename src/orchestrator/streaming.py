"""
src/orchestrator/streaming.py

Streaming transport: runs the agent on a worker thread and relays its events as
wire frames while they happen. Used by the FastAPI endpoint and the gradio UI.
"""


import threading
import time
from typing import Iterator, List, Optional, Union

from loguru import logger

from config import StreamFormat
from orchestrator.agent import ResumeOptimizerAgent
from orchestrator.channel import CallbackSink, EventChannel, encode_ndjson, encode_sse
from orchestrator.loop import RunControl
from orchestrator.models import FailureEvent, OptimizationRequest, RunEvent


def _run_worker(agent: ResumeOptimizerAgent, request: OptimizationRequest,
                channel: EventChannel, control: RunControl) -> None:

    started = time.perf_counter()
    tools_used: List[str] = []

    def relay(event: RunEvent) -> None:

        tools_used[:] = event.tools_used
        channel.emit(event)

    try:
        agent.optimize(request, CallbackSink(relay), control)
    except Exception as e:
        logger.exception("[stream] agent crashed outside the run loop")
        # The consumer is blocked on the channel until a terminal event arrives
        if not channel.closed:
            channel.emit(FailureEvent(
                error=str(e) or "Internal server error",
                execution_time_ms=int((time.perf_counter() - started) * 1000),
                tools_used=list(tools_used),
            ))


def stream_events(agent: ResumeOptimizerAgent, request: OptimizationRequest,
                  control: Optional[RunControl] = None) -> Iterator[RunEvent]:
    """
    Yield the run's events in emission order, ending with the terminal event.

    Closing the generator before the terminal event cancels the run; the
    agent stops before its next model turn.
    """

    channel = EventChannel()
    control = control or agent.new_control()
    worker = threading.Thread(target=_run_worker, args=(agent, request, channel, control), daemon=True)
    worker.start()

    try:
        for event in channel:
            yield event
    finally:
        if not channel.closed:
            logger.info("[stream] consumer went away, cancelling run")
            control.cancel()


def stream_run(agent: ResumeOptimizerAgent, request: OptimizationRequest,
               fmt: Union[StreamFormat, str] = StreamFormat.NDJSON,
               control: Optional[RunControl] = None) -> Iterator[str]:
    """Encoded frames (NDJSON lines or SSE `data:` frames), one per event."""

    encode = encode_sse if StreamFormat(fmt) is StreamFormat.SSE else encode_ndjson

    for event in stream_events(agent, request, control):
        yield encode(event)
