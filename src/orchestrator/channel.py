"""
src/orchestrator/channel.py

Progress channel: one-way event sinks the agent writes to.
- EventSink: anything with emit(event)
- CallbackSink: wraps a plain function
- EventChannel: thread-safe queue a transport iterates from another thread
- encode_ndjson() / encode_sse(): one wire frame per event
"""


import json
import queue
import threading
from typing import Callable, Iterator, Optional, Protocol

from orchestrator.exceptions import ChannelClosedError
from orchestrator.models import RunEvent, is_terminal


class EventSink(Protocol):

    def emit(self, event: RunEvent) -> None:
        ...


class CallbackSink:

    def __init__(self, callback: Callable[[RunEvent], None]):

        self.callback = callback

    def emit(self, event: RunEvent) -> None:

        self.callback(event)


class EventChannel:
    """
    Queue-backed sink. Iteration yields events in emission order and ends right
    after the terminal event. Emitting after the terminal event raises
    ChannelClosedError.
    """

    def __init__(self):

        self._queue: "queue.Queue[RunEvent]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:

        return self._closed

    def emit(self, event: RunEvent) -> None:

        with self._lock:
            if self._closed:
                raise ChannelClosedError(f"Channel closed; dropped {event.type} event")
            if is_terminal(event):
                self._closed = True
            self._queue.put(event)

    def get(self, timeout: Optional[float] = None) -> RunEvent:
        """Next event; raises queue.Empty after `timeout` seconds."""

        return self._queue.get(timeout=timeout)

    def __iter__(self) -> Iterator[RunEvent]:

        while True:
            event = self._queue.get()
            yield event
            if is_terminal(event):
                return


def encode_ndjson(event: RunEvent) -> str:

    return json.dumps(event.to_frame(), ensure_ascii=False, default=str) + "\n"


def encode_sse(event: RunEvent) -> str:

    return f"data: {json.dumps(event.to_frame(), ensure_ascii=False, default=str)}\n\n"
