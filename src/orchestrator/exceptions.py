"""Exceptions raised inside the orchestrator."""


class AgentError(Exception):
    """Base class for orchestrator errors."""


class RunAborted(AgentError):
    """
    Raised by the step loop when a run is stopped before the model finished.

    Attributes:
        reason: Human-readable cause, e.g. "Run timed out after 300s".
        step_index: Number of turns completed before the stop.
    """

    def __init__(self, reason: str, step_index: int = 0):
        self.reason = reason
        self.step_index = step_index
        super().__init__(reason)


class ChannelClosedError(AgentError):
    """Raised when an event is emitted after the run's terminal event."""
