"""
src/orchestrator/models.py

Pydantic models for requests, tool-calling I/O, progress events and run outcomes.
"""


import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> str:

    return datetime.now(timezone.utc).isoformat()


class OptimizationRequest(BaseModel):

    model_config = ConfigDict(frozen=True)

    source_text: str
    target_description: str


class ToolCall(BaseModel):

    id: Optional[str] = None
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):

    name: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    timestamp: str = Field(default_factory=_utc_now)


class StepRecord(BaseModel):

    model_config = ConfigDict(frozen=True)

    step_index: int
    tool_names: List[str] = Field(default_factory=list)


class ModelTurn(BaseModel):
    """One model response: either tool calls or a finishing answer."""

    text: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)
    finish_reason: Optional[str] = None

    def as_message(self) -> Dict[str, Any]:
        """Render the turn as an assistant chat message to keep in context."""

        message: Dict[str, Any] = {"role": "assistant", "content": self.text or None}

        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": json.dumps(tc.arguments, ensure_ascii=False)},
                }
                for tc in self.tool_calls
            ]

        return message


class Generation(BaseModel):

    final_text: str
    finish_reason: str
    steps: List[StepRecord] = Field(default_factory=list)


# -------- Progress events ------------------------------------------------------
class _Event(BaseModel):

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_frame(self) -> Dict[str, Any]:
        """Flat, camelCase dict ready for the wire."""

        return self.model_dump(by_alias=True, exclude_none=True)


class ProgressEvent(_Event):

    type: Literal["progress"] = "progress"
    message: str
    step: int
    total_steps: int = Field(alias="totalSteps")
    tools_used: List[str] = Field(default_factory=list, alias="toolsUsed")


class CompleteEvent(_Event):

    type: Literal["complete"] = "complete"
    success: Literal[True] = True
    payload: Optional[Dict[str, Any]] = None
    execution_time_ms: int = Field(alias="executionTimeMs")
    tools_used: List[str] = Field(default_factory=list, alias="toolsUsed")


class FailureEvent(_Event):

    type: Literal["error"] = "error"
    success: Literal[False] = False
    error: str
    execution_time_ms: int = Field(alias="executionTimeMs")
    tools_used: List[str] = Field(default_factory=list, alias="toolsUsed")


RunEvent = Union[ProgressEvent, CompleteEvent, FailureEvent]


def is_terminal(event: RunEvent) -> bool:

    return event.type in ("complete", "error")


# -------- Results --------------------------------------------------------------
class ExtractedResult(BaseModel):

    model_config = ConfigDict(frozen=True)

    structured_payload: Optional[Any] = None
    free_text_sections: Dict[str, str] = Field(default_factory=dict)

    @property
    def resume_data(self) -> Optional[Dict[str, Any]]:
        """The optimized resume, unwrapped from `optimizedResumeData` when the model nested it."""

        payload = self.structured_payload

        if not isinstance(payload, dict):
            return None
        inner = payload.get("optimizedResumeData")

        return inner if isinstance(inner, dict) else payload

    @property
    def cover_letter(self) -> Optional[str]:

        return self.free_text_sections.get("cover_letter")

    def to_payload(self) -> Dict[str, Any]:

        payload: Dict[str, Any] = {
            "structuredPayload": self.structured_payload,
            "freeTextSections": dict(self.free_text_sections),
        }
        if self.resume_data is not None:
            payload["optimizedResumeData"] = self.resume_data
        if self.cover_letter is not None:
            payload["coverLetter"] = self.cover_letter

        return payload


class RunOutcome(BaseModel):

    model_config = ConfigDict(frozen=True)

    success: bool
    result: Optional[ExtractedResult] = None
    error: Optional[str] = None
    execution_time_ms: int
    tools_used: List[str] = Field(default_factory=list)
    steps: List[StepRecord] = Field(default_factory=list)
