"""
src/orchestrator/llm_openai.py

OpenAI client wrapper for function calling.
- ChatModel: the turn-level contract the step loop depends on
- OpenAIChatModel.respond(): one model turn (no tool execution)
- extract_tool_calls(): normalise tool calls from a response choice
"""


import json
from typing import Any, Dict, List, Optional, Protocol

from openai import OpenAI

from config import DEFAULT_MODEL, MODEL_TEMPERATURE, MODEL_TIMEOUT_S, OPENAI_API_KEY
from orchestrator.models import ModelTurn, ToolCall


class ChatModel(Protocol):

    name: str

    def respond(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict[str, Any]]] = None) -> ModelTurn:
        ...


def extract_tool_calls(choice) -> List[ToolCall]:
    """
    Normalize tool calls from the OpenAI response choice.
    Unparseable arguments become {} and fail schema validation downstream.
    """

    out = []
    tcs = getattr(choice.message, "tool_calls", None)

    if not tcs:
        return out

    for tc in tcs:
        if tc.type == "function" and tc.function:
            try:
                args = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                args = {}
            if not isinstance(args, dict):
                args = {}
            out.append(ToolCall(id=tc.id, name=tc.function.name, arguments=args))

    return out


class OpenAIChatModel:
    """Chat Completions backed ChatModel. Errors from the SDK propagate unchanged."""

    def __init__(self, model: str = DEFAULT_MODEL, *, client: Optional[OpenAI] = None,
                 temperature: float = MODEL_TEMPERATURE, timeout_s: float = MODEL_TIMEOUT_S):

        self.name = f"openai/{model}"
        self.model = model
        self.temperature = temperature
        # max_retries=0: a failed turn fails the run, retry policy belongs to the caller
        self.client = client or OpenAI(api_key=OPENAI_API_KEY, timeout=timeout_s, max_retries=0)

    def respond(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict[str, Any]]] = None) -> ModelTurn:

        kwargs: Dict[str, Any] = {}
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        resp = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            **kwargs,
        )
        choice = resp.choices[0]

        return ModelTurn(
            text=choice.message.content or "",
            tool_calls=extract_tool_calls(choice),
            finish_reason=choice.finish_reason,
        )
