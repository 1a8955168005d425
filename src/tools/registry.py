"""
src/tools/registry.py - tool invocation adapter

Wraps declared capabilities (name, input schema, executor) so the step loop can
call any domain tool generically.

Key ideas explained:

1) Schemas are pydantic models
   Each tool declares its input as a BaseModel. The same model produces the JSON
   schema we offer the model and validates the arguments the model sends back.

2) Failures are results, not exceptions
   Validation errors, executor exceptions and unknown tool names all come back
   as ToolResult(success=False). The model sees the error on its next turn and
   can correct itself; the run keeps going.

3) Fuzzy "did you mean" (RapidFuzz)
   Models sometimes call `analyzeJob` instead of `analyze_job`. We score the
   requested name against registered names and suggest the closest one.
"""


from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from loguru import logger
from pydantic import BaseModel, ValidationError
from rapidfuzz import fuzz, process, utils

from orchestrator.models import ToolResult


SUGGESTION_CUTOFF = 60


@dataclass(frozen=True)
class ToolDescriptor:

    name: str
    description: str
    input_schema: Type[BaseModel]
    executor: Callable[[BaseModel], Any]


def _tool_spec(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    """Build an OpenAI function spec."""

    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


def _format_validation_error(err: ValidationError) -> str:

    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "(root)"
        parts.append(f"{loc}: {e.get('msg')}")

    return "Invalid arguments - " + "; ".join(parts)


class ToolRegistry(Mapping[str, ToolDescriptor]):
    """Read-only mapping of tool name -> descriptor, fixed at construction."""

    def __init__(self, descriptors: Iterable[ToolDescriptor]):

        tools: Dict[str, ToolDescriptor] = {}

        for d in descriptors:
            if d.name in tools:
                raise ValueError(f"Duplicate tool name: {d.name}")
            tools[d.name] = d

        self._tools = tools

    def __getitem__(self, name: str) -> ToolDescriptor:

        return self._tools[name]

    def __iter__(self):

        return iter(self._tools)

    def __len__(self) -> int:

        return len(self._tools)

    def names(self) -> List[str]:

        return list(self._tools)

    def specs(self) -> List[Dict[str, Any]]:
        """JSON schemas describing the tools we expose to the model."""

        return [
            _tool_spec(d.name, d.description, d.input_schema.model_json_schema())
            for d in self._tools.values()
        ]

    def suggest(self, name: str) -> Optional[str]:
        """Closest registered tool name, if any is similar enough."""

        match = process.extractOne(
            name, self.names(), scorer=fuzz.WRatio, processor=utils.default_process, score_cutoff=SUGGESTION_CUTOFF,
        )

        return match[0] if match else None

    def execute(self, name: str, arguments: Dict[str, Any]) -> ToolResult:
        """Validate `arguments` against the tool's schema and run it. Never raises."""

        descriptor = self._tools.get(name)

        if descriptor is None:
            hint = self.suggest(name)
            error = f"Unknown tool: {name}"
            if hint:
                error += f". Did you mean '{hint}'?"
            logger.warning(f"[tools] {error}")
            return ToolResult(name=name, success=False, error=error)

        try:
            payload = descriptor.input_schema.model_validate(arguments or {})
        except ValidationError as e:
            error = _format_validation_error(e)
            logger.warning(f"[tools] {name}: {error}")
            return ToolResult(name=name, success=False, error=error)

        try:
            data = descriptor.executor(payload)
        except Exception as e:
            logger.exception(f"[tools] {name} failed")
            return ToolResult(name=name, success=False, error=str(e) or type(e).__name__)

        logger.debug(f"[tools] {name} ok")

        return ToolResult(name=name, success=True, data=data)
