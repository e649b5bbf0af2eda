# base class for tools the agent kernel can call
# NOTE: schemas live in common/tool_calling_declarations, one declaration dict per tool

from abc import ABC, abstractmethod
from typing import Any

class AgentTool(ABC):
    """
    A named, schema-described async operation exposed to the model.
    Subclasses set `declaration` (a {name, description, parameters} dict) and implement execute().
    Raised errors are wrapped by the ToolRegistry, never returned as values.
    """
    declaration: dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self.declaration["name"]

    @property
    def description(self) -> str:
        return self.declaration.get("description", "")

    @property
    def parameters(self) -> dict[str, Any]:
        return self.declaration.get("parameters", {"type": "object", "properties": {}})

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> Any: ...

    def to_schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }
