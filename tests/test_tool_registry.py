from typing import Any

import pytest

from journal_brain.agent_service.tools.base import AgentTool
from journal_brain.agent_service.tools.registry import ToolRegistry, build_standard_registry
from journal_brain.common.errors import InvalidToolArguments, ToolExecutionFailed, ToolNotFound
from tests.fakes import ScriptedLLMClient

class EchoTool(AgentTool):
    declaration = {
        "name": "echo",
        "description": "Echo the arguments back.",
        "parameters": {"type": "object", "properties": {"value": {"type": "string"}}},
    }

    def __init__(self, tag: str = "first"):
        self.tag = tag

    async def execute(self, arguments: dict[str, Any]) -> Any:
        return {"echo": arguments.get("value"), "tag": self.tag}

class BrokenTool(AgentTool):
    declaration = {"name": "broken", "description": "Always fails."}

    async def execute(self, arguments: dict[str, Any]) -> Any:
        raise InvalidToolArguments("value is required")

def test_schema_shape():
    assert EchoTool().to_schema() == EchoTool.declaration
    assert BrokenTool().parameters == {"type": "object", "properties": {}}

def test_register_and_lookup():
    registry = ToolRegistry()
    tool = EchoTool()
    registry.register(tool)
    assert registry.has("echo")
    assert registry.get("echo") is tool
    assert registry.get("missing") is None
    assert registry.tool_names == ["echo"]
    assert registry.schemas() == [tool.to_schema()]

def test_re_registering_replaces_the_tool():
    registry = ToolRegistry([EchoTool("first")])
    replacement = EchoTool("second")
    registry.register(replacement)
    assert registry.get("echo") is replacement
    assert len(registry) == 1

def test_unregister():
    registry = ToolRegistry([EchoTool()])
    assert registry.unregister("echo") is True
    assert registry.unregister("echo") is False
    assert not registry.has("echo")

@pytest.mark.asyncio
async def test_execute_runs_the_tool():
    registry = ToolRegistry([EchoTool()])
    assert await registry.execute("echo", {"value": "hi"}) == {"echo": "hi", "tag": "first"}

@pytest.mark.asyncio
async def test_execute_unknown_tool():
    registry = ToolRegistry([EchoTool()])
    with pytest.raises(ToolNotFound) as exc_info:
        await registry.execute("nope", {})
    assert exc_info.value.name == "nope"
    assert "echo" in str(exc_info.value)

@pytest.mark.asyncio
async def test_execute_wraps_tool_failures():
    registry = ToolRegistry([BrokenTool()])
    with pytest.raises(ToolExecutionFailed) as exc_info:
        await registry.execute("broken", {})
    assert exc_info.value.name == "broken"
    assert isinstance(exc_info.value.cause, InvalidToolArguments)
    assert "value is required" in str(exc_info.value)

def test_standard_registry(retrieval_service, result_cache):
    registry = build_standard_registry(retrieval_service, result_cache, ScriptedLLMClient())
    assert registry.tool_names == ["retrieve", "analyze", "memory_write", "context_bundle"]
    for schema in registry.schemas():
        assert set(schema) == {"name", "description", "parameters"}
        assert schema["parameters"]["type"] == "object"
