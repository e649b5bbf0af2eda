# ReAct loop: the model reasons over the conversation, calls tools, observes their results, and repeats
# until it answers in plain text or the iteration ceiling is reached

import json
import time
from datetime import datetime
from typing import Any, Callable, Optional

from journal_brain.agent_service.common.system_prompts.agent_prompts import AgentPrompts
from journal_brain.agent_service.common.types.agent_response import AgentResponse, ResponseMetadata, TokenUsage
from journal_brain.agent_service.tools.registry import ToolRegistry
from journal_brain.common.errors import InvalidResponse, ToolNotFound, ToolExecutionFailed
from journal_brain.common.services.llm_service.llm_client.protocols import ToolCallingLLMProtocol
from journal_brain.common.types.agent_messages import (
    AgentMessage,
    UserMessage,
    AssistantMessage,
    ToolCallMessage,
    ToolResultMessage,
)
from journal_brain.common.types.llm_responses import ToolCallRequest
from journal_brain.common.utils.time_utils import utc_now
from journal_brain.memory.result_cache import ResultCache
from journal_brain.memory.retrieval.results import is_retrieve_payload, build_result_preview
from journal_brain.memory.token_budget import TokenBudgetManager
from journal_brain.common.logging.logger import logger

DEFAULT_MAX_ITERATIONS = 10
MAX_ITERATIONS_MESSAGE = (
    "I apologize, but I've reached my processing limit for this query. "
    "Could you try rephrasing your question?"
)

def _to_json(payload: Any) -> str:
    return json.dumps(payload, default=str, ensure_ascii=False)

class AgentKernel():
    """
    Orchestrates one agent run per user message.
    - Tool calls in a model turn run sequentially in the requested order, each followed by exactly one result.
    - Retrieve payloads ({items, metadata}) go to the ResultCache, only a preview is folded into the conversation.
    - Tool failures (unknown tool, execution error) are returned to the model as {"error", "tool"} data.
    - A turn with neither text nor tool calls raises InvalidResponse.
    """

    def __init__(
        self,
        llm_client: ToolCallingLLMProtocol,
        tool_registry: ToolRegistry,
        result_cache: ResultCache,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        model: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        self.llm_client = llm_client
        self.tool_registry = tool_registry
        self.result_cache = result_cache
        self.max_iterations = max_iterations
        self.model = model or getattr(llm_client, "model", "unknown")
        self.clock = clock

    async def run_agent(self, user_message: str, conversation_history: Optional[list[AgentMessage]] = None) -> AgentResponse:
        start = time.perf_counter()
        messages: list[AgentMessage] = list(conversation_history or [])
        messages.append(UserMessage(content=user_message))

        system_prompt = AgentPrompts.build_system_prompt(self.clock())
        tool_schemas = self.tool_registry.schemas()
        tools_used: list[str] = []
        prompt_tokens = 0
        completion_tokens = 0
        iteration = 0

        while iteration < self.max_iterations:
            iteration += 1

            response = await self.llm_client.acomplete(
                system_prompt=system_prompt,
                messages=list(messages),
                tools=tool_schemas,
            )
            prompt_tokens += self._estimate_prompt_tokens(system_prompt, messages)
            if response.text:
                completion_tokens += TokenBudgetManager.estimate_tokens(response.text)

            if response.has_tool_calls:
                logger.info(f"[agent] iteration {iteration}: {len(response.tool_calls)} tool call(s) {[c.name for c in response.tool_calls]}")
                for tool_call in response.tool_calls:
                    if tool_call.name not in tools_used:
                        tools_used.append(tool_call.name)
                    messages.append(ToolCallMessage(call_id=tool_call.id, name=tool_call.name, arguments=tool_call.arguments))
                    content = await self._execute_tool_call(tool_call)
                    messages.append(ToolResultMessage(call_id=tool_call.id, name=tool_call.name, content=content))
                continue

            if response.text and response.text.strip():
                messages.append(AssistantMessage(content=response.text))
                logger.info(f"[agent] final answer after {iteration} iteration(s), tools used: {tools_used}")
                return self._build_response(
                    response.text, tools_used, messages, iteration, start, prompt_tokens, completion_tokens, False
                )

            raise InvalidResponse("Model returned no content or tool calls")

        logger.warning(f"[agent] hit max iterations ({self.max_iterations}) without a final answer")
        return self._build_response(
            MAX_ITERATIONS_MESSAGE, tools_used, messages, iteration, start, prompt_tokens, completion_tokens, True
        )

    async def _execute_tool_call(self, tool_call: ToolCallRequest) -> str:
        """Runs one tool call, returns the JSON content of its result message."""
        try:
            result = await self.tool_registry.execute(tool_call.name, tool_call.arguments)
        except (ToolNotFound, ToolExecutionFailed) as e:
            logger.warning(f"[agent] tool '{tool_call.name}' returned an error to the model: {e}")
            return _to_json({"error": str(e), "tool": tool_call.name})

        if is_retrieve_payload(result):
            result_id = self.result_cache.store(result)
            logger.info(f"[agent] cached {tool_call.name} result as '{result_id}'")
            return _to_json(build_result_preview(result_id, result))
        return _to_json(result)

    @staticmethod
    def _estimate_prompt_tokens(system_prompt: str, messages: list[AgentMessage]) -> int:
        chars = len(system_prompt) + sum(len(message.model_dump_json()) for message in messages)
        return chars // 4

    def _build_response(
        self,
        text: str,
        tools_used: list[str],
        messages: list[AgentMessage],
        iterations: int,
        start: float,
        prompt_tokens: int,
        completion_tokens: int,
        hit_max_iterations: bool,
    ) -> AgentResponse:
        return AgentResponse(
            text=text,
            tools_used=list(tools_used),
            messages=list(messages),
            metadata=ResponseMetadata(
                iterations=iterations,
                duration_seconds=time.perf_counter() - start,
                model=self.model,
                estimated_tokens=TokenUsage(
                    prompt=prompt_tokens,
                    completion=completion_tokens,
                    total=prompt_tokens + completion_tokens,
                ),
                hit_max_iterations=hit_max_iterations,
            ),
        )
