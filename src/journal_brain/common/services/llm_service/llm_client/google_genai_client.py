# The core async set up for Google's GenAI LLM client
# NOTE: Can be swapped for different LLM providers if necessary

import json
import uuid
from typing import Type, Any, Optional, Sequence
from pydantic import ValidationError
# use tenacity to retry when desired
from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed, retry_if_exception_type

from google import genai # officially recommended import path
from google.genai import types
from google.genai import errors as genai_errors

from .protocols import PydanticModel, TypedLLMProtocol, ToolCallingLLMProtocol, ProvidesProviderInfo
from .protocols import RateLimitProvider
from journal_brain.common.types.agent_messages import (
    AgentMessage,
    UserMessage,
    AssistantMessage,
    ToolCallMessage,
    ToolResultMessage,
)
from journal_brain.common.types.llm_responses import LLMToolResponse, ToolCallRequest

from journal_brain.common.logging.logger import logger

# NOTE: this uses the public Gemini API with an API key, not Vertex AI.
# Set up this client with API key during app initialization
class AsyncGenAITypedClient(TypedLLMProtocol, ToolCallingLLMProtocol, ProvidesProviderInfo):
    def __init__(
        self,
        model_name: str = "gemini-2.5-flash",
        *,
        api_key: str | None = None,
        retry_attempts: int = 2,
        retry_wait: float = 0.1,
        retry_on: type[Exception] = ValidationError, # only retry when LLM fails to meet Pydantic validation
    ):
        # shared client for the app lifetime, FastAPI runs a single event loop
        self.client = genai.Client(api_key=api_key)
        self.model_name = model_name
        # Provider metadata for reporting
        self.provider = RateLimitProvider.GOOGLE
        self.model = model_name
        self.retryer = AsyncRetrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_fixed(retry_wait),
            retry=retry_if_exception_type(retry_on),
            reraise=True,
        )
        # tool-calling turns are only retried on provider-side (5xx) failures
        self.tool_call_retryer = AsyncRetrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_fixed(retry_wait),
            retry=retry_if_exception_type(genai_errors.ServerError),
            reraise=True,
        )

    async def acreate(
        self,
        response_model: Type[PydanticModel],
        system_prompt: str,
        user_prompt: str,
        **kwargs,
    ) -> PydanticModel:
        """
        Helper to create an async response from the LLM and parse it into a structured Pydantic model output.
        Supports retries to ensure LLM meets Pydantic validation.
        """

        prompt = f"{system_prompt}\n\n{user_prompt}"

        last_exception = None
        attempt_count = 0

        async for attempt in self.retryer:
            attempt_count += 1
            with attempt: # let tenacity see context of each attempt instead of swallowing until the last
                try:
                    resp = await self.client.aio.models.generate_content(
                        model=self.model_name,
                        contents=prompt, # auto-wrapped in a content object
                        config={
                            "response_mime_type": "application/json",
                            "response_schema": response_model,
                        },
                        **kwargs,
                    )
                    parsed = getattr(resp, "parsed", None)
                    if isinstance(parsed, response_model):
                        return parsed

                    text = getattr(resp, "text", None)
                    if isinstance(text, str) and text.strip():
                        return response_model.model_validate_json(self._strip_markdown_fences(text))

                    # Force a retryable failure when output is empty/invalid
                    raise ValueError("LLM response was empty or not parseable to JSON.")

                except Exception as e:
                    last_exception = e
                    # Let tenacity handle retry/terminal re-raise
                    raise

        # NOTE: only reachable if the retryer yields no attempts (misconfigured)
        raise RuntimeError(
            f"acreate() reached unexpected fallthrough after {attempt_count} attempts; "
            f"retryer likely yielded no final exception and no success. last_exc={type(last_exception).__name__ if last_exception else None}"
        )

    @staticmethod
    def _strip_markdown_fences(text: str) -> str:
        """Strip markdown code fences (```json ... ``` or ``` ... ```) from LLM output."""
        stripped = text.strip()
        if stripped.startswith("```"):
            # remove opening fence (```json or ```)
            first_newline = stripped.index("\n") if "\n" in stripped else len(stripped)
            stripped = stripped[first_newline + 1:]
            # remove closing fence
            if stripped.rstrip().endswith("```"):
                stripped = stripped.rstrip()[:-3].rstrip()
        return stripped

    async def acomplete(
        self,
        system_prompt: str,
        messages: Sequence[AgentMessage],
        tools: list[dict[str, Any]],
        **kwargs,
    ) -> LLMToolResponse:
        """
        Runs one tool-calling turn over the full conversation history.
        Unlike a self-contained tool loop, tools are NOT executed here: requested calls are
        returned to the caller (the agent kernel), which executes them and appends results to history.
        """
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            tools=[types.Tool(function_declarations=tools)] if tools else None, # type: ignore[arg-type]
        )
        contents = self.to_contents(messages)

        async for attempt in self.tool_call_retryer:
            with attempt:
                resp = await self.client.aio.models.generate_content(
                    model=self.model_name,
                    contents=contents, # type: ignore[arg-type]
                    config=config,
                    **kwargs,
                )
                return self.parse_response(resp)

        raise RuntimeError("acomplete() reached unexpected fallthrough; retryer yielded no attempts")

    @staticmethod
    def to_contents(messages: Sequence[AgentMessage]) -> list[types.Content]:
        """
        Converts agent history into Gemini contents.
        - assistant text and tool calls are "model" turns, user text and tool results are "user" turns
        - consecutive tool calls (or results) are grouped into one content, as Gemini expects parallel calls
        """
        contents: list[types.Content] = []
        for message in messages:
            if isinstance(message, UserMessage):
                contents.append(types.Content(role="user", parts=[types.Part(text=message.content)]))
            elif isinstance(message, AssistantMessage):
                contents.append(types.Content(role="model", parts=[types.Part(text=message.content)]))
            elif isinstance(message, ToolCallMessage):
                part = types.Part(function_call=types.FunctionCall(id=message.call_id, name=message.name, args=message.arguments))
                if contents and contents[-1].role == "model" and all(p.function_call for p in contents[-1].parts or []):
                    contents[-1].parts.append(part) # type: ignore[union-attr]
                else:
                    contents.append(types.Content(role="model", parts=[part]))
            elif isinstance(message, ToolResultMessage):
                try:
                    payload = json.loads(message.content)
                except json.JSONDecodeError:
                    payload = message.content
                part = types.Part(function_response=types.FunctionResponse(
                    id=message.call_id, name=message.name, response={"result": payload},
                ))
                if contents and contents[-1].role == "user" and all(p.function_response for p in contents[-1].parts or []):
                    contents[-1].parts.append(part) # type: ignore[union-attr]
                else:
                    contents.append(types.Content(role="user", parts=[part]))
        return contents

    @staticmethod
    def parse_response(resp: types.GenerateContentResponse) -> LLMToolResponse:
        """Extracts text + tool calls from the first candidate."""
        candidates = resp.candidates or []
        parts = (candidates[0].content.parts if candidates and candidates[0].content else None) or []

        texts: list[str] = []
        tool_calls: list[ToolCallRequest] = []
        for part in parts:
            if part.function_call is not None and part.function_call.name:
                tool_calls.append(ToolCallRequest(
                    id=part.function_call.id or f"call_{uuid.uuid4().hex[:12]}",
                    name=part.function_call.name,
                    arguments=_coerce_arguments(part.function_call.args),
                ))
            elif part.text and not part.thought:
                texts.append(part.text)

        text = "".join(texts).strip() or None
        logger.debug(f"[acomplete] model returned {len(tool_calls)} tool call(s), text={'yes' if text else 'no'}")
        return LLMToolResponse(text=text, tool_calls=tool_calls)

def _coerce_arguments(args: Optional[Any]) -> dict[str, Any]:
    if args is None:
        return {}
    if isinstance(args, str):
        try:
            parsed = json.loads(args)
        except json.JSONDecodeError:
            logger.warning(f"Tool call arguments were not valid JSON: {args[:200]}")
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return dict(args)
