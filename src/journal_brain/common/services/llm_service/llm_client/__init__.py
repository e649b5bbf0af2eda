from journal_brain.common.services.llm_service.llm_client.dispatcher import TypedLLMClient, LLMProvider
from journal_brain.common.services.llm_service.llm_client.protocols import TypedLLMProtocol, ToolCallingLLMProtocol

__all__ = ["TypedLLMClient", "LLMProvider", "TypedLLMProtocol", "ToolCallingLLMProtocol"]
