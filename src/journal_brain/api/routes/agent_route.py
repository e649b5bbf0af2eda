# agent chat route

from fastapi import APIRouter, Depends, HTTPException, status
from journal_brain.common.logging.logger import logger
from journal_brain.common.errors import InvalidResponse
# dependencies
from journal_brain.core.dependencies import get_agent_kernel
from journal_brain.agent_service.orchestrator.agent_kernel import AgentKernel
# request/response models
from journal_brain.api.request_models.agent import AgentChatRequest
from journal_brain.api.response_models.agent import AgentChatResponse

router = APIRouter(prefix="/agent", tags=["Agent"])

@router.post("/chat", response_model=AgentChatResponse)
async def chat(
    request: AgentChatRequest,
    agent_kernel: AgentKernel = Depends(get_agent_kernel),
):
    try:
        response = await agent_kernel.run_agent(request.message, conversation_history=request.history)
    except InvalidResponse as e:
        logger.error(f"Agent run aborted: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    payload = response.to_json()
    return AgentChatResponse(
        text=payload["text"],
        tools_used=payload["toolsUsed"],
        metadata=payload["metadata"],
        history=response.messages,
    )
