from fastapi import APIRouter, Request

from nextgen.api.errors import HANDLED_ERRORS, raise_http_error
from nextgen.core.rate_limit import ai_rate_limit, rate_limit
from nextgen.schemas.chat import ChatRequest
from nextgen.services import chat_service

router = APIRouter()


@router.get("/chat/{user_id}")
@rate_limit()
async def chat_history(request: Request, user_id: str):
    _ = request
    return chat_service.get_history(user_id)


@router.post("/chat/{user_id}")
@ai_rate_limit()
async def chat(request: Request, user_id: str, payload: ChatRequest):
    _ = request
    try:
        return await chat_service.send_message(user_id, payload.message, payload.sessionId)
    except HANDLED_ERRORS as exc:
        raise_http_error(exc)


@router.delete("/chat/{user_id}/{session_id}")
@rate_limit()
async def end_chat(request: Request, user_id: str, session_id: str):
    _ = request
    chat_service.end_session(user_id, session_id)
    return {"message": "Chat session ended"}
