from fastapi import APIRouter, Depends, Query
from loguru import logger

from app.deps import get_chat_service, get_user_id
from app.models.schemas import (
    ChatRequest,
    ChatResponse,
    ChatTurn,
    ErrorResponse,
    ExpenseListResponse,
)
from app.services.chat import ChatService

router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat_service),
):
    logger.info("Chat message from {}: {}", user_id, request.message)
    return service.handle(user_id, request.message)


@router.get("/messages", response_model=list[ChatTurn])
def list_messages(
    limit: int = Query(default=50, ge=1, le=500),
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.repo.list_turns(user_id, limit)


@router.get("/expenses", response_model=ExpenseListResponse)
def list_expenses(
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat_service),
):
    expenses = service.repo.list_expenses(user_id)
    total = round(sum(e.amount for e in expenses), 2)
    return ExpenseListResponse(expenses=expenses, total=total)
