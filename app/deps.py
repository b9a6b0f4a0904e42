from fastapi import Header

from app.config import get_settings
from app.db.repository import ChatRepository
from app.errors import AuthenticationError
from app.llm.client import CompletionClient
from app.services.chat import ChatService

settings = get_settings()

repo = ChatRepository(settings.db_path)
client = CompletionClient(
    api_key=settings.llm_api_key,
    model=settings.llm_model,
    base_url=settings.llm_base_url,
)
chat_service = ChatService(
    repo,
    client,
    history_limit=settings.history_limit,
    expense_context_limit=settings.expense_context_limit,
)


def get_chat_service() -> ChatService:
    return chat_service


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity, attached by the auth layer in front of this service."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Missing user identity")
    return x_user_id.strip()
