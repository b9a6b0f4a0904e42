import datetime as dt
from dataclasses import dataclass

from loguru import logger

from app.db.gateway import PersistenceGateway
from app.db.repository import ChatRepository
from app.errors import AuthenticationError, ContextUnavailableError
from app.formatting import format_amount
from app.llm.client import CompletionClient
from app.llm.extractor import extract_expense
from app.llm.prompts import build_system_prompt
from app.models.schemas import ChatResponse, ExpensePayload


@dataclass
class ConversationContext:
    system_prompt: str
    messages: list[dict]


def compose_reply(raw: str, payload: ExpensePayload | None) -> str:
    if payload is None:
        return raw
    reply = f"Got it! I've tracked {format_amount(payload.amount)} for {payload.category}"
    if payload.description:
        reply += f" ({payload.description})"
    return reply + ". Keep up the great work tracking your expenses! 💰"


class ChatService:
    """Message pipeline: context, completion, extraction, reply, persistence."""

    def __init__(
        self,
        repo: ChatRepository,
        client: CompletionClient,
        history_limit: int = 10,
        expense_context_limit: int = 20,
        clock=dt.date.today,
    ):
        self.repo = repo
        self.gateway = PersistenceGateway(repo)
        self.client = client
        self.history_limit = history_limit
        self.expense_context_limit = expense_context_limit
        self.clock = clock

    def assemble_context(self, user_id: str, message: str, today: dt.date) -> ConversationContext:
        try:
            turns = self.repo.recent_turns(user_id, self.history_limit)
            expenses = self.repo.recent_expenses(user_id, self.expense_context_limit)
        except Exception as e:
            logger.error("Failed to load context for {}: {}", user_id, e)
            raise ContextUnavailableError(f"Could not load conversation history: {e}") from e

        system_prompt = build_system_prompt(expenses, today)
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": t.role, "content": t.content} for t in turns)
        messages.append({"role": "user", "content": message})
        return ConversationContext(system_prompt=system_prompt, messages=messages)

    def handle(self, user_id: str | None, message: str) -> ChatResponse:
        if not user_id or not user_id.strip():
            raise AuthenticationError("Missing user identity")

        today = self.clock()
        context = self.assemble_context(user_id, message, today)
        raw = self.client.complete(context.messages)

        extraction = extract_expense(raw, today)
        payload = extraction.payload if extraction else None
        if payload:
            logger.info(
                "Expense detected for {}: {} {}", user_id, payload.amount, payload.category
            )

        reply = compose_reply(raw, payload)
        results = self.gateway.record_exchange(user_id, message, reply, payload)
        failed = [r.step for r in results if not r.ok]
        if failed:
            logger.warning("Reply sent with unsaved writes for {}: {}", user_id, failed)

        return ChatResponse(message=reply, expense=payload)
