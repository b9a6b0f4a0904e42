from dataclasses import dataclass
from typing import Any

from loguru import logger

from app.db.repository import ChatRepository
from app.errors import PersistenceWriteError
from app.models.schemas import ExpensePayload


@dataclass
class WriteResult:
    step: str
    ok: bool
    row: Any = None
    error: PersistenceWriteError | None = None


class PersistenceGateway:
    """Independent single-row inserts for one exchange.

    Each write reports its own outcome. A failed write never rolls back an
    earlier one and never stops a later one.
    """

    def __init__(self, repo: ChatRepository):
        self.repo = repo

    def _attempt(self, step: str, write, *args) -> WriteResult:
        try:
            row = write(*args)
        except Exception as e:
            error = PersistenceWriteError(step, e)
            logger.error("Persistence write {} failed: {}", step, e)
            return WriteResult(step=step, ok=False, error=error)
        logger.debug("Persistence write {} ok (id={})", step, row.id)
        return WriteResult(step=step, ok=True, row=row)

    def save_user_turn(self, user_id: str, text: str) -> WriteResult:
        return self._attempt("save_user_turn", self.repo.add_turn, user_id, "user", text)

    def save_expense(self, user_id: str, payload: ExpensePayload) -> WriteResult:
        return self._attempt("save_expense", self.repo.add_expense, user_id, payload)

    def save_assistant_turn(self, user_id: str, text: str) -> WriteResult:
        return self._attempt(
            "save_assistant_turn", self.repo.add_turn, user_id, "assistant", text
        )

    def record_exchange(
        self,
        user_id: str,
        message: str,
        reply: str,
        payload: ExpensePayload | None,
    ) -> list[WriteResult]:
        results = [self.save_user_turn(user_id, message)]
        if payload is not None:
            results.append(self.save_expense(user_id, payload))
        results.append(self.save_assistant_turn(user_id, reply))
        return results
