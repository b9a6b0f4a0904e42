from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

from app.models.schemas import ChatTurn, ExpensePayload, ExpenseRecord


class ChatRepository:
    def __init__(self, db_path: str = "savings_coach.json", db: TinyDB | None = None):
        self.db = db if db is not None else TinyDB(db_path)
        self.turns = self.db.table("chat_messages")
        self.expenses = self.db.table("expenses")

    @classmethod
    def in_memory(cls) -> "ChatRepository":
        return cls(db=TinyDB(storage=MemoryStorage))

    def add_turn(self, user_id: str, role: str, content: str) -> ChatTurn:
        turn = ChatTurn(user_id=user_id, role=role, content=content)
        data = turn.model_dump(mode="json")
        data.pop("id", None)
        turn.id = self.turns.insert(data)
        return turn

    def add_expense(self, user_id: str, payload: ExpensePayload) -> ExpenseRecord:
        expense = ExpenseRecord(
            user_id=user_id,
            amount=payload.amount,
            category=payload.category,
            description=payload.description,
            date=payload.date,
        )
        data = expense.model_dump(mode="json")
        data.pop("id", None)
        expense.id = self.expenses.insert(data)
        return expense

    def _user_turns(self, user_id: str) -> list[ChatTurn]:
        Turn = Query()
        docs = self.turns.search(Turn.user_id == user_id)
        turns = [ChatTurn(id=doc.doc_id, **doc) for doc in docs]
        return sorted(turns, key=lambda t: (t.created_at, t.id))

    def _user_expenses(self, user_id: str) -> list[ExpenseRecord]:
        Expense = Query()
        docs = self.expenses.search(Expense.user_id == user_id)
        expenses = [ExpenseRecord(id=doc.doc_id, **doc) for doc in docs]
        return sorted(expenses, key=lambda e: (e.created_at, e.id), reverse=True)

    def recent_turns(self, user_id: str, limit: int = 10) -> list[ChatTurn]:
        """Latest ``limit`` turns for the user, oldest first."""
        if limit <= 0:
            return []
        return self._user_turns(user_id)[-limit:]

    def recent_expenses(self, user_id: str, limit: int = 20) -> list[ExpenseRecord]:
        """Latest ``limit`` expenses for the user, newest first."""
        if limit <= 0:
            return []
        return self._user_expenses(user_id)[:limit]

    def list_turns(self, user_id: str, limit: int = 50) -> list[ChatTurn]:
        return self.recent_turns(user_id, limit)

    def list_expenses(self, user_id: str) -> list[ExpenseRecord]:
        return self._user_expenses(user_id)
