import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatTurn(BaseModel):
    id: int | None = None
    user_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class ExpensePayload(BaseModel):
    """Expense object the model embeds in its reply, after validation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type: Literal["expense"] = "expense"
    amount: float = Field(ge=0, allow_inf_nan=False)
    category: str = Field(min_length=1)
    description: str | None = None
    date: dt.date

    @field_validator("amount", mode="before")
    @classmethod
    def amount_must_be_numeric(cls, value):
        # JSON true/false decode to bool, which is an int subclass
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("amount must be a number")
        return value

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: str | None) -> str | None:
        return value or None


class ExpenseRecord(BaseModel):
    id: int | None = None
    user_id: str
    amount: float
    category: str
    description: str | None = None
    date: dt.date
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class ChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    message: str
    expense: ExpensePayload | None = None


class ExpenseListResponse(BaseModel):
    expenses: list[ExpenseRecord]
    total: float


class ErrorResponse(BaseModel):
    error: str
