import datetime as dt
import json
from typing import NamedTuple

from loguru import logger
from pydantic import ValidationError

from app.errors import ExtractionParseError
from app.models.schemas import ExpensePayload

_decoder = json.JSONDecoder()


class Extraction(NamedTuple):
    payload: ExpensePayload
    span: tuple[int, int]


def _candidates(text: str):
    """Yield (start, end, value) for every JSON value that decodes at a ``{``."""
    start = text.find("{")
    while start != -1:
        try:
            value, end = _decoder.raw_decode(text, start)
        except ValueError as e:
            # JSONDecodeError, or an integer over the digit limit
            logger.debug("Skipping malformed object at {}: {}", start, e)
        except RecursionError:
            # Retrying each nested brace would be quadratic
            logger.debug("Nesting too deep at {}, giving up", start)
            return
        else:
            yield start, end, value
        start = text.find("{", start + 1)


def _validate(data: dict, today: dt.date) -> ExpensePayload:
    data = dict(data)
    if not data.get("date"):
        data["date"] = today.isoformat()
    try:
        return ExpensePayload.model_validate(data)
    except ValidationError as e:
        raise ExtractionParseError(f"invalid expense payload: {e}") from e


def extract_expense(text: str, today: dt.date | None = None) -> Extraction | None:
    """Find the first object tagged ``"type": "expense"`` embedded in ``text``.

    Prose, code fences and other brace-delimited regions around the payload
    are skipped. Returns None when nothing is found or the first expense
    object fails validation; never raises.
    """
    today = today or dt.date.today()
    for start, end, value in _candidates(text):
        if not isinstance(value, dict) or value.get("type") != "expense":
            continue
        try:
            payload = _validate(value, today)
        except ExtractionParseError as e:
            logger.warning("Error parsing expense: {}", e)
            return None
        return Extraction(payload=payload, span=(start, end))
    return None
