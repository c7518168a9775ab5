import math
from typing import Annotated

from pydantic import BaseModel, BeforeValidator


def to_float(value: object) -> float:
    """Tolerant numeric conversion: missing or non-numeric input counts as zero."""
    if isinstance(value, bool):
        return float(value)
    try:
        out = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def to_int(value: object) -> int:
    return int(to_float(value))


def to_text(value: object) -> str:
    if value is None:
        return ''
    return str(value)


def to_optional_text(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


Amount = Annotated[float, BeforeValidator(to_float)]
Count = Annotated[int, BeforeValidator(to_int)]
Text = Annotated[str, BeforeValidator(to_text)]
OptionalText = Annotated[str | None, BeforeValidator(to_optional_text)]


class ErrorBody(BaseModel):
    error_code: str
    message: str
    details: dict | str | None = None
    trace_id: str | None = None
