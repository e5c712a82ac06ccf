from decimal import Decimal, InvalidOperation
from typing import Callable

from beanimport.errors import MissingFieldError


def pick(row: list[str], name: str, index: int, transform: Callable | None = None):
    """Return column ``index`` of ``row``, passed through ``transform``.

    A missing column, or a transform that fails or returns None, raises
    MissingFieldError naming the field.
    """
    if index >= len(row):
        raise MissingFieldError(name, index, row)
    value = row[index]
    if transform is None:
        return value
    try:
        result = transform(value)
    except (ValueError, ArithmeticError) as exc:
        raise MissingFieldError(name, index, row) from exc
    if result is None:
        raise MissingFieldError(name, index, row)
    return result


def first_token(raw: str) -> str | None:
    """'2020-03-30 18:46:56' -> '2020-03-30'."""
    parts = raw.split()
    return parts[0] if parts else None


def parse_decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw.replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"Not a number: {raw!r}")
