from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable

INCOME = "income"
EXPENSE = "expense"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class Flow:
    kind: str  # income, expense or unknown
    reason: str | None = None  # original source string when unknown

    @property
    def is_unknown(self) -> bool:
        return self.kind == UNKNOWN

    @classmethod
    def unknown(cls, reason: str) -> "Flow":
        return cls(UNKNOWN, reason)


def classify_flow(raw: str) -> Flow:
    """Map the platforms' income/expense column to a Flow."""
    if raw == "收入":
        return Flow(INCOME)
    if raw == "支出":
        return Flow(EXPENSE)
    return Flow.unknown(raw)


@dataclass(frozen=True)
class Transaction:
    date: str  # YYYY-MM-DD
    payee: str
    narration: str
    amount: Decimal  # ledger-facing: income negated, expense as-is
    flow: Flow
    fund: str = ""
    metadata: tuple[tuple[str, str], ...] = field(default_factory=tuple)


@dataclass
class ImporterInfo:
    """Metadata and row adapter for a payment platform export."""
    key: str
    name: str
    header_lines: int
    fund_account: str
    parse_row: Callable
    is_valid: Callable | None = None
    encoding: str = "utf-8-sig"
