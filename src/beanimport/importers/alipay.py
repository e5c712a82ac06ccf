from beanimport.importers.fields import first_token, parse_decimal, pick
from beanimport.models import INCOME, Transaction, classify_flow

CLOSED_STATUS = "交易关闭"


def is_valid(row: list[str]) -> bool:
    """Closed (never paid) trades carry no money movement."""
    if len(row) <= 11:
        return False
    return row[11] != CLOSED_STATUS


def parse_row(row: list[str]) -> Transaction:
    """Adapt one Alipay export row.

    Columns: 3 payment time, 7 counterparty, 8 goods, 9 amount, 10 in/out,
    11 trade status.
    """
    flow = classify_flow(pick(row, "flow", 10))
    amount = pick(row, "amount", 9, parse_decimal)
    if flow.kind == INCOME:
        amount = -amount

    metadata = ()
    if flow.is_unknown:
        metadata = (("unknown_flow", flow.reason),)

    return Transaction(
        date=pick(row, "date", 3, first_token),
        payee=pick(row, "payee", 7),
        narration=pick(row, "narration", 8),
        amount=amount,
        flow=flow,
        metadata=metadata,
    )
