from beanimport.importers.fields import first_token, parse_decimal, pick
from beanimport.models import INCOME, Flow, Transaction, classify_flow

WITHDRAWAL_ARRIVED = "提现已到账"
FULLY_REFUNDED = "已全额退款"

# Statuses that make the nominal in/out column meaningless; these rows are
# transfers and surface as unknown_flow metadata for manual review.
UNKNOWN_FLOW_STATUSES = frozenset({FULLY_REFUNDED, WITHDRAWAL_ARRIVED})


def _parse_amount(raw: str):
    return parse_decimal(raw.lstrip("¥"))


def resolve_flow(row: list[str], unknown_statuses=UNKNOWN_FLOW_STATUSES) -> Flow:
    status = pick(row, "status", 7)
    if status in unknown_statuses:
        return Flow.unknown(status)
    return classify_flow(pick(row, "flow", 4))


def resolve_narration(row: list[str]) -> str:
    if pick(row, "status", 7) == WITHDRAWAL_ARRIVED:
        return f"{pick(row, 'trade_type', 1)} {pick(row, 'remark', 10)}"
    return pick(row, "narration", 3)


def parse_row(row: list[str], unknown_statuses=UNKNOWN_FLOW_STATUSES) -> Transaction:
    """Adapt one WeChat Pay export row.

    Columns: 0 time, 1 trade type, 2 counterparty, 3 goods, 4 in/out,
    5 amount, 6 payment method, 7 status, 10 remark.
    """
    flow = resolve_flow(row, unknown_statuses)
    amount = pick(row, "amount", 5, _parse_amount)
    if flow.kind == INCOME:
        amount = -amount

    metadata = ()
    if flow.is_unknown:
        metadata = (("unknown_flow", flow.reason),)

    return Transaction(
        date=pick(row, "date", 0, first_token),
        payee=pick(row, "payee", 2),
        narration=resolve_narration(row),
        fund=pick(row, "fund", 6),
        amount=amount,
        flow=flow,
        metadata=metadata,
    )
