from decimal import Decimal

from beanimport.models import Transaction
from beanimport.rules import RulesStore

CURRENCY = "CNY"


def format_amount(amount: Decimal) -> str:
    """Fixed-point text of ``amount``; negative zero prints as 0."""
    if amount.is_zero():
        amount = abs(amount)
    return f"{amount:f}"


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_transaction(transaction: Transaction, rules: RulesStore, fund_account: str) -> str:
    """Render one ledger record, without the trailing newline."""
    account = rules.resolve_payee_account(transaction.payee)
    flag = "!" if not account or transaction.flow.is_unknown else "*"
    payee = rules.resolve_payee_alias(transaction.payee) or transaction.payee

    lines = [f"{transaction.date} {flag} {_quote(payee)} {_quote(transaction.narration)}"]
    for key, value in transaction.metadata:
        lines.append(f"  {key}: {_quote(value)}")

    prefix = f"{account} " if account else ""
    lines.append(f"  {prefix}{format_amount(transaction.amount)} {CURRENCY}")

    fund = None
    if transaction.fund:
        fund = rules.resolve_fund_account(transaction.fund)
    lines.append(f"  {fund or fund_account}")
    return "\n".join(lines)


class Bean:
    """The transactions of one import run and their default fund account."""

    def __init__(self, fund_account: str):
        self.fund_account = fund_account
        self.transactions: list[Transaction] = []

    def add(self, transaction: Transaction) -> None:
        self.transactions.append(transaction)

    def __len__(self) -> int:
        return len(self.transactions)

    def render(self, rules: RulesStore) -> str:
        return "".join(
            render_transaction(t, rules, self.fund_account) + "\n"
            for t in self.transactions
        )
