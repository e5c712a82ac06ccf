from decimal import Decimal

from beanimport.ledger import Bean, format_amount, render_transaction
from beanimport.models import EXPENSE, INCOME, Flow, Transaction
from beanimport.rules import RulesStore


def _txn(**values) -> Transaction:
    fields = {
        "date": "2020-04-01", "payee": "SomeShop", "narration": "some notes",
        "amount": Decimal("0"), "flow": Flow.unknown("default"),
    }
    fields.update(values)
    return Transaction(**fields)


def test_output():
    bean = Bean("Assets:Test")
    bean.add(_txn())
    assert bean.render(RulesStore.from_string("")) == (
        '2020-04-01 ! "SomeShop" "some notes"\n'
        "  0 CNY\n"
        "  Assets:Test\n"
    )


def test_output_with_payee_account():
    bean = Bean("Assets:Test")
    bean.add(_txn(flow=Flow(EXPENSE)))
    rules = RulesStore.from_string('[payee]\nSomeShop = "Expenses:Custom"\n')
    assert bean.render(rules) == (
        '2020-04-01 * "SomeShop" "some notes"\n'
        "  Expenses:Custom 0 CNY\n"
        "  Assets:Test\n"
    )


def test_unknown_flow_is_flagged_even_with_account():
    rules = RulesStore.from_string('[payee]\nSomeShop = "Expenses:Custom"\n')
    text = render_transaction(_txn(), rules, "Assets:Test")
    assert text.startswith('2020-04-01 ! "SomeShop"')
    assert "  Expenses:Custom 0 CNY" in text


def test_unassigned_payee_is_flagged():
    text = render_transaction(_txn(flow=Flow(EXPENSE)), RulesStore.from_string('[payee]\nSomeShop = ""\n'), "Assets:Test")
    assert text.splitlines()[0] == '2020-04-01 ! "SomeShop" "some notes"'
    assert text.splitlines()[1] == "  0 CNY"


def test_output_with_fund_account():
    rules = RulesStore.from_string('[fund]\ncustom = "Assets:Custom"\n')
    text = render_transaction(_txn(fund="custom"), rules, "Assets:Test")
    assert text.splitlines()[-1] == "  Assets:Custom"


def test_unassigned_fund_falls_back_to_default():
    rules = RulesStore.from_string('[fund]\ncustom = ""\n')
    text = render_transaction(_txn(fund="custom"), rules, "Assets:Test")
    assert text.splitlines()[-1] == "  Assets:Test"


def test_payee_alias_is_displayed():
    rules = RulesStore.from_string('[payee]\n"美团" = { alias = "Meituan", account = "Expenses:Food" }\n')
    text = render_transaction(_txn(payee="美团", flow=Flow(EXPENSE)), rules, "Assets:Test")
    assert text.splitlines()[0] == '2020-04-01 * "Meituan" "some notes"'
    assert text.splitlines()[1] == "  Expenses:Food 0 CNY"


def test_metadata_lines_follow_header():
    txn = _txn(
        flow=Flow.unknown("提现已到账"),
        metadata=(("unknown_flow", "提现已到账"), ("trade_id", "42")),
        amount=Decimal("100.00"),
    )
    text = render_transaction(txn, RulesStore.from_string(""), "Assets:Wechat")
    assert text == (
        '2020-04-01 ! "SomeShop" "some notes"\n'
        '  unknown_flow: "提现已到账"\n'
        '  trade_id: "42"\n'
        "  100.00 CNY\n"
        "  Assets:Wechat"
    )


def test_income_renders_negative_amount():
    txn = _txn(flow=Flow(INCOME), amount=Decimal("-88.80"))
    text = render_transaction(txn, RulesStore.from_string(""), "Assets:Test")
    assert "  -88.80 CNY" in text


def test_quotes_are_escaped():
    txn = _txn(narration='say "hi"')
    text = render_transaction(txn, RulesStore.from_string(""), "Assets:Test")
    assert text.splitlines()[0] == '2020-04-01 ! "SomeShop" "say \\"hi\\""'


def test_backslashes_are_escaped():
    txn = _txn(payee="C:\\shop", narration='end\\')
    text = render_transaction(txn, RulesStore.from_string(""), "Assets:Test")
    assert text.splitlines()[0] == '2020-04-01 ! "C:\\\\shop" "end\\\\"'


def test_backslash_before_quote_is_escaped():
    txn = _txn(narration='a\\"b')
    text = render_transaction(txn, RulesStore.from_string(""), "Assets:Test")
    assert text.splitlines()[0] == '2020-04-01 ! "SomeShop" "a\\\\\\"b"'


def test_render_keeps_insertion_order():
    bean = Bean("Assets:Test")
    bean.add(_txn(date="2020-04-03", payee="C"))
    bean.add(_txn(date="2020-04-01", payee="A"))
    bean.add(_txn(date="2020-04-02", payee="B"))

    text = bean.render(RulesStore.from_string(""))
    headers = [line for line in text.splitlines() if not line.startswith("  ")]
    assert headers == [
        '2020-04-03 ! "C" "some notes"',
        '2020-04-01 ! "A" "some notes"',
        '2020-04-02 ! "B" "some notes"',
    ]
    assert text.endswith("\n")
    assert len(bean) == 3


def test_empty_bean_renders_nothing():
    assert Bean("Assets:Test").render(RulesStore.from_string("")) == ""


def test_format_amount():
    assert format_amount(Decimal("0")) == "0"
    assert format_amount(Decimal("-0.00")) == "0.00"
    assert format_amount(Decimal("12.50")) == "12.50"
    assert format_amount(Decimal("-100")) == "-100"
