import pytest

WECHAT_COLUMNS = [
    "date", "trade_type", "payee", "commodity", "flow", "amount",
    "fund", "status", "trade_id", "store_id", "remark",
]
WECHAT_HEADER = "交易时间,交易类型,交易对方,商品,收/支,金额(元),支付方式,当前状态,交易单号,商户单号,备注"

ALIPAY_COLUMNS = [
    "trade_id", "store_id", "create_date", "pay_date", "modify_date",
    "trade_source", "trade_type", "payee", "commodity", "amount", "flow",
    "status", "fee", "refund", "remark", "fund_status", "",
]
ALIPAY_HEADER = (
    "交易号,商家订单号,交易创建时间,付款时间,最近修改时间,交易来源地,类型,"
    "交易对方,商品名称,金额（元）,收/支,交易状态,服务费（元）,成功退款（元）,备注,资金状态,"
)
ALIPAY_TRAILER = [
    "------------------------------------------------------------------------------------",
    "共2笔记录",
    "已收入:1笔,100.00元",
    "导出时间:[2020-04-23 15:00:00]    用户:someone@example.com",
]


def _row(columns: list[str], defaults: dict, values: dict) -> list[str]:
    merged = {**defaults, **values}
    return [merged.get(c, "") for c in columns]


@pytest.fixture
def wechat_row():
    """Build a WeChat Pay row from column names, with a paid expense as default."""
    defaults = {
        "date": "2020-03-30 18:46:56", "trade_type": "商户消费", "payee": "美团",
        "commodity": "外卖", "flow": "支出", "amount": "¥25.00", "fund": "零钱",
        "status": "支付成功",
    }

    def _build(**values) -> list[str]:
        return _row(WECHAT_COLUMNS, defaults, values)
    return _build


@pytest.fixture
def alipay_row():
    """Build an Alipay row from column names, with a successful expense as default."""
    defaults = {
        "trade_id": "2020040822001", "create_date": "2020-04-08 14:56:53",
        "pay_date": "2020-04-08 14:56:55", "modify_date": "2020-04-08 14:56:56",
        "trade_source": "其他", "trade_type": "即时到账交易", "payee": "便利店",
        "commodity": "饮料", "amount": "12.50", "flow": "支出",
        "status": "交易成功", "fee": "0.00", "refund": "0.00",
    }

    def _build(**values) -> list[str]:
        return _row(ALIPAY_COLUMNS, defaults, values)
    return _build


@pytest.fixture
def wechat_export(tmp_path):
    """Write rows as a WeChat Pay export with its 16 preamble lines."""
    def _write(rows: list[list[str]], name: str = "wechat.csv"):
        lines = ["微信支付账单明细"] + [f"说明行{i}" for i in range(1, 15)]
        lines.append("----------------------微信支付账单明细列表--------------------")
        lines.append(WECHAT_HEADER)
        lines += [",".join(r) for r in rows]
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def alipay_export(tmp_path):
    """Write rows as an Alipay export with its 4 preamble lines and summary trailer."""
    def _write(rows: list[list[str]], name: str = "alipay.csv"):
        lines = [
            "支付宝交易记录明细查询",
            "账号:[someone@example.com]",
            "起始日期:[2020-04-01 00:00:00]    终止日期:[2020-04-30 00:00:00]",
            "---------------------------------交易记录明细列表------------------------------------",
            ALIPAY_HEADER,
        ]
        lines += [",".join(r) for r in rows]
        lines += ALIPAY_TRAILER
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def rules_path(tmp_path):
    return tmp_path / "rules.toml"
