from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from beanimport.errors import UnknownSourceError
from beanimport.importers import alipay, wechat
from beanimport.ledger import Bean
from beanimport.logging_setup import get_logger
from beanimport.models import ImporterInfo
from beanimport.parser import read_records
from beanimport.registry import registry
from beanimport.rules import RulesStore

log = get_logger("beanimport.importer")

registry.register(ImporterInfo(
    key="wechat", name="WeChat Pay",
    header_lines=16, fund_account="Assets:Wechat",
    parse_row=wechat.parse_row,
))
registry.register(ImporterInfo(
    key="alipay", name="Alipay",
    header_lines=4, fund_account="Assets:Alipay",
    parse_row=alipay.parse_row, is_valid=alipay.is_valid,
))


@dataclass
class ImportResult:
    ledger: str
    imported: int
    skipped: int


def build_bean(file_path: Path, info: ImporterInfo, fund_account: str | None = None, encoding: str | None = None) -> tuple[Bean, int]:
    """Parse and adapt a file into a Bean. Returns the Bean and the skipped row count."""
    rows = read_records(file_path, info.header_lines, encoding or info.encoding)
    bean = Bean(fund_account or info.fund_account)
    skipped = 0
    for row in rows:
        if info.is_valid and not info.is_valid(row):
            skipped += 1
            continue
        bean.add(info.parse_row(row))
    log.info("%s: %d transactions, %d skipped", file_path, len(bean), skipped)
    return bean, skipped


def import_file(
    file_path: Path,
    source: str,
    rules: RulesStore,
    confirm: Callable[[], bool],
    *,
    fund_account: str | None = None,
    force_edit: bool = False,
    encoding: str | None = None,
) -> ImportResult:
    """Convert a platform export into ledger text.

    Unassigned payees and funds are merged into ``rules``; the operator is
    asked through ``confirm`` before the editor opens.
    """
    info = registry.get_by_key(source)
    if info is None:
        raise UnknownSourceError(f"Unknown source {source}")

    bean, skipped = build_bean(file_path, info, fund_account, encoding)
    rules.merge_with_edit(bean.transactions, confirm, force_edit=force_edit)
    return ImportResult(ledger=bean.render(rules), imported=len(bean), skipped=skipped)
