import os
import shlex
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import tomlkit
from tomlkit.exceptions import TOMLKitError

from beanimport.errors import AbortedError, BeanImportError, DecodeError, EditorError, RulesParseError
from beanimport.logging_setup import get_logger
from beanimport.models import Transaction

log = get_logger("beanimport.rules")

PAYEE = "payee"
FUND = "fund"
SECTIONS = (PAYEE, FUND)


@dataclass
class RuleEntry:
    key: str
    account: str
    alias: str | None = None


def _parse(text: str, source: str) -> tomlkit.TOMLDocument:
    try:
        document = tomlkit.parse(text)
    except TOMLKitError as exc:
        raise RulesParseError(f"Invalid rules document {source}: {exc}") from exc
    for section in SECTIONS:
        if section in document and not isinstance(document[section], Mapping):
            raise RulesParseError(f"Invalid rules document {source}: [{section}] must be a table")
    return document


def open_editor(path: Path, command: str | None = None) -> None:
    """Run the operator's editor on ``path`` and wait for it to exit."""
    command = command or os.environ.get("EDITOR")
    if not command:
        raise EditorError("Unable to read $EDITOR")
    log.info("Opening %s with %s", path, command)
    try:
        result = subprocess.run([*shlex.split(command), str(path)])
    except OSError as exc:
        raise EditorError(f"Failed to start editor {command!r}: {exc}") from exc
    if result.returncode != 0:
        raise EditorError(f"Editor {command!r} exited with status {result.returncode}")


class RulesStore:
    """Payee and fund to account mapping backed by a TOML document.

    Keys discovered by ``merge`` are held in memory until ``save`` adds them
    to the file; existing entries and formatting on disk are never rewritten.
    """

    def __init__(self, document: tomlkit.TOMLDocument, path: Path | None = None, editor: str | None = None):
        self.document = document
        self.path = path
        self.editor = editor
        self._pending: dict[str, list[str]] = {section: [] for section in SECTIONS}

    @classmethod
    def load(cls, path: Path, editor: str | None = None) -> "RulesStore":
        path = Path(path)
        return cls(cls._read(path), path=path, editor=editor)

    @classmethod
    def from_string(cls, text: str) -> "RulesStore":
        return cls(_parse(text, "<string>"))

    @staticmethod
    def _read(path: Path) -> tomlkit.TOMLDocument:
        path.touch(exist_ok=True)
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Can't decode rules document {path} as utf-8: {exc}") from exc
        return _parse(text, str(path))

    @property
    def is_dirty(self) -> bool:
        return any(self._pending.values())

    def _table(self, section: str, create: bool = False):
        table = self.document.get(section)
        if table is None and create:
            table = tomlkit.table()
            self.document[section] = table
            table = self.document[section]
        return table

    def _add_key(self, section: str, key: str) -> bool:
        if not key:
            return False
        table = self._table(section, create=True)
        if key in table:
            return False
        table[key] = ""
        self._pending[section].append(key)
        return True

    def merge(self, transactions: Iterable[Transaction]) -> int:
        """Add placeholder entries for unseen payees and funds; returns how many."""
        added = 0
        for transaction in transactions:
            added += self._add_key(PAYEE, transaction.payee)
            added += self._add_key(FUND, transaction.fund)
        if added:
            log.info("Discovered %d new rule keys", added)
        return added

    def merge_with_edit(
        self,
        transactions: Iterable[Transaction],
        confirm: Callable[[], bool],
        force_edit: bool = False,
    ) -> None:
        """Merge, then make the operator assign accounts before rendering.

        New keys are saved and the editor opened only when ``confirm`` returns
        True; otherwise AbortedError is raised. ``force_edit`` skips the
        question and always opens the editor.
        """
        self.merge(transactions)
        if not self.is_dirty and not force_edit:
            return
        if not force_edit and not confirm():
            raise AbortedError("New rules must be assigned before importing")
        if self.is_dirty:
            self.save()
        self.edit()

    def save(self) -> None:
        if self.path is None:
            raise BeanImportError("Rules document has no path to save to")
        on_disk = self._read(self.path)
        for section, keys in self._pending.items():
            if not keys:
                continue
            table = on_disk.get(section)
            if table is None:
                on_disk[section] = tomlkit.table()
                table = on_disk[section]
            for key in keys:
                if key not in table:
                    table[key] = ""
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(tomlkit.dumps(on_disk))
        self.document = on_disk
        self._pending = {section: [] for section in SECTIONS}

    def edit(self) -> None:
        if self.path is None:
            raise BeanImportError("Rules document has no path to edit")
        open_editor(self.path, self.editor)
        self.reload()

    def reload(self) -> None:
        self.document = self._read(self.path)
        self._pending = {section: [] for section in SECTIONS}

    def _entry(self, section: str, key: str):
        table = self._table(section)
        if table is None:
            return None
        return table.get(key)

    def resolve_payee_account(self, payee: str) -> str:
        value = self._entry(PAYEE, payee)
        if isinstance(value, Mapping):
            value = value.get("account")
        return str(value) if isinstance(value, str) else ""

    def resolve_payee_alias(self, payee: str) -> str | None:
        value = self._entry(PAYEE, payee)
        if isinstance(value, Mapping):
            alias = value.get("alias")
            if isinstance(alias, str) and alias:
                return str(alias)
        return None

    def resolve_fund_account(self, fund: str) -> str | None:
        value = self._entry(FUND, fund)
        if isinstance(value, str) and value:
            return str(value)
        return None

    def entries(self, section: str) -> list[RuleEntry]:
        table = self._table(section)
        if table is None:
            return []
        result = []
        for key in table:
            if section == PAYEE:
                result.append(RuleEntry(str(key), self.resolve_payee_account(key), self.resolve_payee_alias(key)))
            else:
                result.append(RuleEntry(str(key), self.resolve_fund_account(key) or ""))
        return result

    def unassigned(self, section: str) -> list[str]:
        return [entry.key for entry in self.entries(section) if not entry.account]
