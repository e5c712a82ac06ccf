from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from beanimport.errors import AbortedError, BeanImportError
from beanimport.importer import import_file
from beanimport.logging_setup import configure_logging
from beanimport.plugins import load_plugins
from beanimport.registry import registry
from beanimport.rules import FUND, PAYEE, RulesStore
from beanimport.settings import (
    get_editor, get_fund_account, get_rules_path, load_settings, save_settings,
)

app = typer.Typer(help="Convert WeChat Pay and Alipay exports into Beancount entries.", invoke_without_command=True)

rules_app = typer.Typer(help="Inspect and edit the payee/fund rules.")
app.add_typer(rules_app, name="rules")

_plugin_hooks = load_plugins(app)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", "-d", help="Log debug output to stderr")):
    """Convert WeChat Pay and Alipay exports into Beancount entries."""
    configure_logging("DEBUG" if debug else None)


def _load_rules(rules_path: Path | None) -> RulesStore:
    return RulesStore.load(rules_path or get_rules_path(), editor=get_editor())


def _fail(exc: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(1)


def confirm_edit() -> bool:
    """Ask whether to save new rules and open the editor; only y/yes confirms."""
    try:
        answer = Prompt.ask(
            "New payees or funds need accounts. Save and edit rules? (yes/no)",
            console=err_console, default="", show_default=False,
        )
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


@app.command()
def init(
    rules: str = typer.Option(None, "--rules", help="Path for the rules document (default: rules.toml)"),
    editor: str = typer.Option(None, "--editor", help="Editor command used for rules (default: $EDITOR)"),
):
    """Write settings and create an empty rules document."""
    settings = load_settings()
    if rules:
        settings["rules_path"] = str(Path(rules).expanduser().resolve())
    if editor:
        settings["editor"] = editor
    save_settings(settings)

    rules_path = get_rules_path()
    try:
        RulesStore.load(rules_path)
    except (BeanImportError, OSError) as exc:
        _fail(exc)
    typer.echo(f"Rules document: {rules_path}")


# --- Import ---


@app.command("import")
def import_cmd(
    file: Path = typer.Argument(help="Exported CSV file"),
    output: Path = typer.Argument(None, help="Output file, stdout if not present"),
    source: str = typer.Option("wechat", "--source", "-s", help="Source: " + ", ".join(registry.keys())),
    edit: bool = typer.Option(False, "--edit", help="Open the rules in the editor before rendering"),
    rules: Path = typer.Option(None, "--rules", help="Rules document (default from settings)"),
    fund_account: str = typer.Option(None, "--fund-account", help="Default fund account for this import"),
    encoding: str = typer.Option(None, "--encoding", help="Input file encoding"),
):
    """Import a payment platform export and print Beancount entries."""
    try:
        store = _load_rules(rules)
        result = import_file(
            file, source, store, confirm_edit,
            fund_account=fund_account or get_fund_account(source),
            force_edit=edit, encoding=encoding,
        )
    except AbortedError:
        err_console.print("[yellow]Import aborted, nothing written.[/yellow]")
        raise typer.Exit(0)
    except (BeanImportError, OSError) as exc:
        _fail(exc)

    if output is None:
        typer.echo(result.ledger, nl=False)
        return
    try:
        with open(output, "w", encoding="utf-8") as f:
            f.write(result.ledger)
    except OSError as exc:
        _fail(exc)
    typer.echo(f"{result.imported} imported, {result.skipped} skipped → {output}")


@app.command()
def sources():
    """List the supported export sources."""
    table = Table(title="Sources")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Header Lines", justify="right")
    table.add_column("Fund Account")
    for info in registry.list_all():
        table.add_row(info.key, info.name, str(info.header_lines), get_fund_account(info.key) or info.fund_account)
    console.print(table)


# --- Rules ---


@rules_app.command("list")
def rules_list(
    rules: Path = typer.Option(None, "--rules", help="Rules document (default from settings)"),
    unassigned: bool = typer.Option(False, "--unassigned", help="Only show keys without an account"),
):
    """List payee and fund rules."""
    try:
        store = _load_rules(rules)
    except (BeanImportError, OSError) as exc:
        _fail(exc)

    table = Table(title="Rules")
    table.add_column("Section", style="dim")
    table.add_column("Key")
    table.add_column("Alias")
    table.add_column("Account")
    for section in (PAYEE, FUND):
        for entry in store.entries(section):
            if unassigned and entry.account:
                continue
            account = entry.account or "[red]unassigned[/red]"
            table.add_row(section, entry.key, entry.alias or "", account)
    console.print(table)


@rules_app.command("edit")
def rules_edit(
    rules: Path = typer.Option(None, "--rules", help="Rules document (default from settings)"),
):
    """Open the rules document in the editor."""
    try:
        store = _load_rules(rules)
        store.edit()
    except (BeanImportError, OSError) as exc:
        _fail(exc)
    typer.echo(f"{len(store.unassigned(PAYEE))} payees, {len(store.unassigned(FUND))} funds still unassigned")


if __name__ == "__main__":
    app()
