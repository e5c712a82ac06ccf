import importlib.metadata

import typer

from beanimport.models import ImporterInfo
from beanimport.registry import registry


class PluginHooks:
    def __init__(self):
        self.importers: list[ImporterInfo] = []
        self.commands: list[tuple[typer.Typer, callable]] = []

    def add_importer(self, info: ImporterInfo) -> None:
        self.importers.append(info)

    def add_command(self, parent: typer.Typer, command: callable) -> None:
        self.commands.append((parent, command))


def load_plugins(app: typer.Typer) -> PluginHooks:
    """Discover installed source plugins and collect their hooks."""
    hooks = PluginHooks()

    eps = importlib.metadata.entry_points(group="beanimport.plugins")
    for ep in eps:
        plugin_module = ep.load()
        if hasattr(plugin_module, "register"):
            plugin_module.register(hooks, app=app)

    apply_hooks(hooks)
    return hooks


def apply_hooks(hooks: PluginHooks) -> None:
    for info in hooks.importers:
        registry.register(info)

    for parent, command in hooks.commands:
        parent.command()(command)
