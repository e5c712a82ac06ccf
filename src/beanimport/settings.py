import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "bean-import"
SETTINGS_PATH = CONFIG_DIR / "settings.json"

DEFAULTS = {
    "rules_path": "rules.toml",
    "editor": "",
    "fund_accounts": {},
}


def load_settings() -> dict:
    if SETTINGS_PATH.exists():
        with open(SETTINGS_PATH) as f:
            saved = json.loads(f.read())
        return {**DEFAULTS, **saved}
    return dict(DEFAULTS)


def save_settings(settings: dict) -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w") as f:
        f.write(json.dumps(settings, indent=2, ensure_ascii=False) + "\n")


def get_rules_path() -> Path:
    return Path(load_settings()["rules_path"]).expanduser()


def get_editor() -> str | None:
    """The configured editor command, falling back to $EDITOR."""
    return load_settings()["editor"] or os.environ.get("EDITOR") or None


def get_fund_account(source: str) -> str | None:
    return load_settings()["fund_accounts"].get(source) or None
