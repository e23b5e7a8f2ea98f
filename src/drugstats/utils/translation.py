from __future__ import annotations

from importlib.resources import files
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, Template


def _packaged_table(language: str) -> dict[str, str]:
    resource = files("drugstats.data.translations").joinpath(f"{language}.yaml")
    if not resource.is_file():
        raise FileNotFoundError(f"No packaged translations for language '{language}'.")
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}


def _table_from_dir(directory: Path, language: str) -> dict[str, str]:
    path = directory.expanduser().resolve() / f"{language}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Translation file not found at {path}.")
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


class Translator:
    """Key based text lookup. Values are Jinja2 templates rendered with keyword args.

    Unknown keys render as the key itself, so lookups never fail.
    """

    def __init__(self, table: dict[str, str] | None = None):
        self.table = {str(key): str(value) for key, value in (table or {}).items()}
        self.missing: set[str] = set()
        self._env = Environment(autoescape=False, keep_trailing_newline=False)
        self._templates: dict[str, Template] = {}

    @classmethod
    def load(cls, language: str = "english", translations_path: str | Path | None = None) -> "Translator":
        table = _packaged_table(language)
        if translations_path:
            table.update(_table_from_dir(Path(translations_path), language))
        return cls(table)

    def __call__(self, key: str, **kwargs: Any) -> str:
        text = self.table.get(key)
        if text is None:
            self.missing.add(key)
            return key
        if "{" not in text:
            return text
        template = self._templates.get(key)
        if template is None:
            template = self._env.from_string(text)
            self._templates[key] = template
        return template.render(**kwargs)

    def has(self, key: str) -> bool:
        return key in self.table
