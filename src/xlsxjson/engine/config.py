"""Properties files: YAML mappings of read options."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, ValidationError

from xlsxjson.contracts.options import ReadOptions
from xlsxjson.io.fileops import read_text_safe


class ConfigError(ValueError):
    """Raised when a properties file cannot be loaded or is invalid."""

    code = "ERR_CONFIG_INVALID"

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class OptionsError(ConfigError):
    """Raised when read options fail validation."""

    code = "ERR_INVALID_ARGUMENT"


def load_properties(path: str | Path) -> dict[str, Any]:
    """Load a YAML properties file into a plain mapping."""
    try:
        data = yaml.safe_load(read_text_safe(path))
    except OSError as e:
        raise ConfigError(f"Cannot read properties file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse properties file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Properties file must contain a YAML mapping.")
    return data


def _alias_names() -> dict[str, str]:
    """Map every accepted spelling of a ``ReadOptions`` field to the field name."""
    names: dict[str, str] = {}
    for name, field in ReadOptions.model_fields.items():
        alias = field.validation_alias
        if isinstance(alias, AliasChoices):
            for choice in alias.choices:
                if isinstance(choice, str):
                    names[choice] = name
    return names


def build_options(
    properties: dict[str, Any] | None = None,
    **overrides: Any,
) -> ReadOptions:
    """Merge properties with explicit overrides (``None`` overrides are ignored).

    Property keys may use any alias of a field; they are renamed to the
    field name first so an override replaces them instead of sitting next
    to them.
    """
    aliases = _alias_names()
    data = {aliases.get(key, key): value for key, value in (properties or {}).items()}
    for key, value in overrides.items():
        if value is not None:
            data[key] = value
    try:
        return ReadOptions(**data)
    except ValidationError as e:
        issues = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        summary = "; ".join(f"{i['field']}: {i['message']}" for i in issues)
        raise OptionsError(f"Invalid read options: {summary}", details=issues) from e


def load_options(path: str | Path, **overrides: Any) -> ReadOptions:
    """Load read options from a YAML properties file, applying overrides."""
    return build_options(load_properties(path), **overrides)
