"""Layered TOML configuration.

A global file (``$XDG_CONFIG_HOME/ledgerbook/config.toml``) is read first and
a ``ledgerbook.toml`` placed next to the ledgers overrides individual keys::

    [formatting]
    currency_symbol = "$"
    currency_position = "Prefix"
    thousands_separator = ","
    decimal_separator = "."
"""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .formatting import NBSP, CurrencyPosition, FormatOptions
from .logging_setup import get_logger

APP_NAME = "ledgerbook"
DATA_CONFIG_NAME = "ledgerbook.toml"

log = get_logger("ledgerbook.config")


class ConfigError(ValueError):
    pass


@dataclass
class FormattingConfig:
    currency_symbol: Optional[str] = None
    currency_position: Optional[str] = None
    thousands_separator: str = NBSP
    decimal_separator: str = "."

    def format_options(self) -> FormatOptions:
        position = CurrencyPosition.NONE
        if self.currency_symbol is not None and self.currency_position == "Prefix":
            position = CurrencyPosition.PREFIX
        elif self.currency_symbol is not None and self.currency_position == "Suffix":
            position = CurrencyPosition.SUFFIX
        return FormatOptions(
            thousands_separator=self.thousands_separator,
            decimal_separator=self.decimal_separator,
            currency_symbol=self.currency_symbol or "",
            currency_position=position,
        )


@dataclass
class Config:
    formatting: FormattingConfig = field(default_factory=FormattingConfig)

    def format_options(self) -> FormatOptions:
        return self.formatting.format_options()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        section = data.get("formatting", {})
        if not isinstance(section, dict):
            raise ConfigError("[formatting] must be a table")

        fmt = FormattingConfig()
        for key in ("currency_symbol", "currency_position"):
            if key in section:
                if not isinstance(section[key], str):
                    raise ConfigError(f"formatting.{key} must be a string")
                setattr(fmt, key, section[key])
        if fmt.currency_position not in (None, "Prefix", "Suffix"):
            raise ConfigError(
                f"formatting.currency_position must be 'Prefix' or 'Suffix', "
                f"got {fmt.currency_position!r}"
            )
        for key in ("thousands_separator", "decimal_separator"):
            if key in section:
                value = section[key]
                if not isinstance(value, str) or len(value) != 1:
                    raise ConfigError(f"formatting.{key} must be a single character")
                setattr(fmt, key, value)
        return cls(formatting=fmt)


def global_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME / "config.toml"


def data_config_path(directory: Path) -> Path:
    return Path(directory) / DATA_CONFIG_NAME


def _merge(into: Dict[str, Any], data: Dict[str, Any]) -> None:
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(into.get(key), dict):
            _merge(into[key], value)
        else:
            into[key] = value


def load_config(paths: Iterable[Optional[Path]]) -> Config:
    """Merge the TOML files in ``paths`` (later wins) into a :class:`Config`.

    Missing files are skipped. Any other problem is logged and the defaults
    are returned.
    """
    merged: Dict[str, Any] = {}
    for path in paths:
        if path is None:
            continue
        path = Path(path)
        if not path.is_file():
            continue
        try:
            with path.open("rb") as fh:
                _merge(merged, tomllib.load(fh))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            log.warning("Failed to load config %s: %s", path, exc)
            return Config()
        log.debug("loaded config %s", path)

    try:
        return Config.from_dict(merged)
    except ConfigError as exc:
        log.warning("Failed to parse config: %s", exc)
        return Config()


def load_for_directory(directory: Path | None) -> Config:
    data = data_config_path(directory) if directory is not None else None
    return load_config([global_config_path(), data])
