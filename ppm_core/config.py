"""Workspace configuration for source resolution and mutation."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path("config") / "config.toml"


@dataclass(frozen=True)
class SourcesConfig:
    suppress_errors_and_warnings: bool = False
    match_all_filters: bool = False
    rollback_on_rename_failure: bool = False
    providers: tuple[str, ...] = ()


def _to_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def _load_sources_section(workspace_root: Path) -> dict[str, Any]:
    config_path = workspace_root / CONFIG_RELATIVE_PATH
    if not config_path.exists():
        return {}
    try:
        payload = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        logger.warning("ignoring unreadable config file %s", config_path)
        return {}
    section = payload.get("sources")
    return section if isinstance(section, dict) else {}


def load_sources_config(workspace_root: Path) -> SourcesConfig:
    section = _load_sources_section(workspace_root.resolve())
    defaults = SourcesConfig()
    raw_providers = section.get("providers") or []
    if isinstance(raw_providers, str):
        raw_providers = [raw_providers]
    return SourcesConfig(
        suppress_errors_and_warnings=_to_bool(
            section.get("suppress_errors_and_warnings"), defaults.suppress_errors_and_warnings
        ),
        match_all_filters=_to_bool(section.get("match_all_filters"), defaults.match_all_filters),
        rollback_on_rename_failure=_to_bool(
            section.get("rollback_on_rename_failure"), defaults.rollback_on_rename_failure
        ),
        providers=tuple(str(item).strip() for item in raw_providers if str(item).strip()),
    )
