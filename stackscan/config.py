"""Configuration loading for stackscan (.stackscan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".stackscan.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ScanConfig:
    """Settings for multi-repository scans."""

    concurrency: int = 1
    cleanup: bool = False
    output: str = "report.json"
    workspace: Optional[Path] = None


@dataclass
class RulesConfig:
    """Catalog adjustments applied on top of the built-in rules."""

    disabled: List[str] = field(default_factory=list)
    extra: List[Path] = field(default_factory=list)


@dataclass
class StackScanConfig:
    """Represents the settings defined in .stackscan.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)


def load_config(config_path: Path) -> StackScanConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return StackScanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        concurrency = _as_int(scan_data.get("concurrency"))
        if concurrency is not None:
            scan.concurrency = max(1, concurrency)
        cleanup = _as_bool(scan_data.get("cleanup"))
        if cleanup is not None:
            scan.cleanup = cleanup
        output = _as_str(scan_data.get("output"))
        if output:
            scan.output = output
        workspace = _as_str(scan_data.get("workspace"))
        if workspace:
            scan.workspace = _resolve_relative(root, workspace)

    rules = RulesConfig()
    rules_data = _as_dict(data.get("rules"))
    if rules_data:
        rules.disabled = _as_str_list(rules_data.get("disabled"))
        rules.extra = [
            _resolve_relative(root, item) for item in _as_str_list(rules_data.get("extra"))
        ]

    return StackScanConfig(root=root, scan=scan, rules=rules)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_relative(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
