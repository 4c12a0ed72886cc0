from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape

from ..models import PreviewMode
from .paths import SnippetLensPaths

DEFAULT_CONFIG: Dict[str, Any] = {
    "base_path": "",
    "max_lines": 20,
    "max_chars": 200,
    "preview_mode": PreviewMode.INLINE.value,
    "enabled": True,
    "debug": None,
}


@dataclass(frozen=True)
class SnippetLensSettings:
    base_path: str = DEFAULT_CONFIG["base_path"]
    max_lines: int = DEFAULT_CONFIG["max_lines"]
    max_chars: int = DEFAULT_CONFIG["max_chars"]
    preview_mode: str = DEFAULT_CONFIG["preview_mode"]
    enabled: bool = DEFAULT_CONFIG["enabled"]
    debug: Any = DEFAULT_CONFIG["debug"]

    def with_overrides(self, **overrides: Any) -> "SnippetLensSettings":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if k in known and v is not None}
        if not changes:
            return self
        return replace(self, **changes)


class ConfigManager:
    """Loads Snippet Lens settings from the global and workspace config files."""

    def __init__(self, paths: SnippetLensPaths, console: Optional[Console] = None) -> None:
        self.paths = paths
        self.console = console or Console()

    def load_settings(self) -> SnippetLensSettings:
        return SnippetLensSettings(**self.load_project_config())

    def load_project_config(self) -> Dict[str, Any]:
        """Merge defaults, the global config and the workspace config."""
        merged = self._merge_dicts(DEFAULT_CONFIG, self._read_json(self.paths.global_config_file))
        merged = self._merge_dicts(merged, self._read_json(self.paths.config_file))
        return self._normalize_config(merged)

    def create_config_template(self) -> bool:
        """Create or update the workspace config without overwriting user settings.

        Returns True when the file did not exist before.
        """
        created = not self.paths.config_file.exists()
        self.paths.lens_dir.mkdir(parents=True, exist_ok=True)
        current = self._read_json(self.paths.config_file)
        merged = self._merge_dicts(DEFAULT_CONFIG, current)
        self.paths.config_file.write_text(
            json.dumps(merged, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        return created

    def _normalize_config(self, data: Dict[str, Any]) -> Dict[str, Any]:
        normalized: Dict[str, Any] = {}
        raw_base_path = data.get("base_path")
        normalized["base_path"] = raw_base_path.strip() if isinstance(raw_base_path, str) else ""
        normalized["max_lines"] = self._to_int(data.get("max_lines"), DEFAULT_CONFIG["max_lines"])
        normalized["max_chars"] = self._to_int(data.get("max_chars"), DEFAULT_CONFIG["max_chars"])

        raw_mode = data.get("preview_mode")
        mode = raw_mode.strip().lower() if isinstance(raw_mode, str) else ""
        if mode not in {m.value for m in PreviewMode}:
            mode = DEFAULT_CONFIG["preview_mode"]
        normalized["preview_mode"] = mode

        raw_enabled = data.get("enabled")
        if raw_enabled is None:
            normalized["enabled"] = DEFAULT_CONFIG["enabled"]
        elif isinstance(raw_enabled, str):
            normalized["enabled"] = raw_enabled.strip().lower() in {"1", "true", "yes", "y", "on"}
        else:
            normalized["enabled"] = bool(raw_enabled)
        normalized["debug"] = data.get("debug")
        return normalized

    def _merge_dicts(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        if not override:
            return dict(base)
        merged: Dict[str, Any] = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge_dicts(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _read_json(self, path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            self.console.print(f"[red]Failed to parse JSON config at {escape(str(path))}. Using defaults.[/red]")
            return {}
        if not isinstance(data, dict):
            self.console.print(f"[yellow]Ignoring {escape(str(path))}: expected an object.[/yellow]")
            return {}
        return data

    def _to_int(self, value: Any, default: int) -> int:
        if isinstance(value, bool) or value is None:
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return default
        return default
