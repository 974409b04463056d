"""
template_catalog.py
-------------------
Catalog of named frame templates (type and default size).

Responsibilities
----------------
- Load template definitions from a YAML/JSON config file.
- Resolve ``inherits`` chains so the most derived template wins per field.
- Answer get_template_info() for create_frame and script lookups.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from addon_host.core.debug.debug_logger import DebugLogger
from addon_host.core.services.config_manager import load_config
from addon_host.ui.core.frame import WidgetType


@dataclass(frozen=True)
class TemplateInfo:
    """Resolved template: widget type name and default size (0 = unset)."""
    frame_type: str = WidgetType.FRAME.value
    width: float = 0.0
    height: float = 0.0


class TemplateCatalog:
    """Named template definitions, resolved lazily through inheritance."""

    def __init__(self):
        self._templates: Dict[str, Dict[str, Any]] = {}
        self._cache: Dict[str, Optional[TemplateInfo]] = {}

    # ===========================================================
    # Loading
    # ===========================================================

    def load(self, filename: str) -> int:
        """
        Load templates from a config file with a top-level ``templates`` map.

        Returns:
            Number of templates registered
        """
        data = load_config(filename, {"templates": {}})
        templates = data.get("templates") or {}
        if not isinstance(templates, dict):
            DebugLogger.warn(f"'templates' in {filename} is not a mapping", category="loading")
            return 0

        count = 0
        for name, entry in templates.items():
            if self.register(name, entry or {}):
                count += 1
        DebugLogger.system(f"Loaded {count} template(s) from {filename}", category="loading")
        return count

    def register(self, name: str, data: Dict[str, Any]) -> bool:
        """Add or replace one template definition."""
        if not isinstance(name, str) or not name.strip():
            DebugLogger.warn(f"Ignored template with invalid name {name!r}", category="loading")
            return False
        if not isinstance(data, dict):
            DebugLogger.warn(f"Template '{name}' must be a mapping", category="loading")
            return False
        self._templates[name] = data
        self._cache.clear()
        return True

    def has_template(self, name: str) -> bool:
        return name in self._templates

    @property
    def names(self) -> List[str]:
        return sorted(self._templates)

    # ===========================================================
    # Lookup
    # ===========================================================

    def get_template_info(self, name: str) -> Optional[TemplateInfo]:
        """
        Resolve a template by name.

        Fields come from the template itself first, then each inherited
        template in order; each template is visited once even when a chain
        loops. Unknown names yield None.
        """
        if name in self._cache:
            return self._cache[name]

        chain = self._resolve_chain(name)
        info = None
        if chain:
            frame_type = WidgetType.FRAME.value
            width = height = 0.0
            # Base first so derived templates overwrite
            for data in reversed(chain):
                kind = WidgetType.from_name(data.get("type"))
                if kind is not None:
                    frame_type = kind.value
                if data.get("width"):
                    width = float(data["width"])
                if data.get("height"):
                    height = float(data["height"])
            info = TemplateInfo(frame_type, width, height)

        self._cache[name] = info
        return info

    def _resolve_chain(self, name: str) -> List[Dict[str, Any]]:
        """Template data from most derived to most basic."""
        chain = []
        seen = set()
        pending = [name]
        while pending:
            current = pending.pop(0)
            if current in seen:
                continue
            data = self._templates.get(current)
            if data is None:
                if current == name:
                    return []
                DebugLogger.trace(f"Missing base template '{current}'", category="loading")
                continue
            seen.add(current)
            chain.append(data)
            pending = _inherits(data.get("inherits")) + pending
        return chain


def _inherits(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]

