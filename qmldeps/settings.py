"""Settings for qmldeps scans.

Two YAML scopes are merged, later overriding earlier:
- User global (~/.qmldeps/settings.yaml)
- Project (.qmldeps/settings.yaml)

Environment variables override both, and CLI options override everything.

Settings format:
```yaml
scan:
  qml_root: /opt/Qt/5.15.2/gcc_64/qml
  qt_version: 5
  recursive: true
  max_depth: 256
  exclude_debug: true
  debug_patterns: ["*.pdb", "*.debug"]
```
"""

import logging
import os
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from .deploy import DEFAULT_DEBUG_PATTERNS
from .module_resolution import QtMajorVersion
from .module_resolution.walker import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

SCAN_SECTION = "scan"

ENV_QML_ROOT = "QMLDEPS_QML_ROOT"
ENV_QT_VERSION = "QMLDEPS_QT_VERSION"
# Set by Qt's own environment scripts
ENV_QT_INSTALL_QML = "QT_INSTALL_QML"


class SettingsError(Exception):
    """Raised when settings are invalid or incomplete."""


class ScanSettings(BaseModel):
    """Effective configuration for one scan."""

    model_config = ConfigDict(frozen=True)

    qml_root: Path | None = Field(None, description="Qt qml/ directory with the system modules")
    qt_version: Literal[5, 6] = Field(5, description="Qt major version of the runtime")
    recursive: bool = Field(True, description="Walk project subdirectories")
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, description="Deepest directory nesting to enter")
    exclude_debug: bool = Field(True, description="Leave debug artifacts out of deploy files")
    debug_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_DEBUG_PATTERNS))

    @property
    def qt_major_version(self) -> QtMajorVersion:
        return QtMajorVersion.from_number(self.qt_version)

    def require_qml_root(self) -> Path:
        """Return the QML root or fail with a hint on how to set it.

        Raises:
            SettingsError: No QML root configured anywhere
        """
        if self.qml_root is None:
            raise SettingsError(
                "QML root is not configured.\n\n"
                "Set one of:\n"
                "  - --qml-root option\n"
                f"  - {ENV_QML_ROOT} or {ENV_QT_INSTALL_QML} environment variable\n"
                f"  - {SCAN_SECTION}.qml_root in .qmldeps/settings.yaml"
            )
        return self.qml_root


class SettingsManager:
    """Reads and merges qmldeps settings files."""

    def __init__(self, qmldeps_dir: Path | None = None, user_dir: Path | None = None):
        """
        Args:
            qmldeps_dir: Directory holding project settings (for testing).
                         If None, uses .qmldeps in current directory.
            user_dir: Directory holding user settings (for testing).
                      If None, uses ~/.qmldeps.
        """
        if qmldeps_dir is None:
            qmldeps_dir = Path(".qmldeps")
        if user_dir is None:
            user_dir = Path.home() / ".qmldeps"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = qmldeps_dir / "settings.yaml"

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from both scopes (project overrides user)."""
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file):
            data = self._read_settings(path)
            if data:
                merged = self._deep_merge(merged, data)
        return merged

    def get_scan_settings(self, **overrides: Any) -> ScanSettings:
        """Build effective scan settings.

        Args:
            **overrides: Values from the command line; None means "not given"

        Returns:
            Validated ScanSettings

        Raises:
            SettingsError: A value fails validation
        """
        values: dict[str, Any] = dict(self.get_merged_settings().get(SCAN_SECTION) or {})

        if values.get("qml_root") is None and (fallback := os.getenv(ENV_QT_INSTALL_QML)):
            values["qml_root"] = fallback
        if env_root := os.getenv(ENV_QML_ROOT):
            values["qml_root"] = env_root
        if env_version := os.getenv(ENV_QT_VERSION):
            try:
                values["qt_version"] = int(env_version)
            except ValueError as e:
                raise SettingsError(f"{ENV_QT_VERSION} must be 5 or 6, got {env_version!r}") from e

        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            settings = ScanSettings.model_validate(values)
        except ValidationError as e:
            raise SettingsError(f"Invalid scan settings:\n{e}") from e

        if settings.qml_root is not None:
            settings = settings.model_copy(update={"qml_root": settings.qml_root.expanduser()})
        return settings

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from a YAML file.

        Returns:
            Settings dict, or None if the file is missing or unreadable
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: top level must be a mapping")
            return None
        return data

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
