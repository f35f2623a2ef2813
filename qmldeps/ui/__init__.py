"""Terminal rendering helpers."""

from .error_display import display_scan_error
from .error_display import display_settings_error

__all__ = ["display_scan_error", "display_settings_error"]
