"""qmldeps - QML import discovery for Qt application deployment."""

import logging

from .module_resolution import QmlImportScanner
from .module_resolution import QtMajorVersion
from .module_resolution import ScanResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["QmlImportScanner", "QtMajorVersion", "ScanResult"]
