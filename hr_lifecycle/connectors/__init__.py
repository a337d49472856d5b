"""
Connectors Package for the HR Lifecycle Engine.

This package provides integrations with the Google Workspace APIs the
workflows depend on: Directory (groups), Drive, Docs, Sheets and Gmail.
"""

from typing import Any, Dict, Optional

from .base_connector import BaseConnector, ConnectorResult, GoogleApiConnector, MockConnector
from .directory_connector import DirectoryConnector, DirectoryMockConnector
from .docs_connector import DocsConnector, DocsMockConnector
from .drive_connector import DriveConnector, DriveMockConnector
from .gmail_connector import GmailConnector, GmailMockConnector
from .sheets_connector import SheetsConnector, SheetsMockConnector

SYSTEMS = ("directory", "drive", "docs", "sheets", "gmail")

_CONNECTORS = {
    "directory": (DirectoryConnector, DirectoryMockConnector),
    "drive": (DriveConnector, DriveMockConnector),
    "docs": (DocsConnector, DocsMockConnector),
    "sheets": (SheetsConnector, SheetsMockConnector),
    "gmail": (GmailConnector, GmailMockConnector),
}


def get_connector_class(system: str, mock: bool = False):
    """Get the connector class for a system."""
    if system not in _CONNECTORS:
        raise ValueError(f"Unknown system: {system}")
    real, fake = _CONNECTORS[system]
    return fake if mock else real


def create_connectors(config: Optional[Dict[str, Any]] = None, mock: bool = True) -> Dict[str, BaseConnector]:
    """
    Instantiate one connector per system.

    Args:
        config: Shared connector configuration (credentials, retry)
        mock: Use in-memory connectors instead of the Google APIs

    Returns:
        Mapping of system name to connector
    """
    connectors = {system: get_connector_class(system, mock)(config) for system in SYSTEMS}
    if mock:
        # Template copies made in the Drive mock are readable through the Docs mock
        connectors["docs"].drive = connectors["drive"]
    return connectors


__all__ = [
    "BaseConnector",
    "ConnectorResult",
    "DirectoryConnector",
    "DirectoryMockConnector",
    "DocsConnector",
    "DocsMockConnector",
    "DriveConnector",
    "DriveMockConnector",
    "GmailConnector",
    "GmailMockConnector",
    "GoogleApiConnector",
    "MockConnector",
    "SYSTEMS",
    "SheetsConnector",
    "SheetsMockConnector",
    "create_connectors",
    "get_connector_class",
]
