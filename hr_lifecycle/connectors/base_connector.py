"""
Base Connector Classes for the HR Lifecycle Engine.

This module provides the foundation for all Google Workspace connectors
(Directory, Drive, Docs, Sheets, Gmail) with both real API implementations
and mock/in-memory backends.
"""

import logging
from abc import ABC
from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

from ..engine.retry import execute_with_retry

logger = logging.getLogger(__name__)


class ConnectorResult:
    """Result of a connector operation."""

    def __init__(self, success: bool, message: str = "", data: Optional[Any] = None,
                 error: Optional[str] = None):
        self.success = success
        self.message = message
        self.data = data
        self.error = error

    def __bool__(self):
        return self.success

    def __str__(self):
        return f"{'✓' if self.success else '✗'} {self.message}"


class BaseConnector(ABC):
    """
    Abstract base class for all platform connectors.

    Each subclass covers one Google Workspace API.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, mock_mode: bool = False):
        """
        Initialize the connector.

        Args:
            config: Configuration dictionary with credentials and retry settings
            mock_mode: If True, the connector keeps state in memory instead of calling APIs
        """
        self.config = config or {}
        self.mock_mode = mock_mode
        self.system_name = (
            self.__class__.__name__.replace('Mock', '').replace('Connector', '').lower()
        )

        logger.info(f"Initialized {self.__class__.__name__} (mock_mode={mock_mode})")

    def validate_config(self) -> bool:
        """
        Validate that the connector has all required configuration.

        Returns:
            True if configuration is valid, False otherwise
        """
        return True

    def get_system_name(self) -> str:
        """Get the name of the system this connector manages."""
        return self.system_name

    def is_mock_mode(self) -> bool:
        """Check if this connector is running in mock mode."""
        return self.mock_mode

    def _failure(self, message: str, error: Any) -> ConnectorResult:
        """Log and wrap a failed operation."""
        error_msg = f"{message}: {error}"
        logger.error(error_msg)
        return ConnectorResult(False, error_msg, error=str(error))


class GoogleApiConnector(BaseConnector):
    """
    Connector backed by a ``googleapiclient`` service.

    Subclasses set ``API_NAME``, ``API_VERSION`` and ``SCOPES``. A prebuilt
    ``service`` may be injected, otherwise one is built from the service
    account file in the config.
    """

    API_NAME = ""
    API_VERSION = ""
    SCOPES: List[str] = []

    def __init__(self, config: Optional[Dict[str, Any]] = None, service: Optional[Any] = None):
        super().__init__(config, mock_mode=False)

        retry = self.config.get('retry', {})
        self.max_retries = retry.get('max_retries', 3)
        self.initial_delay = retry.get('initial_delay', 1.0)

        self.service = service if service is not None else self._build_service()

    def validate_config(self) -> bool:
        return bool(self.config.get('service_account_file'))

    def _build_service(self) -> Any:
        credentials_path = self.config.get('service_account_file')
        if not credentials_path:
            raise ValueError("Google service account credentials path is required")

        credentials = service_account.Credentials.from_service_account_file(
            credentials_path,
            scopes=self.SCOPES
        )

        # Impersonate a Workspace user (domain-wide delegation)
        delegated_user = self.config.get('delegated_user')
        if delegated_user:
            credentials = credentials.with_subject(delegated_user)

        return build(self.API_NAME, self.API_VERSION, credentials=credentials,
                     cache_discovery=False)

    def _execute(self, request: Any, operation_name: str) -> Any:
        """Execute an API request with retries on transient errors."""
        return execute_with_retry(
            request.execute,
            operation_name,
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
        )


class MockConnector(BaseConnector):
    """
    Base class for mock/simulated connectors.

    Provides in-memory state for testing and development without
    requiring real API access.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config, mock_mode=True)
        self.calls: List[Dict[str, Any]] = []

    def _record(self, operation: str, **params) -> None:
        self.calls.append({"operation": operation, **params})

    def get_mock_state(self) -> Dict[str, Any]:
        """Get current mock state for inspection."""
        return {"calls": list(self.calls)}
