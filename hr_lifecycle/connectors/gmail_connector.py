"""
Gmail Connector for the HR Lifecycle Engine.

Creates drafts and sends HTML email through the Gmail v1 API.
"""

import base64
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from googleapiclient.errors import HttpError

from .base_connector import ConnectorResult, GoogleApiConnector, MockConnector

logger = logging.getLogger(__name__)


def build_raw_message(to: str, subject: str, html_body: str, text_body: str = "") -> str:
    """
    Build a base64url encoded multipart/alternative message.

    Args:
        to: Recipient address
        subject: Subject line
        html_body: HTML part
        text_body: Plain text part

    Returns:
        Value for the Gmail API ``raw`` field
    """
    message = MIMEMultipart("alternative")
    message["To"] = to
    message["Subject"] = subject
    message.attach(MIMEText(text_body, "plain", "utf-8"))
    message.attach(MIMEText(html_body, "html", "utf-8"))
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


class GmailConnector(GoogleApiConnector):
    """Draft creation and sending for the delegated mailbox."""

    API_NAME = 'gmail'
    API_VERSION = 'v1'
    SCOPES = ['https://www.googleapis.com/auth/gmail.compose']

    def create_draft(self, to: str, subject: str, html_body: str, text_body: str = "") -> ConnectorResult:
        """Create a draft in the delegated user's mailbox."""
        try:
            draft = self._execute(
                self.service.users().drafts().create(
                    userId='me',
                    body={'message': {'raw': build_raw_message(to, subject, html_body, text_body)}}
                ),
                f"Create draft for {to}"
            )
            logger.info(f"Created draft email \"{subject}\" for {to}")
            return ConnectorResult(True, f"Created draft for {to}", {"draft_id": draft.get('id')})

        except HttpError as e:
            return self._failure(f"Failed to create draft \"{subject}\" for {to}", e)

    def send_message(self, to: str, subject: str, html_body: str, text_body: str = "") -> ConnectorResult:
        """Send a message immediately."""
        try:
            sent = self._execute(
                self.service.users().messages().send(
                    userId='me',
                    body={'raw': build_raw_message(to, subject, html_body, text_body)}
                ),
                f"Send email to {to}"
            )
            logger.info(f"Sent email \"{subject}\" to {to}")
            return ConnectorResult(True, f"Sent email to {to}", {"message_id": sent.get('id')})

        except HttpError as e:
            return self._failure(f"Failed to send \"{subject}\" to {to}", e)


class GmailMockConnector(MockConnector):
    """Mock implementation of the Gmail connector for testing."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.drafts: List[Dict[str, Any]] = []
        self.sent: List[Dict[str, Any]] = []
        self.fail_recipients: List[str] = []  # recipients that trigger a failure

    def create_draft(self, to: str, subject: str, html_body: str, text_body: str = "") -> ConnectorResult:
        self._record("create_draft", to=to, subject=subject)
        if to in self.fail_recipients:
            return ConnectorResult(False, f"Failed to create draft for {to}", error="mock_failure")

        draft_id = f"draft-{len(self.drafts) + 1}"
        self.drafts.append({"id": draft_id, "to": to, "subject": subject,
                            "html": html_body, "text": text_body})
        return ConnectorResult(True, f"Created draft for {to}", {"draft_id": draft_id})

    def send_message(self, to: str, subject: str, html_body: str, text_body: str = "") -> ConnectorResult:
        self._record("send_message", to=to, subject=subject)
        if to in self.fail_recipients:
            return ConnectorResult(False, f"Failed to send email to {to}", error="mock_failure")

        message_id = f"msg-{len(self.sent) + 1}"
        self.sent.append({"id": message_id, "to": to, "subject": subject,
                          "html": html_body, "text": text_body})
        return ConnectorResult(True, f"Sent email to {to}", {"message_id": message_id})

    def get_mock_state(self) -> Dict[str, Any]:
        state = super().get_mock_state()
        state.update({"drafts": self.drafts, "sent": self.sent})
        return state
