"""
Google Workspace Directory Connector for the HR Lifecycle Engine.

Manages Google Group memberships through the Admin SDK Directory API.
"""

import logging
from typing import Any, Dict, List, Optional

from googleapiclient.errors import HttpError

from .base_connector import ConnectorResult, GoogleApiConnector, MockConnector

logger = logging.getLogger(__name__)


class DirectoryConnector(GoogleApiConnector):
    """Google Groups membership management."""

    API_NAME = 'admin'
    API_VERSION = 'directory_v1'
    SCOPES = [
        'https://www.googleapis.com/auth/admin.directory.group.member',
    ]

    def add_member(self, group_email: str, user_email: str) -> ConnectorResult:
        """Add a user to a group; an existing membership counts as success."""
        if not group_email or not user_email:
            return ConnectorResult(False, "Group email and user email are required",
                                   error="missing_argument")

        try:
            self._execute(
                self.service.members().insert(
                    groupKey=group_email,
                    body={'email': user_email, 'role': 'MEMBER'}
                ),
                f"Add {user_email} to {group_email}"
            )

            logger.info(f"Added {user_email} to Google Group {group_email}")
            return ConnectorResult(True, f"Added {user_email} to {group_email}")

        except HttpError as e:
            if e.resp.status == 409 or "Member already exists" in str(e):
                logger.info(f"{user_email} is already a member of {group_email}")
                return ConnectorResult(True, f"{user_email} is already a member of {group_email}",
                                       {"already_member": True})
            return self._failure(f"Failed to add {user_email} to Google Group {group_email}", e)

    def remove_member(self, group_email: str, user_email: str) -> ConnectorResult:
        """Remove a user from a group; a missing membership counts as success."""
        if not group_email or not user_email:
            return ConnectorResult(False, "Group email and user email are required",
                                   error="missing_argument")

        try:
            self._execute(
                self.service.members().delete(groupKey=group_email, memberKey=user_email),
                f"Remove {user_email} from {group_email}"
            )

            logger.info(f"Removed {user_email} from Google Group {group_email}")
            return ConnectorResult(True, f"Removed {user_email} from {group_email}")

        except HttpError as e:
            if e.resp.status == 404 and "memberKey" in str(e):
                logger.info(f"{user_email} was not a member of {group_email}")
                return ConnectorResult(True, f"{user_email} was not a member of {group_email}",
                                       {"not_member": True})
            return self._failure(f"Failed to remove {user_email} from Google Group {group_email}", e)

    def list_members(self, group_email: str) -> ConnectorResult:
        """List member emails of a group."""
        try:
            members = []
            page_token = None
            while True:
                response = self._execute(
                    self.service.members().list(groupKey=group_email, pageToken=page_token),
                    f"List members of {group_email}"
                )
                members.extend(m.get('email') for m in response.get('members', []))
                page_token = response.get('nextPageToken')
                if not page_token:
                    break

            return ConnectorResult(True, f"{len(members)} members in {group_email}", members)

        except HttpError as e:
            return self._failure(f"Failed to list members of {group_email}", e)


class DirectoryMockConnector(MockConnector):
    """Mock implementation of the Directory connector for testing."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.groups: Dict[str, List[str]] = {}  # group_email -> member emails

    def add_member(self, group_email: str, user_email: str) -> ConnectorResult:
        self._record("add_member", group_email=group_email, user_email=user_email)
        if not group_email or not user_email:
            return ConnectorResult(False, "Group email and user email are required",
                                   error="missing_argument")

        members = self.groups.setdefault(group_email, [])
        if user_email in members:
            return ConnectorResult(True, f"{user_email} is already a member of {group_email}",
                                   {"already_member": True})

        members.append(user_email)
        logger.info(f"Mock added {user_email} to {group_email}")
        return ConnectorResult(True, f"Added {user_email} to {group_email}")

    def remove_member(self, group_email: str, user_email: str) -> ConnectorResult:
        self._record("remove_member", group_email=group_email, user_email=user_email)
        if not group_email or not user_email:
            return ConnectorResult(False, "Group email and user email are required",
                                   error="missing_argument")

        members = self.groups.get(group_email, [])
        if user_email not in members:
            return ConnectorResult(True, f"{user_email} was not a member of {group_email}",
                                   {"not_member": True})

        members.remove(user_email)
        logger.info(f"Mock removed {user_email} from {group_email}")
        return ConnectorResult(True, f"Removed {user_email} from {group_email}")

    def list_members(self, group_email: str) -> ConnectorResult:
        members = list(self.groups.get(group_email, []))
        return ConnectorResult(True, f"{len(members)} members in {group_email}", members)

    def get_mock_state(self) -> Dict[str, Any]:
        state = super().get_mock_state()
        state["groups"] = self.groups
        return state
