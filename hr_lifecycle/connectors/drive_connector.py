"""
Google Drive Connector for the HR Lifecycle Engine.

Provides folder creation, template copies, sharing and archiving of
employee folders through the Drive v3 API.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from googleapiclient.errors import HttpError

from .base_connector import ConnectorResult, GoogleApiConnector, MockConnector

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'
VALID_ROLES = ('reader', 'commenter', 'writer')


def folder_url(folder_id: str) -> str:
    return f"https://drive.google.com/drive/folders/{folder_id}"


def document_url(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


def _quote(value: str) -> str:
    """Escape a literal for a Drive search query."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DriveConnector(GoogleApiConnector):
    """Google Drive file and folder management."""

    API_NAME = 'drive'
    API_VERSION = 'v3'
    SCOPES = ['https://www.googleapis.com/auth/drive']

    def find_or_create_folder(self, name: str, parent_id: str) -> ConnectorResult:
        """
        Return the folder called ``name`` under ``parent_id``, creating it if needed.

        Args:
            name: Folder name
            parent_id: ID of the parent folder

        Returns:
            ConnectorResult with ``{"id", "url", "created"}``
        """
        try:
            query = (
                f"name = '{_quote(name)}' and '{_quote(parent_id)}' in parents "
                f"and mimeType = '{FOLDER_MIME_TYPE}' and trashed = false"
            )
            response = self._execute(
                self.service.files().list(
                    q=query,
                    fields='files(id, name, webViewLink)',
                    supportsAllDrives=True,
                    includeItemsFromAllDrives=True
                ),
                f"Find folder {name}"
            )

            existing = response.get('files', [])
            if existing:
                folder = existing[0]
                logger.info(f"Folder '{name}' already exists in parent {parent_id}")
                return ConnectorResult(True, f"Found folder {name}", {
                    "id": folder['id'],
                    "url": folder.get('webViewLink') or folder_url(folder['id']),
                    "created": False,
                })

            folder = self._execute(
                self.service.files().create(
                    body={'name': name, 'mimeType': FOLDER_MIME_TYPE, 'parents': [parent_id]},
                    fields='id, webViewLink',
                    supportsAllDrives=True
                ),
                f"Create folder {name}"
            )

            logger.info(f"Created folder '{name}' in parent {parent_id}")
            return ConnectorResult(True, f"Created folder {name}", {
                "id": folder['id'],
                "url": folder.get('webViewLink') or folder_url(folder['id']),
                "created": True,
            })

        except HttpError as e:
            return self._failure(f"Failed to create folder {name} in {parent_id}", e)

    def copy_file(self, file_id: str, name: str, parent_id: Optional[str] = None) -> ConnectorResult:
        """Copy a file, optionally into another folder."""
        body: Dict[str, Any] = {'name': name}
        if parent_id:
            body['parents'] = [parent_id]

        try:
            copied = self._execute(
                self.service.files().copy(
                    fileId=file_id,
                    body=body,
                    fields='id, webViewLink',
                    supportsAllDrives=True
                ),
                f"Copy file {file_id}"
            )

            logger.info(f"Copied {file_id} to '{name}' ({copied['id']})")
            return ConnectorResult(True, f"Copied {file_id} to {name}", {
                "id": copied['id'],
                "url": copied.get('webViewLink') or document_url(copied['id']),
            })

        except HttpError as e:
            return self._failure(f"Failed to copy file {file_id}", e)

    def trash_file(self, file_id: str) -> ConnectorResult:
        """Move a file to the trash."""
        try:
            self._execute(
                self.service.files().update(
                    fileId=file_id,
                    body={'trashed': True},
                    supportsAllDrives=True
                ),
                f"Trash file {file_id}"
            )

            logger.info(f"Trashed file {file_id}")
            return ConnectorResult(True, f"Trashed file {file_id}")

        except HttpError as e:
            return self._failure(f"Failed to trash file {file_id}", e)

    def add_permission(self, file_id: str, email: str, role: str) -> ConnectorResult:
        """
        Share a file or folder with a user.

        A rejected ``commenter`` grant (folders on some drives) falls back
        to ``reader``.
        """
        if role not in VALID_ROLES:
            return ConnectorResult(False, f"Unknown permission role: {role}", error="invalid_role")
        if not email:
            return ConnectorResult(False, "Email is required to share a file", error="missing_argument")

        try:
            self._create_permission(file_id, email, role)
            logger.info(f"Added {email} as {role} to {file_id}")
            return ConnectorResult(True, f"Added {email} as {role} to {file_id}", {"role": role})

        except HttpError as e:
            if role != 'commenter':
                return self._failure(f"Failed to add {email} as {role} to {file_id}", e)

            logger.warning(f"Commenter access rejected for {file_id}, falling back to reader: {e}")
            try:
                self._create_permission(file_id, email, 'reader')
                return ConnectorResult(True, f"Added {email} as reader to {file_id} (fallback)",
                                       {"role": "reader"})
            except HttpError as fallback_error:
                return self._failure(f"Failed to add {email} as reader to {file_id}", fallback_error)

    def _create_permission(self, file_id: str, email: str, role: str) -> Any:
        return self._execute(
            self.service.permissions().create(
                fileId=file_id,
                body={'type': 'user', 'role': role, 'emailAddress': email},
                sendNotificationEmail=False,
                supportsAllDrives=True
            ),
            f"Share {file_id} with {email}"
        )

    def remove_permission(self, file_id: str, email: str) -> ConnectorResult:
        """Remove every permission ``email`` holds on a file or folder."""
        try:
            response = self._execute(
                self.service.permissions().list(
                    fileId=file_id,
                    fields='permissions(id, emailAddress, role)',
                    supportsAllDrives=True
                ),
                f"List permissions of {file_id}"
            )

            matching = [
                p for p in response.get('permissions', [])
                if (p.get('emailAddress') or '').lower() == email.lower()
            ]
            for permission in matching:
                self._execute(
                    self.service.permissions().delete(
                        fileId=file_id,
                        permissionId=permission['id'],
                        supportsAllDrives=True
                    ),
                    f"Remove {email} from {file_id}"
                )

            if not matching:
                logger.info(f"{email} has no access to {file_id}")
            else:
                logger.info(f"Removed access for {email} from {file_id}")
            return ConnectorResult(True, f"Removed {len(matching)} permission(s) for {email}",
                                   {"removed": len(matching)})

        except HttpError as e:
            return self._failure(f"Failed to remove access for {email} from {file_id}", e)

    def move_file(self, file_id: str, new_parent_id: str) -> ConnectorResult:
        """Move a file or folder under a new parent."""
        try:
            current = self._execute(
                self.service.files().get(fileId=file_id, fields='parents', supportsAllDrives=True),
                f"Get parents of {file_id}"
            )

            self._execute(
                self.service.files().update(
                    fileId=file_id,
                    addParents=new_parent_id,
                    removeParents=','.join(current.get('parents', [])),
                    fields='id, parents',
                    supportsAllDrives=True
                ),
                f"Move {file_id}"
            )

            logger.info(f"Moved {file_id} to {new_parent_id}")
            return ConnectorResult(True, f"Moved {file_id} to {new_parent_id}")

        except HttpError as e:
            if "shared drive" in str(e).lower():
                message = f"{file_id} is in a shared drive and cannot be moved"
                logger.warning(message)
                return ConnectorResult(False, message, {"shared_drive": True}, error=str(e))
            return self._failure(f"Failed to move {file_id} to {new_parent_id}", e)


class DriveMockConnector(MockConnector):
    """Mock implementation of the Drive connector for testing."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.files: Dict[str, Dict[str, Any]] = {}       # file_id -> metadata
        self.permissions: Dict[str, Dict[str, str]] = {}  # file_id -> email -> role
        self.shared_drive_ids: List[str] = []            # files that refuse to move

    def add_file(self, name: str, parent_id: Optional[str] = None, mime_type: str = "document",
                 file_id: Optional[str] = None) -> str:
        """Seed a file (e.g. a template) and return its ID."""
        file_id = file_id or f"mock-{uuid.uuid4().hex[:12]}"
        self.files[file_id] = {
            "name": name,
            "parents": [parent_id] if parent_id else [],
            "mimeType": mime_type,
            "trashed": False,
            "copied_from": None,
        }
        return file_id

    def find_or_create_folder(self, name: str, parent_id: str) -> ConnectorResult:
        self._record("find_or_create_folder", name=name, parent_id=parent_id)
        for file_id, meta in self.files.items():
            if (meta["name"] == name and parent_id in meta["parents"]
                    and meta["mimeType"] == FOLDER_MIME_TYPE and not meta["trashed"]):
                return ConnectorResult(True, f"Found folder {name}",
                                       {"id": file_id, "url": folder_url(file_id), "created": False})

        file_id = self.add_file(name, parent_id, FOLDER_MIME_TYPE)
        logger.info(f"Mock created folder '{name}' ({file_id})")
        return ConnectorResult(True, f"Created folder {name}",
                               {"id": file_id, "url": folder_url(file_id), "created": True})

    def copy_file(self, file_id: str, name: str, parent_id: Optional[str] = None) -> ConnectorResult:
        self._record("copy_file", file_id=file_id, name=name, parent_id=parent_id)
        if file_id not in self.files:
            # Unknown sources are treated as templates that already exist
            logger.debug(f"Mock registering template {file_id}")
            self.add_file(f"Template {file_id}", file_id=file_id)

        new_id = self.add_file(name, parent_id, self.files[file_id]["mimeType"])
        self.files[new_id]["copied_from"] = file_id
        logger.info(f"Mock copied {file_id} to '{name}' ({new_id})")
        return ConnectorResult(True, f"Copied {file_id} to {name}",
                               {"id": new_id, "url": document_url(new_id)})

    def trash_file(self, file_id: str) -> ConnectorResult:
        self._record("trash_file", file_id=file_id)
        if file_id not in self.files:
            return ConnectorResult(False, f"File {file_id} not found", error="not_found")

        self.files[file_id]["trashed"] = True
        return ConnectorResult(True, f"Trashed file {file_id}")

    def add_permission(self, file_id: str, email: str, role: str) -> ConnectorResult:
        self._record("add_permission", file_id=file_id, email=email, role=role)
        if role not in VALID_ROLES:
            return ConnectorResult(False, f"Unknown permission role: {role}", error="invalid_role")
        if not email:
            return ConnectorResult(False, "Email is required to share a file", error="missing_argument")
        if file_id not in self.files:
            return ConnectorResult(False, f"File {file_id} not found", error="not_found")

        self.permissions.setdefault(file_id, {})[email] = role
        return ConnectorResult(True, f"Added {email} as {role} to {file_id}", {"role": role})

    def remove_permission(self, file_id: str, email: str) -> ConnectorResult:
        self._record("remove_permission", file_id=file_id, email=email)
        if file_id not in self.files:
            return ConnectorResult(False, f"File {file_id} not found", error="not_found")

        removed = 1 if self.permissions.get(file_id, {}).pop(email, None) else 0
        return ConnectorResult(True, f"Removed {removed} permission(s) for {email}", {"removed": removed})

    def move_file(self, file_id: str, new_parent_id: str) -> ConnectorResult:
        self._record("move_file", file_id=file_id, new_parent_id=new_parent_id)
        if file_id not in self.files:
            return ConnectorResult(False, f"File {file_id} not found", error="not_found")
        if file_id in self.shared_drive_ids:
            return ConnectorResult(False, f"{file_id} is in a shared drive and cannot be moved",
                                   {"shared_drive": True}, error="shared_drive")

        self.files[file_id]["parents"] = [new_parent_id]
        return ConnectorResult(True, f"Moved {file_id} to {new_parent_id}")

    def get_mock_state(self) -> Dict[str, Any]:
        state = super().get_mock_state()
        state.update({"files": self.files, "permissions": self.permissions})
        return state
