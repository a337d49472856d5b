"""
Tests for the Google Workspace connectors and their mock counterparts.
"""

import base64
import email
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from hr_lifecycle.connectors import (
    DirectoryConnector,
    DirectoryMockConnector,
    DocsConnector,
    DriveConnector,
    DriveMockConnector,
    GmailConnector,
    SheetsConnector,
    SheetsMockConnector,
    create_connectors,
    get_connector_class,
)
from hr_lifecycle.connectors.gmail_connector import build_raw_message
from hr_lifecycle.connectors.sheets_connector import a1_range, column_letter

CONFIG = {"retry": {"max_retries": 2, "initial_delay": 0}}


def http_error(status, reason="Error"):
    return HttpError(httplib2.Response({"status": status, "reason": reason}), b"")


class TestConnectorFactory:

    def test_create_mock_connectors(self):
        connectors = create_connectors(mock=True)

        assert set(connectors) == {"directory", "drive", "docs", "sheets", "gmail"}
        assert all(c.is_mock_mode() for c in connectors.values())
        assert connectors["docs"].drive is connectors["drive"]
        assert connectors["drive"].get_system_name() == "drive"

    def test_unknown_system(self):
        with pytest.raises(ValueError, match="Unknown system"):
            get_connector_class("slack")

    def test_real_connector_requires_credentials(self):
        with pytest.raises(ValueError, match="credentials"):
            DriveConnector({})


class TestDirectoryConnector:
    """Test cases for DirectoryConnector."""

    @pytest.fixture
    def service(self):
        return MagicMock()

    @pytest.fixture
    def connector(self, service):
        return DirectoryConnector(CONFIG, service=service)

    def test_add_member(self, connector, service):
        result = connector.add_member("rn-staff@example.com", "jane@example.com")

        assert result.success
        service.members.return_value.insert.assert_called_once_with(
            groupKey="rn-staff@example.com", body={"email": "jane@example.com", "role": "MEMBER"}
        )

    def test_existing_member_is_success(self, connector, service):
        service.members.return_value.insert.return_value.execute.side_effect = http_error(409, "Member already exists.")

        result = connector.add_member("rn-staff@example.com", "jane@example.com")

        assert result.success
        assert result.data == {"already_member": True}

    def test_add_member_failure(self, connector, service):
        service.members.return_value.insert.return_value.execute.side_effect = http_error(403, "Not Authorized")

        result = connector.add_member("rn-staff@example.com", "jane@example.com")

        assert not result
        assert "Not Authorized" in result.error

    def test_missing_arguments(self, connector, service):
        assert connector.add_member("", "jane@example.com").error == "missing_argument"
        service.members.return_value.insert.assert_not_called()

    def test_remove_non_member_is_success(self, connector, service):
        service.members.return_value.delete.return_value.execute.side_effect = http_error(
            404, "Resource Not Found: memberKey"
        )

        result = connector.remove_member("rn-staff@example.com", "john@example.com")

        assert result.success
        assert result.data == {"not_member": True}

    def test_transient_error_is_retried(self, connector, service):
        service.members.return_value.insert.return_value.execute.side_effect = [http_error(503), {}]

        assert connector.add_member("rn-staff@example.com", "jane@example.com").success
        assert service.members.return_value.insert.return_value.execute.call_count == 2

    def test_list_members_pages(self, connector, service):
        service.members.return_value.list.return_value.execute.side_effect = [
            {"members": [{"email": "a@example.com"}], "nextPageToken": "t"},
            {"members": [{"email": "b@example.com"}]},
        ]

        assert connector.list_members("rn-staff@example.com").data == ["a@example.com", "b@example.com"]


class TestDriveConnector:
    """Test cases for DriveConnector."""

    @pytest.fixture
    def service(self):
        return MagicMock()

    @pytest.fixture
    def connector(self, service):
        return DriveConnector(CONFIG, service=service)

    def test_existing_folder_is_reused(self, connector, service):
        files = service.files.return_value
        files.list.return_value.execute.return_value = {"files": [{"id": "f1", "webViewLink": "https://l/f1"}]}

        result = connector.find_or_create_folder("Doe, Jane", "parent")

        assert result.data == {"id": "f1", "url": "https://l/f1", "created": False}
        files.create.assert_not_called()
        assert "name = 'Doe, Jane'" in files.list.call_args.kwargs["q"]

    def test_folder_is_created(self, connector, service):
        files = service.files.return_value
        files.list.return_value.execute.return_value = {"files": []}
        files.create.return_value.execute.return_value = {"id": "f2"}

        result = connector.find_or_create_folder("O'Brien, Pat", "parent")

        assert result.data == {"id": "f2", "url": "https://drive.google.com/drive/folders/f2", "created": True}
        assert "name = 'O\\'Brien, Pat'" in files.list.call_args.kwargs["q"]
        assert files.create.call_args.kwargs["body"]["parents"] == ["parent"]

    def test_copy_file(self, connector, service):
        service.files.return_value.copy.return_value.execute.return_value = {"id": "c1"}

        result = connector.copy_file("tpl", "Copy", "folder")

        assert result.data == {"id": "c1", "url": "https://docs.google.com/document/d/c1/edit"}
        assert service.files.return_value.copy.call_args.kwargs["body"] == {"name": "Copy", "parents": ["folder"]}

    def test_commenter_falls_back_to_reader(self, connector, service):
        create = service.permissions.return_value.create
        create.return_value.execute.side_effect = [http_error(403, "Forbidden"), {"id": "p1"}]

        result = connector.add_permission("folder", "jane@example.com", "commenter")

        assert result.success
        assert result.data == {"role": "reader"}
        assert [c.kwargs["body"]["role"] for c in create.call_args_list] == ["commenter", "reader"]

    def test_writer_failure_does_not_fall_back(self, connector, service):
        create = service.permissions.return_value.create
        create.return_value.execute.side_effect = http_error(403, "Forbidden")

        assert not connector.add_permission("doc", "jane@example.com", "writer")
        assert create.call_count == 1

    def test_invalid_role(self, connector):
        assert connector.add_permission("doc", "jane@example.com", "owner").error == "invalid_role"

    def test_remove_permission(self, connector, service):
        permissions = service.permissions.return_value
        permissions.list.return_value.execute.return_value = {"permissions": [
            {"id": "p1", "emailAddress": "John.Smith@example.com", "role": "commenter"},
            {"id": "p2", "emailAddress": "hr@example.com", "role": "owner"},
        ]}

        result = connector.remove_permission("folder", "john.smith@example.com")

        assert result.data == {"removed": 1}
        permissions.delete.assert_called_once_with(fileId="folder", permissionId="p1", supportsAllDrives=True)

    def test_move_file(self, connector, service):
        files = service.files.return_value
        files.get.return_value.execute.return_value = {"parents": ["a", "b"]}

        assert connector.move_file("folder", "archive").success
        assert files.update.call_args.kwargs["addParents"] == "archive"
        assert files.update.call_args.kwargs["removeParents"] == "a,b"

    def test_move_from_shared_drive(self, connector, service):
        files = service.files.return_value
        files.get.return_value.execute.return_value = {"parents": ["a"]}
        files.update.return_value.execute.side_effect = http_error(403, "Cannot move items out of a shared drive")

        result = connector.move_file("folder", "archive")

        assert not result
        assert result.data == {"shared_drive": True}


class TestDocsConnector:

    def test_get_document_not_found(self):
        service = MagicMock()
        service.documents.return_value.get.return_value.execute.side_effect = http_error(404, "Not Found")

        result = DocsConnector(CONFIG, service=service).get_document("doc")

        assert not result
        assert result.message == "Document doc not found"

    def test_batch_update(self):
        service = MagicMock()
        service.documents.return_value.batchUpdate.return_value.execute.return_value = {"replies": [{}]}
        requests = [{"replaceAllText": {}}]

        result = DocsConnector(CONFIG, service=service).batch_update("doc", requests)

        assert result.data == {"replies": [{}]}
        service.documents.return_value.batchUpdate.assert_called_once_with(
            documentId="doc", body={"requests": requests}
        )

    def test_empty_batch_skips_api(self):
        service = MagicMock()
        assert DocsConnector(CONFIG, service=service).batch_update("doc", []).success
        service.documents.assert_not_called()


class TestSheetsConnector:
    """Test cases for SheetsConnector."""

    def test_column_letters(self):
        assert column_letter(1) == "A"
        assert column_letter(26) == "Z"
        assert column_letter(27) == "AA"
        assert column_letter(703) == "AAA"
        with pytest.raises(ValueError):
            column_letter(0)

    def test_a1_range(self):
        assert a1_range("Personnel") == "'Personnel'"
        assert a1_range("Bob's Sheet", 3, 2) == "'Bob''s Sheet'!B3"

    def test_get_values(self):
        service = MagicMock()
        values = service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {"values": [["First Name"], ["Jane"]]}

        result = SheetsConnector(CONFIG, service=service).get_values("sheet-id", "Personnel")

        assert result.data == [["First Name"], ["Jane"]]

    def test_update_cell(self):
        service = MagicMock()
        values = service.spreadsheets.return_value.values.return_value

        SheetsConnector(CONFIG, service=service).update_cell("sheet-id", "Personnel", 5, 11, "folder-1")

        values.update.assert_called_once_with(
            spreadsheetId="sheet-id", range="'Personnel'!K5",
            valueInputOption="USER_ENTERED", body={"values": [["folder-1"]]},
        )

    def test_copy_row_format_grows_grid(self):
        service = MagicMock()
        spreadsheets = service.spreadsheets.return_value
        spreadsheets.get.return_value.execute.return_value = {"sheets": [
            {"properties": {"title": "Employees", "sheetId": 7, "gridProperties": {"rowCount": 2}}},
        ]}

        result = SheetsConnector(CONFIG, service=service).copy_row_format("log-id", "Employees", 2, 3, 8)

        assert result.success
        requests = spreadsheets.batchUpdate.call_args.kwargs["body"]["requests"]
        assert requests[0] == {"appendDimension": {"sheetId": 7, "dimension": "ROWS", "length": 1}}
        assert requests[1]["copyPaste"]["source"]["startRowIndex"] == 1
        assert requests[1]["copyPaste"]["destination"] == {
            "sheetId": 7, "startRowIndex": 2, "endRowIndex": 3, "startColumnIndex": 0, "endColumnIndex": 8,
        }
        assert requests[1]["copyPaste"]["pasteType"] == "PASTE_FORMAT"

    def test_copy_row_format_unknown_sheet(self):
        service = MagicMock()
        service.spreadsheets.return_value.get.return_value.execute.return_value = {"sheets": []}

        result = SheetsConnector(CONFIG, service=service).copy_row_format("log-id", "Employees", 2, 3, 8)

        assert result.error == "not_found"


class TestGmailConnector:

    def test_build_raw_message(self):
        raw = build_raw_message("jane@example.com", "Welcome!", "<p>Hi</p>", "Hi")
        message = email.message_from_bytes(base64.urlsafe_b64decode(raw))

        assert message["To"] == "jane@example.com"
        assert message["Subject"] == "Welcome!"
        assert message.get_content_type() == "multipart/alternative"
        parts = [part.get_content_type() for part in message.get_payload()]
        assert parts == ["text/plain", "text/html"]

    def test_create_draft(self):
        service = MagicMock()
        drafts = service.users.return_value.drafts.return_value
        drafts.create.return_value.execute.return_value = {"id": "d1"}

        result = GmailConnector(CONFIG, service=service).create_draft("jane@example.com", "Hi", "<p>Hi</p>")

        assert result.data == {"draft_id": "d1"}
        assert drafts.create.call_args.kwargs["userId"] == "me"
        assert "raw" in drafts.create.call_args.kwargs["body"]["message"]

    def test_send_failure(self):
        service = MagicMock()
        messages = service.users.return_value.messages.return_value
        messages.send.return_value.execute.side_effect = http_error(400, "Invalid To header")

        result = GmailConnector(CONFIG, service=service).send_message("bad", "Hi", "<p>Hi</p>")

        assert not result
        assert "Invalid To header" in result.error


class TestMockConnectors:
    """Behaviour of the in-memory connectors used by tests and mock mode."""

    def test_directory_membership(self):
        directory = DirectoryMockConnector()

        assert directory.add_member("g@example.com", "jane@example.com").success
        assert directory.add_member("g@example.com", "jane@example.com").data == {"already_member": True}
        assert directory.remove_member("g@example.com", "jane@example.com").success
        assert directory.remove_member("g@example.com", "jane@example.com").data == {"not_member": True}
        assert directory.groups == {"g@example.com": []}

    def test_drive_folder_reuse(self):
        drive = DriveMockConnector()

        first = drive.find_or_create_folder("Doe, Jane", "parent")
        second = drive.find_or_create_folder("Doe, Jane", "parent")

        assert first.data["created"] is True
        assert second.data == {"id": first.data["id"], "url": first.data["url"], "created": False}

    def test_drive_shared_drive_move(self):
        drive = DriveMockConnector()
        drive.add_file("Folder", "parent", file_id="f1")
        drive.shared_drive_ids.append("f1")

        result = drive.move_file("f1", "archive")

        assert not result
        assert result.data == {"shared_drive": True}
        assert drive.files["f1"]["parents"] == ["parent"]

    def test_drive_unknown_file(self):
        drive = DriveMockConnector()
        assert drive.add_permission("missing", "jane@example.com", "writer").error == "not_found"
        assert drive.trash_file("missing").error == "not_found"

    def test_sheets_update_extends_rows(self):
        sheets = SheetsMockConnector()
        sheets.set_values("s", "Sheet1", [["a"]])

        sheets.update_cell("s", "Sheet1", 3, 2, "x")

        assert sheets.sheets[("s", "Sheet1")] == [["a"], [], ["", "x"]]
        assert sheets.get_values("s", "Sheet1").data == [["a"], [], ["", "x"]]
