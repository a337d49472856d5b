"""
Tests for the personnel roster and sheet date handling.
"""

from datetime import date, datetime

import pytest

from hr_lifecycle.engine.roster import PersonnelRoster, format_date, parse_employee_name, parse_sheet_date


class TestDates:

    @pytest.mark.parametrize("value", ["01/15/2024", "1/15/24", "2024-01-15", "January 15, 2024", "Jan 15, 2024"])
    def test_sheet_formats(self, value):
        assert parse_sheet_date(value) == date(2024, 1, 15)

    def test_blank_values(self):
        assert parse_sheet_date(None) is None
        assert parse_sheet_date("  ") is None

    def test_date_objects(self):
        assert parse_sheet_date(datetime(2024, 1, 15, 9, 30)) == date(2024, 1, 15)
        assert parse_sheet_date(date(2024, 1, 15)) == date(2024, 1, 15)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unrecognized date"):
            parse_sheet_date("next Tuesday")

    def test_format_date(self):
        assert format_date(date(2024, 1, 5)) == "January 5, 2024"
        assert format_date(None) == ""


class TestParseEmployeeName:

    def test_last_first(self):
        assert parse_employee_name("Doe, Jane") == {
            "first_name": "Jane", "last_name": "Doe", "full_name": "Jane Doe",
        }

    def test_single_name(self):
        assert parse_employee_name("Cher") == {"first_name": "Cher", "last_name": "", "full_name": "Cher"}


class TestPersonnelRoster:
    """Test cases for PersonnelRoster."""

    @pytest.fixture
    def roster(self, connectors, settings):
        return PersonnelRoster(connectors["sheets"], settings).load()

    def test_header_map(self, roster):
        assert roster.column_number("First Name") == 1
        assert roster.column_number("Employee MedRec Folder ID") == 12
        assert roster.column_number("Missing") is None
        assert roster.has_column("Active")

    def test_get_record(self, roster):
        record = roster.get_record(2)

        assert record.row_index == 2
        assert record.full_name == "Jane Doe"
        assert record.folder_name == "Doe, Jane"
        assert record.start_date == date(2024, 1, 15)
        assert record.formatted_start_date == "January 15, 2024"
        assert record.end_date is None
        assert record.job_classification == "RN"
        assert record.employee_folder_id is None
        assert record.is_active

    def test_inactive_record(self, roster):
        assert not roster.get_record(4).is_active

    @pytest.mark.parametrize("row", [0, 1, 5])
    def test_invalid_rows(self, roster, row):
        with pytest.raises(ValueError):
            roster.get_record(row)

    def test_row_without_name(self, connectors, settings, personnel_rows):
        personnel_rows[1][0] = ""
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, personnel_rows)
        roster = PersonnelRoster(connectors["sheets"], settings)

        with pytest.raises(ValueError, match="missing a first or last name"):
            roster.get_record(2)

    def test_bad_date(self, connectors, settings, personnel_rows):
        personnel_rows[1][4] = "soon"
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, personnel_rows)

        with pytest.raises(ValueError, match="Unrecognized date"):
            PersonnelRoster(connectors["sheets"], settings).get_record(2)

    def test_iter_records(self, connectors, settings, personnel_rows):
        personnel_rows.append([""] * 12)
        personnel_rows.append(["", "NoFirst"])
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, personnel_rows)
        roster = PersonnelRoster(connectors["sheets"], settings)

        records = list(roster.iter_records())

        assert [row for row, _ in records] == [2, 3, 4, 6]
        assert records[-1][1] is None
        assert records[1][1].last_name == "Smith"

    def test_missing_sheet(self, connectors, settings):
        connectors["sheets"].sheets.clear()
        with pytest.raises(ValueError, match="Could not read sheet"):
            PersonnelRoster(connectors["sheets"], settings).load()

    def test_empty_sheet(self, connectors, settings):
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, [])
        with pytest.raises(ValueError, match="is empty"):
            PersonnelRoster(connectors["sheets"], settings).load()

    def test_raw_row(self, roster):
        row = roster.raw_row(3)
        assert row["End Date"] == "06/30/2024"
        assert row["Employee Folder ID"] == "emp-folder-john"

    def test_update_field(self, roster, connectors, settings):
        assert roster.update_field(2, "Employee Folder ID", "folder-123")

        sheet = connectors["sheets"].sheets[(settings.spreadsheets.personnel_id, "Personnel")]
        assert sheet[1][10] == "folder-123"
        assert roster.get_record(2).employee_folder_id == "folder-123"

    def test_update_missing_column(self, roster, connectors):
        assert roster.update_field(2, "Badge Number", "42") is False
        assert not [c for c in connectors["sheets"].calls if c["operation"] == "update_cell"]


class TestAccessLog:
    """Test cases for PersonnelRoster.append_access_log."""

    def access_log(self, connectors, settings):
        return connectors["sheets"].sheets[(settings.spreadsheets.access_log_id, settings.spreadsheets.access_log_sheet)]

    def test_row_copies_last_row_format(self, connectors, settings):
        roster = PersonnelRoster(connectors["sheets"], settings)

        assert roster.append_access_log("Doe, Jane", "January 15, 2024", "RN")

        rows = self.access_log(connectors, settings)
        assert len(rows) == 3
        assert rows[2][1] == "Doe, Jane"
        assert rows[2][2] == "RN"
        assert rows[2][5] == "January 15, 2024"
        assert connectors["sheets"].formatted_rows == [
            (settings.spreadsheets.access_log_id, settings.spreadsheets.access_log_sheet, 2, 3)
        ]

    def test_header_only_sheet_gets_appended_row(self, connectors, settings):
        connectors["sheets"].set_values(settings.spreadsheets.access_log_id,
                                        settings.spreadsheets.access_log_sheet, [["#", "Name", "Class"]])
        roster = PersonnelRoster(connectors["sheets"], settings)

        assert roster.append_access_log("Doe, Jane", "January 15, 2024", "RN")

        rows = self.access_log(connectors, settings)
        assert rows[1] == ["", "Doe, Jane", "RN", "", "", "January 15, 2024"]
        assert connectors["sheets"].formatted_rows == []

    def test_missing_access_log(self, connectors, settings):
        del connectors["sheets"].sheets[(settings.spreadsheets.access_log_id, settings.spreadsheets.access_log_sheet)]
        roster = PersonnelRoster(connectors["sheets"], settings)

        assert roster.append_access_log("Doe, Jane", "January 15, 2024", "RN") is False
