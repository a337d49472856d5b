"""
Personnel Roster for the HR Lifecycle Engine.

Reads employee rows from the personnel spreadsheet by header name, writes
values back into named columns and maintains the HIPAA access log.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from ..models import EmployeeRecord
from .settings import Settings

logger = logging.getLogger(__name__)

SHEET_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y", "%Y-%m-%d", "%B %d, %Y", "%b %d, %Y")


def parse_sheet_date(value: Any) -> Optional[date]:
    """
    Parse a date cell as displayed by Sheets.

    Args:
        value: Cell value (string, date or datetime)

    Returns:
        The date, or None for blank cells

    Raises:
        ValueError: If a non-blank value matches no known format
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    for fmt in SHEET_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized date: {text!r}")


def format_date(value: Optional[date]) -> str:
    """Format a date as ``January 1, 2024``; None becomes an empty string."""
    if value is None:
        return ""
    return f"{value:%B} {value.day}, {value.year}"


def parse_employee_name(folder_name: str) -> Dict[str, str]:
    """
    Split a ``Last, First`` folder name into its parts.

    Names without a comma are treated as a first name only.
    """
    last, sep, first = folder_name.partition(", ")
    if not sep:
        first, last = folder_name.strip(), ""
    first, last = first.strip(), last.strip()
    return {
        "first_name": first,
        "last_name": last,
        "full_name": f"{first} {last}".strip(),
    }


class PersonnelRoster:
    """
    Header-addressed view of the personnel sheet.

    Args:
        sheets: Sheets connector (real or mock)
        settings: Engine settings naming the spreadsheets and columns
    """

    def __init__(self, sheets: Any, settings: Settings):
        self.sheets = sheets
        self.settings = settings
        self.spreadsheet_id = settings.spreadsheets.personnel_id
        self.sheet_name = settings.spreadsheets.personnel_sheet
        self.rows: List[List[str]] = []
        self.header_map: Dict[str, int] = {}

    def load(self) -> "PersonnelRoster":
        """
        Read the sheet and build the header map from row 1.

        Raises:
            ValueError: If the sheet cannot be read or has no rows
        """
        result = self.sheets.get_values(self.spreadsheet_id, self.sheet_name)
        if not result:
            raise ValueError(f"Could not read sheet \"{self.sheet_name}\": {result.message}")
        if not result.data:
            raise ValueError(f"Sheet \"{self.sheet_name}\" is empty")

        self.rows = result.data
        self.header_map = {
            str(header).strip(): index
            for index, header in enumerate(self.rows[0])
            if str(header).strip()
        }
        logger.debug(f"Loaded {len(self.rows) - 1} rows from {self.sheet_name}")
        return self

    def has_column(self, header: str) -> bool:
        return header in self.header_map

    def column_number(self, header: str) -> Optional[int]:
        """1-based column number of ``header``, or None if the sheet lacks it."""
        index = self.header_map.get(header)
        return None if index is None else index + 1

    def get_record(self, row_index: int) -> EmployeeRecord:
        """
        Build the record for one sheet row.

        Args:
            row_index: 1-based row number (row 1 holds the headers)

        Raises:
            ValueError: For the header row, rows past the end, or rows without a name
        """
        if not self.rows:
            self.load()
        if row_index < 2:
            raise ValueError("Row 1 is the header row; select an employee row")
        if row_index > len(self.rows):
            raise ValueError(f"Row {row_index} is beyond the last row ({len(self.rows)})")

        return self._record_from_row(row_index, self.rows[row_index - 1])

    def iter_records(self) -> Iterator[Tuple[int, Optional[EmployeeRecord]]]:
        """
        Yield ``(row_index, record)`` for every data row.

        Rows that cannot be turned into a record (no name, bad date) yield
        None so callers can count them.
        """
        if not self.rows:
            self.load()
        for row_index in range(2, len(self.rows) + 1):
            row = self.rows[row_index - 1]
            if not any(str(cell).strip() for cell in row):
                continue
            try:
                yield row_index, self._record_from_row(row_index, row)
            except ValueError as e:
                logger.warning(f"Skipping row {row_index}: {e}")
                yield row_index, None

    def raw_row(self, row_index: int) -> Dict[str, str]:
        """Row values keyed by header."""
        row = self.rows[row_index - 1]
        return {
            header: str(row[index]).strip() if index < len(row) else ""
            for header, index in self.header_map.items()
        }

    def update_field(self, row_index: int, header: str, value: Any) -> bool:
        """
        Write a value into a named column of a row.

        Returns:
            False (with a warning) if the column does not exist or the write failed
        """
        column = self.column_number(header)
        if column is None:
            logger.warning(f"Column \"{header}\" not found. Cannot write row {row_index}.")
            return False

        result = self.sheets.update_cell(self.spreadsheet_id, self.sheet_name, row_index, column, value)
        if not result:
            logger.error(f"Failed to write \"{header}\" for row {row_index}: {result.error}")
            return False

        if row_index <= len(self.rows):
            row = self.rows[row_index - 1]
            while len(row) < column:
                row.append("")
            row[column - 1] = value
        return True

    def append_access_log(self, employee_name: str, start_date: str, classification: str) -> bool:
        """
        Add the employee to the HIPAA access log.

        The new row takes the formatting of the last row; name goes in column
        B, classification in column C and the start date three columns from
        the right edge. A sheet holding only headers gets a plain appended row.

        Returns:
            True if the row was written
        """
        spreadsheet_id = self.settings.spreadsheets.access_log_id
        sheet_name = self.settings.spreadsheets.access_log_sheet

        result = self.sheets.get_values(spreadsheet_id, sheet_name)
        if not result:
            logger.error(f"Access log sheet \"{sheet_name}\" not found: {result.message}")
            return False

        rows = result.data or []
        last_row = len(rows)
        last_column = max((len(row) for row in rows), default=0)

        if last_row < 2:
            values = [""] * max(last_column, 6)
            values[1] = employee_name
            values[2] = classification
            values[5] = start_date
            appended = self.sheets.append_row(spreadsheet_id, sheet_name, values)
            if appended:
                logger.info(f"Access log updated for {employee_name} (first data row)")
            return bool(appended)

        target_row = last_row + 1
        formatted = self.sheets.copy_row_format(spreadsheet_id, sheet_name, last_row, target_row, last_column)
        if not formatted:
            logger.warning(f"Could not copy access log formatting: {formatted.message}")

        date_column = max(last_column - 2, 4)
        for column, value in ((2, employee_name), (3, classification), (date_column, start_date)):
            written = self.sheets.update_cell(spreadsheet_id, sheet_name, target_row, column, value)
            if not written:
                logger.error(f"Failed to update access log for {employee_name}: {written.error}")
                return False

        logger.info(f"Access log updated for {employee_name} in row {target_row}")
        return True

    def _record_from_row(self, row_index: int, row: List[Any]) -> EmployeeRecord:
        columns = self.settings.columns

        def cell(header: str) -> str:
            index = self.header_map.get(header)
            if index is None or index >= len(row):
                return ""
            return str(row[index]).strip()

        first_name = cell(columns.first_name)
        last_name = cell(columns.last_name)
        if not first_name or not last_name:
            raise ValueError(f"Row {row_index} is missing a first or last name")

        try:
            return EmployeeRecord(
                row_index=row_index,
                first_name=first_name,
                last_name=last_name,
                work_email=cell(columns.work_email),
                personal_email=cell(columns.personal_email),
                start_date=parse_sheet_date(cell(columns.start_date)),
                end_date=parse_sheet_date(cell(columns.end_date)),
                job_folder_id=cell(columns.job_folder_id),
                job_classification=cell(columns.job_classification),
                group_email=cell(columns.group_email),
                active=cell(columns.active),
                employee_folder_id=cell(columns.employee_folder_id),
                employee_medrec_folder_id=cell(columns.employee_medrec_folder_id),
            )
        except ValidationError as e:
            raise ValueError(f"Row {row_index} is invalid: {e}") from e
