"""
Google Sheets Connector for the HR Lifecycle Engine.

Reads the personnel roster and writes back folder IDs, status flags and
access-log rows through the Sheets v4 API.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from googleapiclient.errors import HttpError

from .base_connector import ConnectorResult, GoogleApiConnector, MockConnector

logger = logging.getLogger(__name__)


def column_letter(column: int) -> str:
    """Convert a 1-based column number to its A1 letters (1 -> A, 27 -> AA)."""
    if column < 1:
        raise ValueError(f"Column must be >= 1, got {column}")

    letters = ""
    while column:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def a1_range(sheet_name: str, row: Optional[int] = None, column: Optional[int] = None) -> str:
    """A1 notation for a whole sheet or a single cell."""
    quoted = "'" + sheet_name.replace("'", "''") + "'"
    if row is None or column is None:
        return quoted
    return f"{quoted}!{column_letter(column)}{row}"


class SheetsConnector(GoogleApiConnector):
    """Spreadsheet reads and cell updates."""

    API_NAME = 'sheets'
    API_VERSION = 'v4'
    SCOPES = ['https://www.googleapis.com/auth/spreadsheets']

    def get_values(self, spreadsheet_id: str, sheet_name: str) -> ConnectorResult:
        """Return all rows of a sheet as displayed strings."""
        try:
            response = self._execute(
                self.service.spreadsheets().values().get(
                    spreadsheetId=spreadsheet_id,
                    range=a1_range(sheet_name),
                    valueRenderOption='FORMATTED_VALUE'
                ),
                f"Read sheet {sheet_name}"
            )
            rows = response.get('values', [])
            return ConnectorResult(True, f"Read {len(rows)} rows from {sheet_name}", rows)

        except HttpError as e:
            return self._failure(f"Failed to read sheet {sheet_name}", e)

    def update_cell(self, spreadsheet_id: str, sheet_name: str, row: int, column: int,
                    value: Any) -> ConnectorResult:
        """Write a single cell; values are parsed as if typed by a user."""
        cell = a1_range(sheet_name, row, column)
        try:
            self._execute(
                self.service.spreadsheets().values().update(
                    spreadsheetId=spreadsheet_id,
                    range=cell,
                    valueInputOption='USER_ENTERED',
                    body={'values': [[value]]}
                ),
                f"Update {cell}"
            )
            logger.info(f"Updated {cell}")
            return ConnectorResult(True, f"Updated {cell}")

        except HttpError as e:
            return self._failure(f"Failed to update {cell}", e)

    def append_row(self, spreadsheet_id: str, sheet_name: str, values: List[Any]) -> ConnectorResult:
        """Append a row after the last row with data."""
        try:
            self._execute(
                self.service.spreadsheets().values().append(
                    spreadsheetId=spreadsheet_id,
                    range=a1_range(sheet_name),
                    valueInputOption='USER_ENTERED',
                    insertDataOption='INSERT_ROWS',
                    body={'values': [values]}
                ),
                f"Append row to {sheet_name}"
            )
            logger.info(f"Appended row to {sheet_name}")
            return ConnectorResult(True, f"Appended row to {sheet_name}")

        except HttpError as e:
            return self._failure(f"Failed to append row to {sheet_name}", e)

    def copy_row_format(self, spreadsheet_id: str, sheet_name: str, source_row: int,
                        target_row: int, num_columns: int) -> ConnectorResult:
        """Copy the formatting (not values) of one row onto another, growing the grid if needed."""
        try:
            sheet_id, row_count = self._sheet_properties(spreadsheet_id, sheet_name)
            if sheet_id is None:
                return ConnectorResult(False, f"Sheet {sheet_name} not found", error="not_found")

            requests = []
            if target_row > row_count:
                requests.append({
                    'appendDimension': {
                        'sheetId': sheet_id,
                        'dimension': 'ROWS',
                        'length': target_row - row_count,
                    }
                })
            requests.append({
                'copyPaste': {
                    'source': _grid_range(sheet_id, source_row, num_columns),
                    'destination': _grid_range(sheet_id, target_row, num_columns),
                    'pasteType': 'PASTE_FORMAT',
                }
            })

            self._execute(
                self.service.spreadsheets().batchUpdate(
                    spreadsheetId=spreadsheet_id,
                    body={'requests': requests}
                ),
                f"Copy format of row {source_row} in {sheet_name}"
            )
            logger.info(f"Copied format of row {source_row} to row {target_row} in {sheet_name}")
            return ConnectorResult(True, f"Copied format to row {target_row}")

        except HttpError as e:
            return self._failure(f"Failed to copy row format in {sheet_name}", e)

    def _sheet_properties(self, spreadsheet_id: str, sheet_name: str) -> Tuple[Optional[int], int]:
        response = self._execute(
            self.service.spreadsheets().get(
                spreadsheetId=spreadsheet_id,
                fields='sheets.properties'
            ),
            f"Get properties of {spreadsheet_id}"
        )
        for sheet in response.get('sheets', []):
            props = sheet.get('properties', {})
            if props.get('title') == sheet_name:
                return props.get('sheetId'), props.get('gridProperties', {}).get('rowCount', 0)
        return None, 0


def _grid_range(sheet_id: int, row: int, num_columns: int) -> Dict[str, int]:
    return {
        'sheetId': sheet_id,
        'startRowIndex': row - 1,
        'endRowIndex': row,
        'startColumnIndex': 0,
        'endColumnIndex': num_columns,
    }


class SheetsMockConnector(MockConnector):
    """Mock implementation of the Sheets connector for testing."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.sheets: Dict[Tuple[str, str], List[List[Any]]] = {}
        self.formatted_rows: List[Tuple[str, str, int, int]] = []

    def set_values(self, spreadsheet_id: str, sheet_name: str, rows: List[List[Any]]) -> None:
        """Seed a sheet with rows (row 1 = headers)."""
        self.sheets[(spreadsheet_id, sheet_name)] = [list(row) for row in rows]

    def get_values(self, spreadsheet_id: str, sheet_name: str) -> ConnectorResult:
        self._record("get_values", spreadsheet_id=spreadsheet_id, sheet_name=sheet_name)
        key = (spreadsheet_id, sheet_name)
        if key not in self.sheets:
            return ConnectorResult(False, f"Sheet {sheet_name} not found", error="not_found")

        rows = [[str(v) for v in row] for row in self.sheets[key]]
        return ConnectorResult(True, f"Read {len(rows)} rows from {sheet_name}", rows)

    def update_cell(self, spreadsheet_id: str, sheet_name: str, row: int, column: int,
                    value: Any) -> ConnectorResult:
        self._record("update_cell", spreadsheet_id=spreadsheet_id, sheet_name=sheet_name,
                     row=row, column=column, value=value)
        rows = self.sheets.setdefault((spreadsheet_id, sheet_name), [])
        while len(rows) < row:
            rows.append([])
        cells = rows[row - 1]
        while len(cells) < column:
            cells.append("")
        cells[column - 1] = value
        return ConnectorResult(True, f"Updated {a1_range(sheet_name, row, column)}")

    def append_row(self, spreadsheet_id: str, sheet_name: str, values: List[Any]) -> ConnectorResult:
        self._record("append_row", spreadsheet_id=spreadsheet_id, sheet_name=sheet_name, values=values)
        self.sheets.setdefault((spreadsheet_id, sheet_name), []).append(list(values))
        return ConnectorResult(True, f"Appended row to {sheet_name}")

    def copy_row_format(self, spreadsheet_id: str, sheet_name: str, source_row: int,
                        target_row: int, num_columns: int) -> ConnectorResult:
        self._record("copy_row_format", spreadsheet_id=spreadsheet_id, sheet_name=sheet_name,
                     source_row=source_row, target_row=target_row, num_columns=num_columns)
        if (spreadsheet_id, sheet_name) not in self.sheets:
            return ConnectorResult(False, f"Sheet {sheet_name} not found", error="not_found")

        self.formatted_rows.append((spreadsheet_id, sheet_name, source_row, target_row))
        return ConnectorResult(True, f"Copied format to row {target_row}")

    def get_mock_state(self) -> Dict[str, Any]:
        state = super().get_mock_state()
        state["sheets"] = {f"{sid}/{name}": rows for (sid, name), rows in self.sheets.items()}
        return state
