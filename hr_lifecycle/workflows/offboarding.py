"""
Offboarding Workflow for the HR Lifecycle Engine.

Marks the employee inactive, removes them from their groups, revokes their
access to the employee and medical record folders and archives the
employee folder.
"""

import logging
from datetime import date
from typing import Any, Dict

from ..engine.roster import format_date
from ..models import EmployeeRecord, WorkflowResult, WorkflowType
from .base_workflow import BaseWorkflow
from .helpers import OFFBOARDING_FIELDS, validate_employee

logger = logging.getLogger(__name__)


class OffboardingWorkflow(BaseWorkflow):
    """
    Workflow for a departing employee.

    Every step is attempted even when earlier ones fail, so that as much
    access as possible is revoked.
    """

    workflow_type = WorkflowType.OFFBOARDING

    def execute(self, row_index: int) -> WorkflowResult:
        """
        Execute the offboarding workflow for one personnel row.

        Args:
            row_index: 1-based row of the personnel sheet

        Returns:
            WorkflowResult with execution details
        """
        logger.info(f"Starting offboarding workflow for row {row_index}")
        return self._run(f"row {row_index}", lambda: self._offboard(row_index))

    def _offboard(self, row_index: int) -> Dict[str, Any]:
        record = self.roster.get_record(row_index)
        self.employee = record.folder_name

        errors = validate_employee(record, OFFBOARDING_FIELDS)
        if errors:
            raise ValueError("; ".join(errors))

        end_date = record.end_date or date.today()
        self._mark_inactive(record, end_date)
        self._remove_from_groups(record)
        archived = self._archive_folders(record)
        email_sent = self._create_offboarding_email(record, end_date)

        return {
            "employee": record.full_name,
            "end_date": end_date.isoformat(),
            "folder_archived": archived,
            "offboarding_email": email_sent,
        }

    def _mark_inactive(self, record: EmployeeRecord, end_date: date) -> None:
        columns = self.settings.columns
        updates = ((columns.active, "No"), (columns.end_date, end_date.strftime("%m/%d/%Y")))
        for column, value in updates:
            if not self.roster.has_column(column):
                logger.warning(f"Column \"{column}\" not found for {record.folder_name}")
                continue
            self._run_step(
                "sheets", "update_field", f"{column} (row {record.row_index})",
                row=record.row_index, column=column, value=value,
            )

    def _remove_from_groups(self, record: EmployeeRecord) -> None:
        for group_email in filter(None, [record.group_email, self.settings.groups.practice]):
            self._run_step(
                "directory", "remove_member", group_email,
                group_email=group_email, user_email=record.work_email,
            )

    def _archive_folders(self, record: EmployeeRecord) -> bool:
        """
        Revoke folder access and move the employee folder to the archive.

        Returns:
            True if the employee folder was moved
        """
        archived = False

        if record.employee_folder_id:
            self._run_step(
                "drive", "remove_permission", record.employee_folder_id,
                file_id=record.employee_folder_id, email=record.work_email,
            )

            former = self.settings.folders.former_employees
            if former:
                archived = self._move_employee_folder(record, former)
        else:
            logger.warning(f"Could not archive HR folder: Employee Folder ID not found for {record.folder_name}")

        if record.employee_medrec_folder_id:
            self._run_step(
                "drive", "remove_permission", record.employee_medrec_folder_id,
                file_id=record.employee_medrec_folder_id, email=record.work_email,
            )

        return archived

    def _move_employee_folder(self, record: EmployeeRecord, destination: str) -> bool:
        result = self.connectors["drive"].move_file(record.employee_folder_id, destination)
        shared_drive = bool(result.data and result.data.get("shared_drive"))

        if shared_drive:
            # Access was already removed; the folder stays where it is
            logger.warning(
                f"Employee folder for {record.folder_name} is in a shared drive and cannot be moved. "
                f"Access has been removed instead."
            )
        elif not result:
            self.errors.append(f"drive.move_file({record.employee_folder_id}): {result.error}")

        self._log_audit_event(
            system="drive",
            action="move_file",
            resource=record.employee_folder_id,
            success=result.success,
            error=None if result else result.error,
            metadata={"destination": destination, "shared_drive": shared_drive},
        )

        if result:
            logger.info(f"Employee folder moved to Former Employees folder for {record.folder_name}")
        return result.success

    def _create_offboarding_email(self, record: EmployeeRecord, end_date: date) -> bool:
        template_id = self.settings.templates.offboarding_email
        if not template_id:
            logger.debug("No offboarding email template configured")
            return False

        step = self._run_step(
            "gmail", "create_draft", f"Offboarding email for {record.full_name}",
            template_id=template_id,
            recipient=record.work_email,
            subject=self.settings.subjects.offboarding.format(
                full_name=record.full_name, first_name=record.first_name),
            values={
                "{{FirstName}}": record.first_name,
                "{{LastName}}": record.last_name,
                "{{EndDate}}": format_date(end_date),
            },
            temp_copy_name=f"Offboarding Email - {record.folder_name}",
        )
        return step.success
