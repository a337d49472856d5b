"""
Onboarding Workflow for the HR Lifecycle Engine.

Handles a new hire: creates the employee's Drive folders, personalizes the
Hepatitis B vaccination form and onboarding checklist, shares them, records
the folder IDs and access log entry, adds the employee to their groups and
drafts the name-tag and welcome emails.
"""

import logging
from datetime import date
from typing import Any, Dict

from ..models import EmployeeRecord, LinkValue, WorkflowResult, WorkflowType
from .base_workflow import BaseWorkflow
from .helpers import ONBOARDING_FIELDS, validate_employee

logger = logging.getLogger(__name__)

HEPB_FORM_LINK_TEXT = "Hepatitis B Vaccination Form"
MEDREC_FOLDER_LINK_TEXT = "Medical Record Folder"


class OnboardingWorkflow(BaseWorkflow):
    """Workflow for a new employee, driven by a row of the personnel sheet."""

    workflow_type = WorkflowType.ONBOARDING

    def execute(self, row_index: int) -> WorkflowResult:
        """
        Execute the onboarding workflow for one personnel row.

        Folder creation and document generation are required; once they fail
        the workflow stops. Later steps are attempted independently.

        Args:
            row_index: 1-based row of the personnel sheet

        Returns:
            WorkflowResult with execution details
        """
        logger.info(f"Starting onboarding workflow for row {row_index}")
        return self._run(f"row {row_index}", lambda: self._onboard(row_index))

    def _onboard(self, row_index: int) -> Dict[str, Any]:
        record = self.roster.get_record(row_index)
        self.employee = record.folder_name

        errors = validate_employee(record, ONBOARDING_FIELDS)
        if errors:
            raise ValueError("; ".join(errors))

        folders = self._create_folders(record)
        documents = self._generate_documents(record, folders)
        self._set_permissions(record, folders, documents)
        self._update_records(record, folders)
        self._add_to_groups(record)
        drafts = self._create_email_drafts(record, documents)

        return {
            "employee": record.full_name,
            "folders": {name: info["id"] for name, info in folders.items()},
            "documents": {name: info["url"] for name, info in documents.items()},
            "drafts": drafts,
        }

    def _create_folders(self, record: EmployeeRecord) -> Dict[str, Dict[str, Any]]:
        """Create (or reuse) the medical record, employee and access folders."""
        medrec = self._run_step(
            "drive", "create_folder", f"{record.folder_name} (medical record)", fatal=True,
            name=record.folder_name, parent_id=self.settings.folders.medrec,
        )
        employee = self._run_step(
            "drive", "create_folder", record.folder_name, fatal=True,
            name=record.folder_name, parent_id=record.job_folder_id,
        )

        access_name = f"{record.folder_name} {self.settings.employee_access_folder_suffix}"
        access = self._run_step(
            "drive", "create_folder", access_name, fatal=True,
            name=access_name, parent_id=employee.result["id"],
        )

        return {"medrec": medrec.result, "employee": employee.result, "access": access.result}

    def _generate_documents(self, record: EmployeeRecord,
                            folders: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
        """Personalize the Hep B form and the onboarding checklist."""
        templates = self.settings.templates

        hepb_name = f"{record.folder_name} - Hepatitis B Vaccination Form"
        hepb = self._run_step(
            "docs", "copy_and_personalize", hepb_name, fatal=True,
            template_id=templates.hepb_vax_form,
            folder_id=folders["medrec"]["id"],
            name=hepb_name,
            values={
                "{{Employee Name}}": record.full_name,
                "{{First Name}}": record.first_name,
                "{{Last Name}}": record.last_name,
                "{{Date}}": record.formatted_start_date,
                "{{31Years}}": str(date.today().year + 31),
            },
        )

        checklist_name = f"{record.folder_name} - Onboarding Form"
        checklist = self._run_step(
            "docs", "copy_and_personalize", checklist_name, fatal=True,
            template_id=templates.onboarding_checklist,
            folder_id=folders["employee"]["id"],
            name=checklist_name,
            values={
                "{{Employee Name}}": record.full_name,
                "{{First Name}}": record.first_name,
                "{{Last Name}}": record.last_name,
                "{{Start Date}}": record.formatted_start_date,
                "{{hepBDoc}}": LinkValue(text=HEPB_FORM_LINK_TEXT, url=hepb.result["url"]),
                "{{medRecFolder}}": LinkValue(text=MEDREC_FOLDER_LINK_TEXT, url=folders["medrec"]["url"]),
            },
        )

        return {"hepb_form": hepb.result, "onboarding_checklist": checklist.result}

    def _set_permissions(self, record: EmployeeRecord, folders: Dict[str, Dict[str, Any]],
                         documents: Dict[str, Dict[str, Any]]) -> None:
        # The employee signs the Hep B form and comments in their access folder
        self._run_step(
            "drive", "add_permission", documents["hepb_form"]["id"],
            file_id=documents["hepb_form"]["id"], email=record.work_email, role="writer",
        )
        self._run_step(
            "drive", "add_permission", folders["access"]["id"],
            file_id=folders["access"]["id"], email=record.work_email, role="commenter",
        )

    def _update_records(self, record: EmployeeRecord, folders: Dict[str, Dict[str, Any]]) -> None:
        """Write folder IDs back to the personnel sheet and update the access log."""
        columns = self.settings.columns
        for column, folder in ((columns.employee_folder_id, folders["employee"]),
                               (columns.employee_medrec_folder_id, folders["medrec"])):
            if not self.roster.has_column(column):
                logger.warning(f"Column \"{column}\" not found. Cannot write folder ID for {record.folder_name}.")
                continue
            self._run_step(
                "sheets", "update_field", f"{column} (row {record.row_index})",
                row=record.row_index, column=column, value=folder["id"],
            )

        self._run_step(
            "sheets", "append_access_log", record.folder_name,
            name=record.folder_name,
            start_date=record.formatted_start_date,
            classification=record.job_classification or "",
        )

    def _add_to_groups(self, record: EmployeeRecord) -> None:
        groups = [record.group_email, self.settings.groups.practice]
        if not record.group_email:
            logger.warning(f"No role group for {record.folder_name}; adding to the practice group only")

        for group_email in filter(None, groups):
            self._run_step(
                "directory", "add_member", group_email,
                group_email=group_email, user_email=record.work_email,
            )

    def _create_email_drafts(self, record: EmployeeRecord,
                             documents: Dict[str, Dict[str, Any]]) -> Dict[str, bool]:
        templates = self.settings.templates
        subjects = self.settings.subjects

        nametag = self._run_step(
            "gmail", "create_draft", f"Name tag request for {record.full_name}",
            template_id=templates.nametag_email,
            recipient=self.settings.contacts.nametag_vendor,
            subject=subjects.nametag.format(full_name=record.full_name, first_name=record.first_name),
            values={"{{FirstName}}": record.first_name},
            temp_copy_name=f"Name Tag Request - {record.folder_name}",
        )
        welcome = self._run_step(
            "gmail", "create_draft", f"Welcome email for {record.full_name}",
            template_id=templates.welcome_email,
            recipient=record.work_email,
            subject=subjects.welcome.format(full_name=record.full_name, first_name=record.first_name),
            values={
                "{{FirstName}}": record.first_name,
                "{{hepBDoc}}": LinkValue(text=HEPB_FORM_LINK_TEXT, url=documents["hepb_form"]["url"]),
            },
            temp_copy_name=f"Welcome Email - {record.folder_name}",
        )

        if not (nametag.success and welcome.success):
            logger.warning(f"Some email notifications failed for {record.folder_name}")
        return {"nametag": nametag.success, "welcome": welcome.success}
