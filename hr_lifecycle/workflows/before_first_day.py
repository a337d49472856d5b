"""
Before First Day Workflow for the HR Lifecycle Engine.

Drafts the "getting ready for your first day" email to a new hire's
personal address.
"""

import logging
from typing import Any, Dict

from ..models import WorkflowResult, WorkflowType
from .base_workflow import BaseWorkflow
from .helpers import BEFORE_FIRST_DAY_FIELDS, validate_employee

logger = logging.getLogger(__name__)


class BeforeFirstDayWorkflow(BaseWorkflow):
    """Creates the pre-start email draft for one personnel row."""

    workflow_type = WorkflowType.BEFORE_FIRST_DAY

    def execute(self, row_index: int) -> WorkflowResult:
        """
        Draft the before-first-day email.

        Args:
            row_index: 1-based row of the personnel sheet

        Returns:
            WorkflowResult with execution details
        """
        logger.info(f"Starting before-first-day workflow for row {row_index}")
        return self._run(f"row {row_index}", lambda: self._draft(row_index))

    def _draft(self, row_index: int) -> Dict[str, Any]:
        record = self.roster.get_record(row_index)
        self.employee = record.folder_name

        errors = validate_employee(record, BEFORE_FIRST_DAY_FIELDS)
        if errors:
            raise ValueError("; ".join(errors))

        step = self._run_step(
            "gmail", "create_draft", f"Before first day email for {record.full_name}",
            template_id=self.settings.templates.before_first_day_email,
            recipient=record.personal_email,
            subject=self.settings.subjects.before_first_day.format(
                full_name=record.full_name, first_name=record.first_name),
            values={"{{FirstName}}": record.first_name},
            temp_copy_name=f"Before First Day - {record.first_name}",
        )

        if step.success:
            logger.info(f"\"Before First Day\" email draft created for {record.first_name}")
        return {"employee": record.full_name, "recipient": record.personal_email, "draft": step.result}
