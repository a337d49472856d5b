"""
Training Attestation Workflow for the HR Lifecycle Engine.

Sends the annual OSHA or HIPAA training attestation email to every active
employee on the personnel sheet.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Union

from ..models import AttestationKind, WorkflowResult, WorkflowType
from .base_workflow import BaseWorkflow

logger = logging.getLogger(__name__)


class TrainingAttestationWorkflow(BaseWorkflow):
    """
    Bulk attestation mailing.

    Args:
        kind: ``OSHA`` or ``HIPAA``
        sleep: Called with ``send_delay_seconds`` between sends
        **kwargs: Passed to BaseWorkflow
    """

    workflow_type = WorkflowType.TRAINING_ATTESTATION

    def __init__(self, kind: Union[str, AttestationKind] = AttestationKind.OSHA,
                 sleep: Optional[Callable[[float], None]] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.kind = AttestationKind(kind.upper() if isinstance(kind, str) else kind)
        self.sleep = sleep or time.sleep

    @property
    def template_id(self) -> str:
        templates = self.settings.templates
        if self.kind == AttestationKind.HIPAA:
            return templates.hipaa_attestation_email
        return templates.osha_attestation_email

    @property
    def subject(self) -> str:
        subjects = self.settings.subjects
        if self.kind == AttestationKind.HIPAA:
            return subjects.hipaa_attestation
        return subjects.osha_attestation

    def execute(self) -> WorkflowResult:
        """
        Send the attestation email to all active employees.

        Rows marked active but lacking a first name or work email are
        counted as failed; inactive rows are skipped silently.

        Returns:
            WorkflowResult whose summary holds ``sent``, ``failed`` and ``skipped_inactive``
        """
        logger.info(f"Starting {self.kind.value} attestation mailing")
        return self._run(f"{self.kind.value} attestation", self._send_all)

    def _send_all(self) -> Dict[str, Any]:
        self.roster.load()

        columns = self.settings.columns
        for header in (columns.first_name, columns.work_email, columns.active):
            if not self.roster.has_column(header):
                raise ValueError(
                    f"Missing required column \"{header}\" in the "
                    f"\"{self.settings.spreadsheets.personnel_sheet}\" sheet"
                )

        sent = failed = skipped = 0
        total_rows = len(self.roster.rows) - 1

        for row_index in range(2, len(self.roster.rows) + 1):
            row = self.roster.raw_row(row_index)
            first_name = row.get(columns.first_name, "")
            email = row.get(columns.work_email, "")

            if row.get(columns.active, "").lower() != "yes":
                skipped += 1
                continue

            if not first_name or not email:
                logger.warning(
                    f"Skipping {self.kind.value} email for row {row_index}: "
                    f"Missing First Name or Work Email for active employee."
                )
                failed += 1
                self._log_audit_event(
                    system="gmail",
                    action="send_email",
                    resource=f"row {row_index}",
                    success=False,
                    error="missing first name or work email",
                )
                continue

            logger.debug(f"Processing {row_index - 1}/{total_rows}")
            step = self._run_step(
                "gmail", "send_email", email,
                template_id=self.template_id,
                recipient=email,
                subject=self.subject,
                values={"{{FirstName}}": first_name},
                temp_copy_name=f"{self.kind.value} Attestation - {first_name}",
            )
            if step.success:
                sent += 1
            else:
                failed += 1

            self.sleep(self.settings.send_delay_seconds)

        logger.info(
            f"{self.kind.value} Attestation Email Summary: "
            f"Successfully sent: {sent}, Skipped or failed: {failed}"
        )
        return {"kind": self.kind.value, "sent": sent, "failed": failed, "skipped_inactive": skipped}
