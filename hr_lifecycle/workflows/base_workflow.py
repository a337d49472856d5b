"""
Base Workflow Classes for the HR Lifecycle Engine.

This module provides the foundation for the onboarding, offboarding,
training attestation and before-first-day workflows: step execution against
the Google Workspace connectors, audit logging and result assembly.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..audit.audit_logger import AuditLogger
from ..connectors import ConnectorResult, create_connectors
from ..engine.mailer import EmailComposer
from ..engine.personalizer import DocumentPersonalizer
from ..engine.roster import PersonnelRoster
from ..engine.settings import Settings, load_settings
from ..models import AuditRecord, WorkflowResult, WorkflowType

logger = logging.getLogger(__name__)


class StepFailedError(Exception):
    """Raised when a step the rest of the workflow depends on fails."""

    def __init__(self, step: "WorkflowStep"):
        super().__init__(f"{step.system}.{step.operation}({step.resource}) failed: {step.error}")
        self.step = step


class WorkflowStep:
    """Represents a single step in a workflow execution."""

    def __init__(
        self,
        system: str,
        operation: str,
        resource: str = "",
        parameters: Optional[Dict[str, Any]] = None,
    ):
        self.system = system
        self.operation = operation
        self.resource = resource
        self.parameters = parameters or {}
        self.executed_at: Optional[datetime] = None
        self.success: bool = False
        self.error: Optional[str] = None
        self.result: Optional[Any] = None

    def mark_success(self, result: Any = None):
        """Mark step as successful."""
        self.executed_at = datetime.now(timezone.utc)
        self.success = True
        self.result = result

    def mark_failure(self, error: str):
        """Mark step as failed."""
        self.executed_at = datetime.now(timezone.utc)
        self.success = False
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert step to dictionary for serialization."""
        return {
            "system": self.system,
            "operation": self.operation,
            "resource": self.resource,
            "parameters": {k: v for k, v in self.parameters.items() if k != "values"},
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
            "success": self.success,
            "error": self.error,
            "result": self.result,
        }


class BaseWorkflow(ABC):
    """
    Abstract base class for HR lifecycle workflows.

    Args:
        settings: Engine settings; loaded from the packaged defaults if omitted
        connectors: Prebuilt connectors keyed by system; created from settings if omitted
        audit_logger: Audit sink; one writing to ``settings.audit_dir`` if omitted
    """

    workflow_type: WorkflowType

    def __init__(
        self,
        settings: Optional[Settings] = None,
        connectors: Optional[Dict[str, Any]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.settings = settings or load_settings()
        self.workflow_id = str(uuid.uuid4())
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None
        self.steps: List[WorkflowStep] = []
        self.errors: List[str] = []
        self.employee: Optional[str] = None

        self.audit_logger = audit_logger or AuditLogger(self.settings.audit_dir)
        self.connectors = connectors or self._initialize_connectors()

        self.roster = PersonnelRoster(self.connectors["sheets"], self.settings)
        self.personalizer = DocumentPersonalizer(self.connectors["drive"], self.connectors["docs"])
        self.mailer = EmailComposer(
            self.connectors["drive"],
            self.connectors["docs"],
            self.connectors["gmail"],
            self.settings.converter,
        )

        logger.info(f"Initialized {self.__class__.__name__} workflow {self.workflow_id}")

    def _initialize_connectors(self) -> Dict[str, Any]:
        """Initialize all system connectors."""
        config = self.settings.credentials.model_dump()
        config["retry"] = self.settings.retry.model_dump()
        return create_connectors(config, mock=self.settings.mock_mode)

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> WorkflowResult:
        """Run the workflow and return its result."""

    def _run(self, subject: Optional[str], body) -> WorkflowResult:
        """
        Run ``body`` with timing and error capture.

        Any exception raised by ``body`` ends the workflow; steps taken so far
        stay in the result.
        """
        self.started_at = datetime.now(timezone.utc)
        self.employee = subject
        summary: Dict[str, Any] = {}

        try:
            summary = body() or {}
        except StepFailedError as e:
            logger.error(f"{self.workflow_type.value} aborted for {self.employee}: {e}")
            self._record_error(str(e))
        except ValueError as e:
            logger.error(f"{self.workflow_type.value} failed for {self.employee}: {e}")
            self._record_error(str(e))

        self.completed_at = datetime.now(timezone.utc)
        result = WorkflowResult(
            workflow_id=self.workflow_id,
            workflow_type=self.workflow_type,
            employee=self.employee,
            started_at=self.started_at,
            completed_at=self.completed_at,
            success=len(self.errors) == 0,
            actions_taken=[step.to_dict() for step in self.steps],
            errors=self.errors.copy(),
            summary=summary,
        )

        logger.info(
            f"Completed {self.workflow_type.value} for {self.employee}: "
            f"{len(self.steps)} steps, {len(self.errors)} errors"
        )
        return result

    def _record_error(self, message: str) -> None:
        if message not in self.errors:
            self.errors.append(message)

    def _run_step(
        self,
        system: str,
        operation: str,
        resource: str = "",
        fatal: bool = False,
        **parameters: Any,
    ) -> WorkflowStep:
        """
        Create, execute and audit a step.

        Args:
            system: Connector the step targets
            operation: Operation name from the method map
            resource: Human readable resource for logs and audit
            fatal: Raise StepFailedError if the step fails
            **parameters: Operation parameters

        Returns:
            The executed step
        """
        step = WorkflowStep(system=system, operation=operation, resource=resource, parameters=parameters)
        self.steps.append(step)
        success = self._execute_step(step)

        self._log_audit_event(
            system=system,
            action=operation,
            resource=resource,
            success=success,
            error=step.error if not success else None,
        )

        if not success and fatal:
            raise StepFailedError(step)
        return step

    def _execute_step(self, step: WorkflowStep) -> bool:
        """
        Execute a single workflow step.

        Args:
            step: The step to execute

        Returns:
            True if successful, False otherwise
        """
        try:
            connector = self.connectors.get(step.system)
            if not connector:
                error_msg = f"No connector available for system: {step.system}"
                step.mark_failure(error_msg)
                self.errors.append(error_msg)
                return False

            result = self._call_connector_method(connector, step.operation, step.parameters)

            if result.success:
                step.mark_success(result.data)
                logger.info(f"Step completed: {step.system}.{step.operation}({step.resource})")
                return True

            step.mark_failure(result.error or result.message or "Unknown error")
            self.errors.append(f"{step.system}.{step.operation}({step.resource}): {step.error}")
            return False

        except (KeyError, TypeError, ValueError) as e:
            error_msg = f"Exception during {step.system}.{step.operation}: {e}"
            step.mark_failure(error_msg)
            self.errors.append(error_msg)
            logger.error(error_msg)
            return False

    def _call_connector_method(
        self, connector: Any, operation: str, params: Dict[str, Any]
    ) -> ConnectorResult:
        """
        Call the appropriate connector method based on operation name.

        Personalization, email and roster operations go through the engine
        helpers that wrap the connectors.

        Args:
            connector: The connector instance
            operation: Operation name (create_folder, add_member, etc.)
            params: Parameters for the operation

        Returns:
            ConnectorResult from the operation
        """
        method_map = {
            "create_folder": lambda c, p: c.find_or_create_folder(p["name"], p["parent_id"]),
            "add_permission": lambda c, p: c.add_permission(p["file_id"], p["email"], p["role"]),
            "remove_permission": lambda c, p: c.remove_permission(p["file_id"], p["email"]),
            "move_file": lambda c, p: c.move_file(p["file_id"], p["new_parent_id"]),
            "add_member": lambda c, p: c.add_member(p["group_email"], p["user_email"]),
            "remove_member": lambda c, p: c.remove_member(p["group_email"], p["user_email"]),
            "copy_and_personalize": lambda c, p: self.personalizer.copy_and_personalize(
                p["template_id"], p["folder_id"], p["name"], p["values"]),
            "create_draft": lambda c, p: self.mailer.create_email_from_template(
                p["template_id"], p["recipient"], p["subject"], p["values"],
                is_draft=True, temp_copy_name=p.get("temp_copy_name", "Temp Email Copy")),
            "send_email": lambda c, p: self.mailer.create_email_from_template(
                p["template_id"], p["recipient"], p["subject"], p["values"],
                is_draft=False, temp_copy_name=p.get("temp_copy_name", "Temp Email Copy")),
            "update_field": lambda c, p: self._update_field(p["row"], p["column"], p["value"]),
            "append_access_log": lambda c, p: self._append_access_log(
                p["name"], p["start_date"], p["classification"]),
        }

        if operation not in method_map:
            return ConnectorResult(False, f"Unknown operation: {operation}", error="unknown_operation")

        return method_map[operation](connector, params)

    def _update_field(self, row: int, column: str, value: Any) -> ConnectorResult:
        if self.roster.update_field(row, column, value):
            return ConnectorResult(True, f"Updated {column} in row {row}")
        return ConnectorResult(False, f"Could not update {column} in row {row}", error="update_failed")

    def _append_access_log(self, name: str, start_date: str, classification: str) -> ConnectorResult:
        if self.roster.append_access_log(name, start_date, classification):
            return ConnectorResult(True, f"Added {name} to the access log")
        return ConnectorResult(False, f"Could not add {name} to the access log", error="access_log_failed")

    def _log_audit_event(
        self,
        system: str,
        action: str,
        resource: str,
        success: bool,
        error: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log an audit event for the current employee.

        Returns:
            Audit record ID
        """
        audit_record = AuditRecord(
            id=str(uuid.uuid4()),
            workflow_type=self.workflow_type.value,
            employee=self.employee or "",
            system=system,
            action=action,
            resource=resource,
            success=success,
            error_message=error,
            workflow_id=self.workflow_id,
            metadata=metadata or {},
        )

        self.audit_logger.log_event(audit_record)
        return audit_record.id

    def get_execution_summary(self) -> Dict[str, Any]:
        """Get summary of workflow execution."""
        successful_steps = len([s for s in self.steps if s.success])
        total_steps = len(self.steps)

        return {
            "workflow_id": self.workflow_id,
            "workflow_type": self.workflow_type.value,
            "employee": self.employee,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "total_steps": total_steps,
            "successful_steps": successful_steps,
            "failed_steps": total_steps - successful_steps,
            "errors": self.errors.copy(),
        }
