"""
Workflow Helper Functions for the HR Lifecycle Engine.

Validation of personnel records and summaries of workflow results.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from ..models import EmployeeRecord, WorkflowResult, WorkflowType

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ONBOARDING_FIELDS = ["first_name", "last_name", "work_email", "start_date",
                     "job_folder_id", "job_classification"]
OFFBOARDING_FIELDS = ["first_name", "last_name", "work_email"]
BEFORE_FIRST_DAY_FIELDS = ["first_name", "personal_email"]


def validate_required_fields(data: Union[EmployeeRecord, Dict[str, Any]], required_fields: List[str],
                             context: str = "") -> List[str]:
    """
    Check that required fields are present and non-blank.

    Args:
        data: Record or mapping to check
        required_fields: Field names that must have a value
        context: Prefix for the log message

    Returns:
        Names of the missing fields (empty if valid)
    """
    values = data.model_dump() if isinstance(data, EmployeeRecord) else data
    missing = []
    for field in required_fields:
        value = values.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)

    if missing:
        logger.warning(f"{context or 'Validation'}: missing required fields: {', '.join(missing)}")
    return missing


def is_valid_email(email: Optional[str]) -> bool:
    """Loose syntactic email check."""
    if not email or not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_date(value: Any, allow_past_dates: bool = True) -> Dict[str, Any]:
    """
    Validate a date value.

    Returns:
        ``{"is_valid": bool, "message": str}``
    """
    if value is None or value == "":
        return {"is_valid": False, "message": "Date is required"}

    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        return {"is_valid": False, "message": f"Invalid date: {value}"}

    if not allow_past_dates and value < date.today():
        return {"is_valid": False, "message": "Date cannot be in the past"}

    return {"is_valid": True, "message": "Valid date"}


def validate_employee(record: EmployeeRecord, required_fields: List[str]) -> List[str]:
    """
    Validate a personnel record for a workflow.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    missing = validate_required_fields(record, required_fields, f"Employee data validation for row {record.row_index}")
    if missing:
        errors.append(f"Missing essential information in row {record.row_index}: {', '.join(missing)}")

    if record.work_email and not is_valid_email(record.work_email):
        errors.append(f"Invalid work email format in row {record.row_index}: {record.work_email}")

    if record.personal_email and not is_valid_email(record.personal_email):
        errors.append(f"Invalid personal email format in row {record.row_index}: {record.personal_email}")

    return errors


def determine_workflow_type(name: str) -> WorkflowType:
    """
    Map a command or endpoint name to its workflow.

    Args:
        name: e.g. ``onboard``, ``offboarding``, ``attest`` or ``before-first-day``

    Raises:
        ValueError: For unknown names
    """
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    aliases = {
        'onboard': WorkflowType.ONBOARDING,
        'onboarding': WorkflowType.ONBOARDING,
        'offboard': WorkflowType.OFFBOARDING,
        'offboarding': WorkflowType.OFFBOARDING,
        'attest': WorkflowType.TRAINING_ATTESTATION,
        'attestation': WorkflowType.TRAINING_ATTESTATION,
        'training_attestation': WorkflowType.TRAINING_ATTESTATION,
        'before_first_day': WorkflowType.BEFORE_FIRST_DAY,
    }
    if key not in aliases:
        raise ValueError(f"No workflow available for: {name}")
    return aliases[key]


def create_audit_summary(workflow_result: WorkflowResult) -> Dict[str, Any]:
    """
    Create a summary of workflow execution for auditing.

    Args:
        workflow_result: WorkflowResult object

    Returns:
        Dictionary with audit summary
    """
    successful_actions = len([a for a in workflow_result.actions_taken if a.get('success', False)])
    total_actions = len(workflow_result.actions_taken)

    return {
        'workflow_id': workflow_result.workflow_id,
        'employee': workflow_result.employee,
        'workflow_type': workflow_result.workflow_type.value,
        'started_at': workflow_result.started_at.isoformat() if workflow_result.started_at else None,
        'completed_at': workflow_result.completed_at.isoformat() if workflow_result.completed_at else None,
        'success': workflow_result.success,
        'total_actions': total_actions,
        'successful_actions': successful_actions,
        'failed_actions': total_actions - successful_actions,
        'error_count': len(workflow_result.errors),
        'errors': workflow_result.errors
    }
