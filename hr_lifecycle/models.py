"""
Core data models for the HR Lifecycle Engine.

This module defines the Pydantic models used throughout the system
for personnel records, placeholder values, audit records and workflow results.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowType(str, Enum):
    """HR lifecycle workflows the engine can run."""
    ONBOARDING = "ONBOARDING"
    OFFBOARDING = "OFFBOARDING"
    TRAINING_ATTESTATION = "TRAINING_ATTESTATION"
    BEFORE_FIRST_DAY = "BEFORE_FIRST_DAY"


class AttestationKind(str, Enum):
    """Annual training attestations sent to active employees."""
    OSHA = "OSHA"
    HIPAA = "HIPAA"


class EmployeeRecord(BaseModel):
    """One row of the personnel spreadsheet."""
    row_index: int = Field(..., ge=2, description="1-based sheet row; row 1 holds the headers")
    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    work_email: Optional[str] = Field(None, description="Workspace email address")
    personal_email: Optional[str] = Field(None, description="Personal email used before the first day")
    start_date: Optional[date] = Field(None, description="Employment start date")
    end_date: Optional[date] = Field(None, description="Employment end date")
    job_folder_id: Optional[str] = Field(None, description="Drive folder of the employee's job family")
    job_classification: Optional[str] = Field(None, description="Primary classification, e.g. RN")
    group_email: Optional[str] = Field(None, description="Role group the employee belongs to")
    active: Optional[str] = Field(None, description="Active flag as stored in the sheet")
    employee_folder_id: Optional[str] = Field(None, description="Employee Drive folder created at onboarding")
    employee_medrec_folder_id: Optional[str] = Field(None, description="Employee medical record folder")

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Name must not be empty')
        return v

    @field_validator('work_email', 'personal_email', 'job_folder_id',
                     'job_classification', 'group_email', 'active',
                     'employee_folder_id', 'employee_medrec_folder_id', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Empty sheet cells become None."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def folder_name(self) -> str:
        """Name used for the employee's Drive folders, e.g. ``Doe, Jane``."""
        return f"{self.last_name}, {self.first_name}"

    @property
    def formatted_start_date(self) -> str:
        """Start date as written in documents, e.g. ``January 1, 2024``."""
        if self.start_date is None:
            return ""
        return f"{self.start_date:%B} {self.start_date.day}, {self.start_date.year}"

    @property
    def is_active(self) -> bool:
        return (self.active or "").strip().lower() == "yes"


class LinkValue(BaseModel):
    """Placeholder replacement that renders as a hyperlink."""
    text: str = Field(..., description="Visible link text")
    url: str = Field(..., description="Link target")


PlaceholderValue = Union[str, LinkValue]
PlaceholderValues = Dict[str, PlaceholderValue]


class AuditRecord(BaseModel):
    """Audit record for every action a workflow takes."""
    id: str = Field(..., description="Unique audit record ID")
    timestamp: datetime = Field(default_factory=_utcnow)
    workflow_type: str = Field(..., description="Workflow that performed the action")
    employee: str = Field(..., description="Employee the action concerns")
    system: str = Field(..., description="Target system (drive, sheets, gmail, ...)")
    action: str = Field(..., description="Specific action taken")
    resource: str = Field(..., description="Resource affected")
    success: bool = Field(..., description="Whether the action succeeded")
    error_message: Optional[str] = Field(None, description="Error details if failed")
    workflow_id: Optional[str] = Field(None, description="ID of the workflow that triggered this")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class WorkflowResult(BaseModel):
    """Result of a complete workflow execution."""
    workflow_id: str
    workflow_type: WorkflowType
    employee: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    success: bool = True
    actions_taken: List[Dict[str, Any]] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    summary: Dict[str, Any] = Field(default_factory=dict)


AuditRecords = List[AuditRecord]
