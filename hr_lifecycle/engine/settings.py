"""
Settings loader for the HR Lifecycle Engine.

Reads the packaged ``settings.yaml`` defaults, merges an optional user file
(YAML or JSON) over them and validates the result.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field

from ..rendering import ConverterOptions

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path(__file__).parent / "settings.yaml"


class CredentialSettings(BaseModel):
    """Service account used to build Google API clients."""
    service_account_file: Optional[str] = Field(None, description="Path to the service account JSON key")
    delegated_user: Optional[str] = Field(None, description="Workspace user to impersonate")


class SpreadsheetSettings(BaseModel):
    personnel_id: str
    personnel_sheet: str = "Personnel"
    access_log_id: str
    access_log_sheet: str = "Employees"


class FolderSettings(BaseModel):
    medrec: str = Field(..., description="Parent folder of all medical record folders")
    former_employees: Optional[str] = Field(None, description="Archive folder for offboarded employees")


class TemplateSettings(BaseModel):
    """Google Doc template IDs."""
    hepb_vax_form: str
    onboarding_checklist: str
    offboarding_checklist: Optional[str] = None
    welcome_email: str
    nametag_email: str
    offboarding_email: Optional[str] = None
    before_first_day_email: str
    osha_attestation_email: str
    hipaa_attestation_email: str


class GroupSettings(BaseModel):
    practice: str = Field(..., description="Practice-wide group every employee joins")


class ContactSettings(BaseModel):
    nametag_vendor: str


class ColumnSettings(BaseModel):
    """Header names of the personnel sheet (case-sensitive)."""
    first_name: str = "First Name"
    last_name: str = "Last Name"
    work_email: str = "Work Email"
    personal_email: str = "Personal Email"
    start_date: str = "Start Date"
    end_date: str = "End Date"
    job_folder_id: str = "Job Folder ID"
    job_classification: str = "Primary Classification"
    group_email: str = "Group Email"
    active: str = "Active"
    employee_folder_id: str = "Employee Folder ID"
    employee_medrec_folder_id: str = "Employee MedRec Folder ID"


class SubjectSettings(BaseModel):
    """Email subject lines; ``{full_name}`` and ``{first_name}`` are substituted."""
    welcome: str = "Welcome to the Team!"
    nametag: str = "Additional Name Tag for {full_name}"
    before_first_day: str = "Getting Ready for Your First Day!"
    offboarding: str = "Offboarding Information"
    osha_attestation: str = "OSHA Training Attestation Required"
    hipaa_attestation: str = "HIPAA Training Attestation Required"


class RetrySettings(BaseModel):
    max_retries: int = Field(3, ge=1)
    initial_delay: float = Field(1.0, ge=0)


class Settings(BaseModel):
    """Complete engine configuration."""
    mock_mode: bool = True
    audit_dir: str = "audit"
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    spreadsheets: SpreadsheetSettings
    folders: FolderSettings
    templates: TemplateSettings
    groups: GroupSettings
    contacts: ContactSettings
    columns: ColumnSettings = Field(default_factory=ColumnSettings)
    subjects: SubjectSettings = Field(default_factory=SubjectSettings)
    employee_access_folder_suffix: str = "Employee Access"
    send_delay_seconds: float = Field(0.5, ge=0)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    converter: ConverterOptions = Field(default_factory=ConverterOptions)


def load_settings(path: Optional[Union[str, Path]] = None,
                  overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Load engine settings.

    Args:
        path: Optional YAML or JSON file merged over the packaged defaults
        overrides: Optional values merged last (e.g. from CLI flags)

    Returns:
        Validated Settings

    Raises:
        FileNotFoundError: If ``path`` does not exist
        pydantic.ValidationError: If the merged settings are invalid
    """
    data = _read_file(DEFAULT_SETTINGS_FILE)

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        data = _deep_merge(data, _read_file(path))
        logger.info(f"Loaded settings from {path}")

    if overrides:
        data = _deep_merge(data, overrides)

    return Settings(**data)


def _read_file(path: Path) -> Dict[str, Any]:
    with open(path, encoding='utf-8') as f:
        if path.suffix.lower() == ".json":
            content = json.load(f)
        else:
            content = yaml.safe_load(f)
    return content or {}


def _deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
