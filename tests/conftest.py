"""
Shared fixtures for the HR Lifecycle Engine tests.
"""

import pytest

from hr_lifecycle.audit import AuditLogger
from hr_lifecycle.connectors import create_connectors
from hr_lifecycle.engine import load_settings

PERSONNEL_HEADERS = [
    "First Name", "Last Name", "Work Email", "Personal Email", "Start Date", "End Date",
    "Job Folder ID", "Primary Classification", "Group Email", "Active",
    "Employee Folder ID", "Employee MedRec Folder ID",
]

ACCESS_LOG_HEADERS = ["#", "Name", "Classification", "Role", "Access", "Start Date", "Trained", "Notes"]


def docs_paragraph(text, start_index=None, **text_style):
    """A Docs API paragraph element holding one text run."""
    run = {"textRun": {"content": text + "\n", "textStyle": text_style}}
    if start_index is not None:
        run["startIndex"] = start_index
        run["endIndex"] = start_index + len(text) + 1
    return {"paragraph": {"elements": [run], "paragraphStyle": {"namedStyleType": "NORMAL_TEXT"}}}


def docs_document(*paragraphs, lists=None):
    """A Docs API document resource from paragraph elements."""
    document = {"documentId": "doc-1", "body": {"content": list(paragraphs)}}
    if lists:
        document["lists"] = lists
    return document


@pytest.fixture
def settings(tmp_path):
    """Default settings with a temporary audit directory and no delays."""
    return load_settings(overrides={
        "audit_dir": str(tmp_path / "audit"),
        "send_delay_seconds": 0,
        "retry": {"max_retries": 1, "initial_delay": 0},
    })


@pytest.fixture
def audit_logger(settings):
    return AuditLogger(settings.audit_dir)


@pytest.fixture
def personnel_rows():
    """Header row plus three employees: a new hire, a leaver and an inactive employee."""
    return [
        PERSONNEL_HEADERS,
        ["Jane", "Doe", "jane.doe@example.com", "jane.doe@gmail.com", "01/15/2024", "",
         "job-folder-rn", "RN", "rn-staff@example.com", "Yes", "", ""],
        ["John", "Smith", "john.smith@example.com", "", "03/01/2023", "06/30/2024",
         "job-folder-ma", "MA", "ma-staff@example.com", "Yes", "emp-folder-john", "medrec-folder-john"],
        ["Ann", "Lee", "ann.lee@example.com", "", "02/01/2022", "",
         "job-folder-rn", "RN", "rn-staff@example.com", "No", "", ""],
    ]


@pytest.fixture
def connectors(settings, personnel_rows):
    """Mock connectors seeded with the personnel sheet, access log, folders and templates."""
    connectors = create_connectors(mock=True)

    sheets = connectors["sheets"]
    sheets.set_values(settings.spreadsheets.personnel_id, settings.spreadsheets.personnel_sheet, personnel_rows)
    sheets.set_values(settings.spreadsheets.access_log_id, settings.spreadsheets.access_log_sheet, [
        ACCESS_LOG_HEADERS,
        ["1", "Roe, Rita", "MA", "Clinical", "Full", "January 1, 2020", "Yes", ""],
    ])

    drive = connectors["drive"]
    drive.add_file("Smith, John", "job-folder-ma", "application/vnd.google-apps.folder", file_id="emp-folder-john")
    drive.add_file("Smith, John", settings.folders.medrec, "application/vnd.google-apps.folder",
                   file_id="medrec-folder-john")
    drive.permissions["emp-folder-john"] = {"john.smith@example.com": "commenter"}
    drive.permissions["medrec-folder-john"] = {"john.smith@example.com": "writer"}

    docs = connectors["docs"]
    templates = settings.templates
    docs.add_document(templates.hepb_vax_form, ["Hepatitis B Vaccination Form for {{Employee Name}}",
                                                "Valid until {{31Years}}"])
    docs.add_document(templates.onboarding_checklist, ["Onboarding checklist for {{First Name}}",
                                                       "Start date: {{Start Date}}"])
    docs.add_document(templates.welcome_email, ["Hi {{FirstName}},", "Welcome to the team!"])
    docs.add_document(templates.nametag_email, ["Please print a name tag for {{FirstName}}."])
    docs.add_document(templates.before_first_day_email, ["Hi {{FirstName}}, see you soon!"])
    docs.add_document(templates.osha_attestation_email, ["{{FirstName}}, please confirm your OSHA training."])
    docs.add_document(templates.hipaa_attestation_email, ["{{FirstName}}, please confirm your HIPAA training."])

    for system in ("drive", "docs"):
        connectors[system].calls.clear()
    return connectors
