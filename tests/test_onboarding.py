"""
Tests for the Onboarding Workflow.

Runs the workflow end to end against the mock connectors seeded in
conftest.py.
"""

from datetime import date
from unittest.mock import patch

import pytest

from hr_lifecycle.connectors import ConnectorResult
from hr_lifecycle.models import WorkflowType
from hr_lifecycle.workflows import OnboardingWorkflow


class TestOnboardingWorkflow:
    """Test cases for OnboardingWorkflow."""

    @pytest.fixture
    def workflow(self, settings, connectors, audit_logger):
        """Create an OnboardingWorkflow instance for testing."""
        return OnboardingWorkflow(settings=settings, connectors=connectors, audit_logger=audit_logger)

    def test_workflow_initialization(self, workflow):
        """Test that workflow initializes correctly."""
        assert workflow.workflow_id
        assert workflow.workflow_type == WorkflowType.ONBOARDING
        assert workflow.started_at is None
        assert workflow.steps == []
        assert workflow.errors == []

    def test_successful_onboarding(self, workflow):
        """Test a complete onboarding of the new hire in row 2."""
        result = workflow.execute(2)

        assert result.success, result.errors
        assert result.workflow_type == WorkflowType.ONBOARDING
        assert result.employee == "Doe, Jane"
        assert result.completed_at is not None
        assert len(result.actions_taken) == 14
        assert all(action["success"] for action in result.actions_taken)
        assert result.summary["employee"] == "Jane Doe"
        assert set(result.summary["folders"]) == {"medrec", "employee", "access"}
        assert set(result.summary["documents"]) == {"hepb_form", "onboarding_checklist"}
        assert result.summary["drafts"] == {"nametag": True, "welcome": True}

    def test_folders_created(self, workflow, connectors, settings):
        result = workflow.execute(2)
        files = connectors["drive"].files
        folders = result.summary["folders"]

        assert files[folders["medrec"]]["name"] == "Doe, Jane"
        assert files[folders["medrec"]]["parents"] == [settings.folders.medrec]
        assert files[folders["employee"]]["parents"] == ["job-folder-rn"]
        assert files[folders["access"]]["name"] == "Doe, Jane Employee Access"
        assert files[folders["access"]]["parents"] == [folders["employee"]]

    def test_existing_folders_are_reused(self, workflow, connectors, settings):
        existing = connectors["drive"].add_file("Doe, Jane", settings.folders.medrec,
                                                "application/vnd.google-apps.folder")

        result = workflow.execute(2)

        assert result.summary["folders"]["medrec"] == existing

    def test_documents_personalized(self, workflow, connectors, settings):
        result = workflow.execute(2)
        drive = connectors["drive"]
        docs = connectors["docs"]

        hepb_id = result.actions_taken[3]["result"]["id"]
        assert drive.files[hepb_id]["name"] == "Doe, Jane - Hepatitis B Vaccination Form"
        assert drive.files[hepb_id]["parents"] == [result.summary["folders"]["medrec"]]

        text = "".join(
            run["textRun"]["content"]
            for element in docs.documents[hepb_id]["body"]["content"]
            for run in element["paragraph"]["elements"]
        )
        assert "Jane Doe" in text
        assert f"Valid until {date.today().year + 31}" in text

        checklist_id = result.actions_taken[4]["result"]["id"]
        assert drive.files[checklist_id]["copied_from"] == settings.templates.onboarding_checklist
        assert drive.files[checklist_id]["parents"] == [result.summary["folders"]["employee"]]

    def test_values_not_in_actions(self, workflow):
        result = workflow.execute(2)
        assert "values" not in result.actions_taken[3]["parameters"]
        assert result.actions_taken[3]["parameters"]["template_id"]

    def test_permissions(self, workflow, connectors):
        result = workflow.execute(2)
        permissions = connectors["drive"].permissions
        hepb_id = result.actions_taken[3]["result"]["id"]

        assert permissions[hepb_id] == {"jane.doe@example.com": "writer"}
        assert permissions[result.summary["folders"]["access"]] == {"jane.doe@example.com": "commenter"}

    def test_sheet_updates(self, workflow, connectors, settings):
        result = workflow.execute(2)
        sheets = connectors["sheets"].sheets
        personnel = sheets[(settings.spreadsheets.personnel_id, settings.spreadsheets.personnel_sheet)]
        access_log = sheets[(settings.spreadsheets.access_log_id, settings.spreadsheets.access_log_sheet)]

        assert personnel[1][10] == result.summary["folders"]["employee"]
        assert personnel[1][11] == result.summary["folders"]["medrec"]
        assert access_log[2][1] == "Doe, Jane"
        assert access_log[2][2] == "RN"
        assert access_log[2][5] == "January 15, 2024"

    def test_missing_folder_columns_are_skipped(self, workflow, connectors, settings, personnel_rows):
        trimmed = [row[:10] for row in personnel_rows]
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, trimmed)

        result = workflow.execute(2)

        assert result.success
        assert not [a for a in result.actions_taken if a["operation"] == "update_field"]

    def test_groups(self, workflow, connectors, settings):
        workflow.execute(2)
        groups = connectors["directory"].groups

        assert groups["rn-staff@example.com"] == ["jane.doe@example.com"]
        assert groups[settings.groups.practice] == ["jane.doe@example.com"]

    def test_email_drafts(self, workflow, connectors, settings):
        workflow.execute(2)
        drafts = {draft["to"]: draft for draft in connectors["gmail"].drafts}

        nametag = drafts[settings.contacts.nametag_vendor]
        assert nametag["subject"] == "Additional Name Tag for Jane Doe"
        assert "name tag for Jane." in nametag["html"]

        welcome = drafts["jane.doe@example.com"]
        assert welcome["subject"] == "Welcome to the Team!"
        assert "Hi Jane," in welcome["html"]
        assert connectors["gmail"].sent == []

    def test_temporary_email_copies_trashed(self, workflow, connectors, settings):
        workflow.execute(2)
        email_templates = {settings.templates.nametag_email, settings.templates.welcome_email}
        copies = [meta for meta in connectors["drive"].files.values() if meta["copied_from"] in email_templates]

        assert len(copies) == 2
        assert all(meta["trashed"] for meta in copies)

    def test_failed_draft_does_not_fail_earlier_steps(self, workflow, connectors):
        connectors["gmail"].fail_recipients.append("jane.doe@example.com")

        result = workflow.execute(2)

        assert not result.success
        assert result.summary["drafts"] == {"nametag": True, "welcome": False}
        assert any("gmail.create_draft" in error for error in result.errors)

    def test_missing_required_fields(self, workflow, connectors, settings, personnel_rows):
        personnel_rows[1][6] = ""
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, personnel_rows)

        result = workflow.execute(2)

        assert not result.success
        assert result.actions_taken == []
        assert "job_folder_id" in result.errors[0]

    def test_invalid_email(self, workflow, connectors, settings, personnel_rows):
        personnel_rows[1][2] = "not-an-email"
        connectors["sheets"].set_values(settings.spreadsheets.personnel_id,
                                        settings.spreadsheets.personnel_sheet, personnel_rows)

        result = workflow.execute(2)

        assert not result.success
        assert "Invalid work email format" in result.errors[0]

    def test_header_row_rejected(self, workflow):
        result = workflow.execute(1)

        assert not result.success
        assert result.employee == "row 1"
        assert "header row" in result.errors[0]

    def test_folder_failure_stops_workflow(self, workflow, connectors):
        failure = ConnectorResult(False, "Insufficient permissions", error="forbidden")
        with patch.object(connectors["drive"], "find_or_create_folder", return_value=failure):
            result = workflow.execute(2)

        assert not result.success
        assert len(result.actions_taken) == 1
        assert connectors["gmail"].drafts == []
        assert connectors["directory"].groups == {}

    def test_audit_trail(self, workflow, audit_logger):
        result = workflow.execute(2)
        events = audit_logger.get_events(workflow_id=result.workflow_id)

        assert len(events) == len(result.actions_taken)
        assert all(event.employee == "Doe, Jane" for event in events)
        assert {event.system for event in events} == {"drive", "docs", "sheets", "directory", "gmail"}

    def test_execution_summary(self, workflow):
        workflow.execute(2)
        summary = workflow.get_execution_summary()

        assert summary["workflow_type"] == "ONBOARDING"
        assert summary["total_steps"] == 14
        assert summary["failed_steps"] == 0
