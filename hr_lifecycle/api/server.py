"""
FastAPI Server for the HR Lifecycle Engine.

Provides REST API endpoints for rendering Google Docs to HTML, running the
HR workflows against personnel sheet rows and reading the audit trail.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import BackgroundTasks, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..audit import AuditLogger
from ..connectors import create_connectors
from ..engine import Settings, load_settings
from ..models import AttestationKind, WorkflowResult
from ..rendering import ConverterOptions, document_to_html
from ..workflows import (
    BeforeFirstDayWorkflow,
    OffboardingWorkflow,
    OnboardingWorkflow,
    TrainingAttestationWorkflow,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HR_LIFECYCLE_CONFIG"


# Pydantic models for API requests/responses
class RenderRequest(BaseModel):
    """Google Docs document to render."""
    document: Dict[str, Any] = Field(..., description="Docs API document resource (documents.get response)")
    options: Optional[ConverterOptions] = Field(None, description="Converter options; server settings if omitted")


class RenderResponse(BaseModel):
    html: str


class RowRequest(BaseModel):
    """Workflow request for one personnel sheet row."""
    row: int = Field(..., ge=2, description="1-based row of the personnel sheet")


class WorkflowResponse(BaseModel):
    """Workflow execution response."""
    workflow_id: str
    workflow_type: str
    employee: Optional[str]
    status: str
    started_at: str
    completed_at: Optional[str]
    success: bool
    total_steps: int
    successful_steps: int
    failed_steps: int
    errors: List[str]
    summary: Dict[str, Any] = Field(default_factory=dict)


class AuditResponse(BaseModel):
    """Audit record response."""
    id: str
    timestamp: str
    workflow_type: str
    employee: str
    system: str
    action: str
    resource: str
    success: bool
    error_message: Optional[str]
    workflow_id: Optional[str]


# Global components (initialized on startup)
settings: Optional[Settings] = None
audit_logger: Optional[AuditLogger] = None
connectors: Optional[Dict[str, Any]] = None


def configure(new_settings: Optional[Settings] = None,
              new_connectors: Optional[Dict[str, Any]] = None) -> None:
    """
    Set the settings and connectors the endpoints use.

    Mock connectors are shared between requests so their state persists for
    the life of the process.
    """
    global settings, audit_logger, connectors

    settings = new_settings or load_settings(os.environ.get(CONFIG_ENV_VAR))
    audit_logger = AuditLogger(settings.audit_dir)

    if new_connectors is None:
        config = settings.credentials.model_dump()
        config["retry"] = settings.retry.model_dump()
        new_connectors = create_connectors(config, mock=settings.mock_mode)
    connectors = new_connectors


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Initializing HR Lifecycle Engine API server components")

    if settings is None:
        configure()

    logger.info(f"HR Lifecycle Engine API ready (mock_mode={settings.mock_mode})")

    yield

    logger.info("Shutting down HR Lifecycle Engine API server")


# Create FastAPI app
app = FastAPI(
    title="HR Lifecycle Engine API",
    description="Google Workspace HR automation - document rendering and onboarding/offboarding workflows",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "HR Lifecycle Engine API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "mock_mode": settings.mock_mode if settings else None,
        "components": {
            "settings": settings is not None,
            "audit_logger": audit_logger is not None,
            "connectors": sorted(connectors) if connectors else [],
        }
    }


@app.post("/render", response_model=RenderResponse)
async def render_document(request: RenderRequest):
    """Convert a Google Docs document to email-ready HTML."""
    options = request.options or (settings.converter if settings else None)
    try:
        html = document_to_html(request.document, options, logger)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid document: {e}") from e
    return RenderResponse(html=html)


@app.post("/workflows/onboarding", response_model=WorkflowResponse)
def run_onboarding(request: RowRequest):
    """Onboard the employee in the given personnel row."""
    return _to_response(_workflow(OnboardingWorkflow).execute(request.row))


@app.post("/workflows/offboarding", response_model=WorkflowResponse)
def run_offboarding(request: RowRequest):
    """Offboard the employee in the given personnel row."""
    return _to_response(_workflow(OffboardingWorkflow).execute(request.row))


@app.post("/workflows/before-first-day", response_model=WorkflowResponse)
def run_before_first_day(request: RowRequest):
    """Draft the before-first-day email for the given personnel row."""
    return _to_response(_workflow(BeforeFirstDayWorkflow).execute(request.row))


@app.post("/workflows/attestation/{kind}", status_code=202)
async def run_attestation(kind: str, background_tasks: BackgroundTasks):
    """
    Send a training attestation to all active employees.

    Mailing runs in the background; progress is recorded in the audit trail.
    """
    try:
        attestation = AttestationKind(kind.upper())
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid attestation kind. Must be: osha, hipaa") from e

    workflow = _workflow(TrainingAttestationWorkflow, kind=attestation)
    background_tasks.add_task(execute_attestation, workflow)

    return {
        "status": "accepted",
        "kind": attestation.value,
        "workflow_id": workflow.workflow_id,
        "accepted_at": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/audit", response_model=List[AuditResponse])
async def get_audit_logs(
    workflow_id: Optional[str] = Query(None, description="Filter by workflow run"),
    employee: Optional[str] = Query(None, description="Filter by employee (\"Last, First\")"),
    limit: int = Query(100, ge=1, description="Maximum number of results")
):
    """Get audit records, most recent first."""
    if not audit_logger:
        raise HTTPException(status_code=503, detail="Audit logger not available")

    records = audit_logger.get_events(workflow_id=workflow_id, employee=employee, limit=limit)
    return [
        AuditResponse(
            id=r.id,
            timestamp=r.timestamp.isoformat(),
            workflow_type=r.workflow_type,
            employee=r.employee,
            system=r.system,
            action=r.action,
            resource=r.resource,
            success=r.success,
            error_message=r.error_message,
            workflow_id=r.workflow_id,
        )
        for r in records
    ]


def execute_attestation(workflow: TrainingAttestationWorkflow) -> None:
    """Run an attestation mailing outside the request."""
    result = workflow.execute()
    logger.info(f"{workflow.kind.value} attestation finished: success={result.success}, "
                f"summary={result.summary}")


def _workflow(workflow_class, **kwargs):
    if settings is None:
        raise HTTPException(status_code=503, detail="Server not configured")
    return workflow_class(settings=settings, connectors=connectors, audit_logger=audit_logger, **kwargs)


def _to_response(result: WorkflowResult) -> WorkflowResponse:
    successful = len([a for a in result.actions_taken if a.get("success")])
    return WorkflowResponse(
        workflow_id=result.workflow_id,
        workflow_type=result.workflow_type.value,
        employee=result.employee,
        status="completed" if result.success else "failed",
        started_at=result.started_at.isoformat(),
        completed_at=result.completed_at.isoformat() if result.completed_at else None,
        success=result.success,
        total_steps=len(result.actions_taken),
        successful_steps=successful,
        failed_steps=len(result.actions_taken) - successful,
        errors=result.errors,
        summary=result.summary,
    )


def start_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """Start the FastAPI server."""
    uvicorn.run(
        "hr_lifecycle.api.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


if __name__ == "__main__":
    start_server()
