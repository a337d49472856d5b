"""
Workflows Package.

Onboarding, offboarding, training attestation and before-first-day workflows.
"""

from .attestation import TrainingAttestationWorkflow
from .base_workflow import BaseWorkflow, StepFailedError, WorkflowStep
from .before_first_day import BeforeFirstDayWorkflow
from .offboarding import OffboardingWorkflow
from .onboarding import OnboardingWorkflow

__all__ = [
    "BaseWorkflow",
    "BeforeFirstDayWorkflow",
    "OffboardingWorkflow",
    "OnboardingWorkflow",
    "StepFailedError",
    "TrainingAttestationWorkflow",
    "WorkflowStep",
]
