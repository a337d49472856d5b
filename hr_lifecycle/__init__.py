"""
HR Lifecycle Engine

Google Workspace HR automation: onboarding, offboarding and training
attestation workflows driven by a personnel spreadsheet, with email bodies
authored as Google Docs and rendered to email-safe HTML.
"""

__version__ = "1.0.0"
__author__ = "HR Lifecycle Engine Team"
__email__ = "team@example.com"

from .rendering import convert_body_to_html, document_to_html
from .workflows import (
    BeforeFirstDayWorkflow,
    OffboardingWorkflow,
    OnboardingWorkflow,
    TrainingAttestationWorkflow,
)

__all__ = [
    "BeforeFirstDayWorkflow",
    "OffboardingWorkflow",
    "OnboardingWorkflow",
    "TrainingAttestationWorkflow",
    "convert_body_to_html",
    "document_to_html",
]
