"""
Authorization workflow definition.

State machine for EU Space Act authorization applications:

    not_started -> in_progress -> ready_for_submission -> submitted
        -> under_review -> approved | rejected

Auto-transitions:
- not_started -> in_progress: first document uploaded or started
- in_progress -> ready_for_submission: all mandatory documents ready, no blockers
- ready_for_submission -> in_progress: a mandatory document became incomplete
"""

import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from compliance_engine.workflow.models import (
    StateDefinition,
    StateMetadata,
    WorkflowDefinition,
    WorkflowHooks,
    create_auto_transition,
    create_transition,
)

logger = logging.getLogger(__name__)


class AuthorizationContext(BaseModel):
    """Per-application context consumed by the authorization workflow."""

    workflow_id: str
    user_id: str
    operator_type: str = "spacecraft_operator"
    primary_nca: str = ""

    # Document status
    total_documents: int = Field(default=0, ge=0)
    ready_documents: int = Field(default=0, ge=0)
    mandatory_documents: int = Field(default=0, ge=0)
    mandatory_ready: int = Field(default=0, ge=0)

    # Completeness
    completeness_percentage: int = Field(default=0, ge=0, le=100)
    all_mandatory_complete: bool = False
    has_blockers: bool = False

    # Timeline
    target_submission: Optional[datetime] = None
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    pathway: str = "standard"
    nca_requirements: list[str] = Field(default_factory=list)


async def _log_transition(ctx: AuthorizationContext, from_state: str, to_state: str) -> None:
    logger.debug(f"[Authorization {ctx.workflow_id}] Transition: {from_state} -> {to_state}")


async def _log_error(error: BaseException, ctx: AuthorizationContext) -> None:
    logger.error(f"[Authorization {ctx.workflow_id}] Error: {error}")


def _submission_allowed(ctx: AuthorizationContext) -> bool:
    return ctx.all_mandatory_complete and not ctx.has_blockers


def _withdraw():
    return create_transition("withdrawn", description="Withdraw the application")


def _restart():
    return create_transition("not_started", description="Start a new application")


AUTHORIZATION_WORKFLOW = WorkflowDefinition(
    id="authorization",
    name="EU Space Act Authorization",
    description="Multi-authority authorization workflow for EU space operations",
    version="1.0.0",
    initial_state="not_started",
    states={
        "not_started": StateDefinition(
            name="Not Started",
            description="Authorization workflow created but no documents uploaded",
            metadata=StateMetadata(color="#6B7280", icon="Circle", phase="pre_authorization"),
            transitions={
                "start": create_auto_transition(
                    "in_progress",
                    lambda ctx: ctx.total_documents > 0 and ctx.ready_documents > 0,
                    description="First document uploaded or started",
                ),
                "manual_start": create_transition(
                    "in_progress", description="Manually start the workflow"
                ),
            },
        ),
        "in_progress": StateDefinition(
            name="In Progress",
            description="Documents being prepared, not all mandatory documents complete",
            metadata=StateMetadata(color="#3B82F6", icon="Clock", phase="pre_authorization"),
            transitions={
                "complete": create_auto_transition(
                    "ready_for_submission",
                    _submission_allowed,
                    description="All mandatory documents ready and no blockers",
                ),
                "withdraw": _withdraw(),
            },
        ),
        "ready_for_submission": StateDefinition(
            name="Ready for Submission",
            description="All mandatory documents ready, can submit to NCA",
            metadata=StateMetadata(color="#22C55E", icon="CheckCircle", phase="pre_authorization"),
            transitions={
                "incomplete": create_auto_transition(
                    "in_progress",
                    lambda ctx: not _submission_allowed(ctx),
                    description="Mandatory document became incomplete or new blocker detected",
                ),
                "submit": create_transition(
                    "submitted",
                    description="Submit application to NCA",
                    guard=_submission_allowed,
                ),
                "withdraw": _withdraw(),
            },
        ),
        "submitted": StateDefinition(
            name="Submitted",
            description="Application submitted to National Competent Authority",
            metadata=StateMetadata(color="#8B5CF6", icon="Send", phase="under_review"),
            transitions={
                "review": create_transition(
                    "under_review", description="NCA begins formal review"
                ),
                "request_info": create_transition(
                    "in_progress", description="NCA requests additional information"
                ),
                "withdraw": _withdraw(),
            },
        ),
        "under_review": StateDefinition(
            name="Under Review",
            description="NCA actively reviewing the application",
            metadata=StateMetadata(color="#F59E0B", icon="Eye", phase="under_review"),
            transitions={
                "approve": create_transition(
                    "approved", description="NCA approves the authorization"
                ),
                "reject": create_transition(
                    "rejected", description="NCA rejects the authorization"
                ),
                "request_info": create_transition(
                    "in_progress", description="NCA requests additional information"
                ),
            },
        ),
        "approved": StateDefinition(
            name="Approved",
            description="Authorization granted by NCA",
            metadata=StateMetadata(
                color="#22C55E", icon="CheckCircle2", phase="authorized", is_terminal=True
            ),
        ),
        # Closed for the applicant, but reopenable.
        "rejected": StateDefinition(
            name="Rejected",
            description="Authorization denied by NCA",
            metadata=StateMetadata(color="#EF4444", icon="XCircle", phase="closed"),
            transitions={
                "appeal": create_transition(
                    "under_review", description="Appeal the rejection decision"
                ),
                "resubmit": _restart(),
            },
        ),
        "withdrawn": StateDefinition(
            name="Withdrawn",
            description="Application withdrawn by operator",
            metadata=StateMetadata(color="#6B7280", icon="MinusCircle", phase="closed"),
            transitions={"restart": _restart()},
        ),
    },
    hooks=WorkflowHooks(
        before_transition=_log_transition,
        on_error=_log_error,
    ),
)

# Authorization workflow state order for progress indicators
AUTHORIZATION_STATE_ORDER: list[str] = [
    "not_started",
    "in_progress",
    "ready_for_submission",
    "submitted",
    "under_review",
    "approved",
]

CLOSED_PHASES = {"authorized", "closed"}


def get_authorization_status_info(status: str) -> dict[str, str]:
    """Get display label, color, icon and phase for a state."""
    state = AUTHORIZATION_WORKFLOW.states.get(status)
    if state is None:
        return {"label": status, "color": "#6B7280", "icon": "Circle", "phase": "unknown"}

    return {
        "label": state.name or status,
        "color": state.metadata.color or "#6B7280",
        "icon": state.metadata.icon or "Circle",
        "phase": state.metadata.phase or "unknown",
    }


def get_authorization_progress(current_state: str) -> int:
    """Get progress percentage along the happy path (0 for off-path states)."""
    if current_state not in AUTHORIZATION_STATE_ORDER:
        return 0
    index = AUTHORIZATION_STATE_ORDER.index(current_state)
    return int(index / (len(AUTHORIZATION_STATE_ORDER) - 1) * 100 + 0.5)


def is_authorization_closed(status: str) -> bool:
    """Check if an application is closed from the applicant's point of view."""
    state = AUTHORIZATION_WORKFLOW.states.get(status)
    return state is not None and state.metadata.phase in CLOSED_PHASES
