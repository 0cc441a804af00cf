"""Workflow definitions for business processes."""

from compliance_engine.workflow.definitions.authorization import (
    AUTHORIZATION_WORKFLOW,
    AuthorizationContext,
)

__all__ = ["AUTHORIZATION_WORKFLOW", "AuthorizationContext"]
