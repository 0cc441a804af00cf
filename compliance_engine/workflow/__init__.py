"""Workflow transition engine."""

from compliance_engine.workflow.engine import (
    InvalidWorkflowDefinitionError,
    WorkflowEngine,
    create_workflow_engine,
)
from compliance_engine.workflow.models import (
    AvailableTransition,
    EvaluationResult,
    StateDefinition,
    StateMetadata,
    Transition,
    TransitionResult,
    WorkflowDefinition,
    WorkflowEngineOptions,
    WorkflowHooks,
    WorkflowInstance,
    create_auto_transition,
    create_transition,
)
from compliance_engine.workflow.validation import DefinitionValidator, ValidationResult

__all__ = [
    "AvailableTransition",
    "DefinitionValidator",
    "EvaluationResult",
    "InvalidWorkflowDefinitionError",
    "StateDefinition",
    "StateMetadata",
    "Transition",
    "TransitionResult",
    "ValidationResult",
    "WorkflowDefinition",
    "WorkflowEngine",
    "WorkflowEngineOptions",
    "WorkflowHooks",
    "WorkflowInstance",
    "create_auto_transition",
    "create_transition",
    "create_workflow_engine",
]
