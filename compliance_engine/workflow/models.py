"""
Domain models for the workflow transition engine.

Definitions are plain data: states and transitions keyed by name, with optional
callables for guards, auto-conditions and side-effect hooks. Guards and hooks may
be regular functions or return an awaitable; the engine awaits awaitables.
Auto-conditions must be synchronous, since get_available_transitions is.
"""

import inspect
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from compliance_engine.config import get_settings
from compliance_engine.config.settings import Settings

WorkflowState = str

# guard(context) -> bool | Awaitable[bool]
TransitionGuard = Callable[[Any], Any]
# auto_condition(context) -> bool
TransitionCondition = Callable[[Any], bool]
# action(context) -> None | Awaitable[None]
TransitionAction = Callable[[Any], Any]
# before/after hook(context, from_state, to_state)
TransitionHook = Callable[[Any, WorkflowState, WorkflowState], Any]
# on_error(error, context)
ErrorHook = Callable[[BaseException, Any], Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transition(BaseModel):
    """A named edge from one state to another."""

    to: WorkflowState = Field(..., min_length=1, description="Target state")
    description: Optional[str] = Field(default=None)
    guard: Optional[TransitionGuard] = Field(
        default=None, description="Gate for manually triggered transitions"
    )
    auto: bool = Field(default=False, description="Eligible for the auto cascade")
    auto_condition: Optional[TransitionCondition] = Field(
        default=None, description="Gate for automatic transitions"
    )
    on_transition: Optional[TransitionAction] = Field(default=None)
    required_permissions: list[str] = Field(default_factory=list)

    @field_validator("auto_condition")
    @classmethod
    def validate_auto_condition(
        cls, v: Optional[TransitionCondition]
    ) -> Optional[TransitionCondition]:
        """Reject coroutine functions; auto-conditions are evaluated synchronously."""
        if v is not None and inspect.iscoroutinefunction(v):
            raise ValueError("auto_condition must be a synchronous callable")
        return v


class StateMetadata(BaseModel):
    """Display metadata for a state. Never consulted for terminality."""

    model_config = ConfigDict(extra="allow")

    label: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    phase: Optional[str] = None
    is_terminal: bool = False


class StateDefinition(BaseModel):
    """A state and its outgoing transitions, in declaration order."""

    name: Optional[str] = None
    description: Optional[str] = None
    on_enter: Optional[TransitionAction] = None
    on_exit: Optional[TransitionAction] = None
    transitions: dict[str, Transition] = Field(default_factory=dict)
    metadata: StateMetadata = Field(default_factory=StateMetadata)


class WorkflowHooks(BaseModel):
    """Definition-wide observers invoked around every transition."""

    before_transition: Optional[TransitionHook] = None
    after_transition: Optional[TransitionHook] = None
    on_error: Optional[ErrorHook] = None


class WorkflowDefinition(BaseModel):
    """Complete workflow definition."""

    id: str = Field(default="workflow", min_length=1)
    name: str = Field(default="Workflow")
    description: Optional[str] = None
    version: str = Field(default="1.0.0")
    initial_state: WorkflowState = Field(..., description="Starting state")
    states: dict[WorkflowState, StateDefinition] = Field(...)
    hooks: WorkflowHooks = Field(default_factory=WorkflowHooks)


class WorkflowEngineOptions(BaseModel):
    """Engine options. Unset fields fall back to WorkflowSettings."""

    auto_evaluate: bool = True
    max_auto_transitions: int = Field(default=10, ge=1)
    debug: bool = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "WorkflowEngineOptions":
        """Build default options from the workflow settings."""
        workflow = (settings or get_settings()).workflow
        return cls(
            auto_evaluate=workflow.auto_evaluate,
            max_auto_transitions=workflow.max_auto_transitions,
            debug=workflow.debug,
        )


class AvailableTransition(BaseModel):
    """A transition out of a state, annotated for a given context."""

    event: str
    to: WorkflowState
    description: Optional[str] = None
    auto: bool = False
    condition_met: bool = False


class TransitionResult(BaseModel):
    """Outcome of a single transition attempt."""

    success: bool
    previous_state: WorkflowState
    current_state: WorkflowState
    transition_event: str
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class EvaluationResult(BaseModel):
    """Outcome of an auto-transition cascade."""

    transitioned: bool = False
    final_state: WorkflowState
    transitions: list[TransitionResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class WorkflowInstance(BaseModel):
    """
    A running workflow: its current state, context, and transition history.

    Hydrated by the host application before an operation and persisted after.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    workflow_type: str
    current_state: WorkflowState
    context: Any = None
    history: list[TransitionResult] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def record(self, result: TransitionResult) -> None:
        """Append a result to history, moving the instance on success."""
        self.history.append(result)
        if result.success:
            self.current_state = result.current_state
        self.updated_at = _utcnow()


def create_transition(to: WorkflowState, **options: Any) -> Transition:
    """Build a transition to ``to`` with optional fields."""
    return Transition(to=to, **options)


def create_auto_transition(
    to: WorkflowState,
    condition: TransitionCondition,
    **options: Any,
) -> Transition:
    """Build an automatic transition gated by ``condition``."""
    return Transition(to=to, auto=True, auto_condition=condition, **options)
