"""
Unit tests for workflow domain models.
"""

import pytest
from pydantic import ValidationError

from compliance_engine.workflow import (
    EvaluationResult,
    StateDefinition,
    Transition,
    TransitionResult,
    WorkflowEngineOptions,
    WorkflowInstance,
    create_auto_transition,
    create_transition,
)


class TestTransitionBuilders:
    """Tests for transition helper constructors."""

    def test_create_transition_defaults(self):
        """Test a plain transition is manual with no callables."""
        transition = create_transition("approved", description="Approve")

        assert transition.to == "approved"
        assert transition.description == "Approve"
        assert transition.auto is False
        assert transition.guard is None
        assert transition.required_permissions == []

    def test_create_auto_transition(self):
        """Test auto transitions carry their condition."""

        def condition(ctx):
            return True

        transition = create_auto_transition("done", condition, description="Auto")

        assert transition.auto is True
        assert transition.auto_condition is condition
        assert transition.description == "Auto"

    def test_empty_target_rejected(self):
        """Test a transition needs a target state."""
        with pytest.raises(ValidationError):
            Transition(to="")

    def test_non_callable_guard_rejected(self):
        """Test guards must be callable."""
        with pytest.raises(ValidationError):
            Transition(to="b", guard="not callable")

    def test_async_auto_condition_rejected(self):
        """Test coroutine functions cannot be used as auto-conditions."""

        async def never(ctx):
            return False

        with pytest.raises(ValidationError, match="synchronous"):
            create_auto_transition("b", never)

    def test_async_guard_accepted(self):
        """Test guards may be coroutine functions."""

        async def allowed(ctx):
            return True

        assert create_transition("b", guard=allowed).guard is allowed


class TestStateDefinition:
    """Tests for state definitions."""

    def test_transitions_preserve_order(self):
        """Test the transition map keeps declaration order."""
        state = StateDefinition(
            transitions={
                "z": create_transition("a"),
                "a": create_transition("b"),
                "m": create_transition("c"),
            }
        )

        assert list(state.transitions) == ["z", "a", "m"]

    def test_metadata_allows_extra_fields(self):
        """Test display metadata accepts arbitrary keys."""
        state = StateDefinition(metadata={"color": "#fff", "badge": "new"})

        assert state.metadata.color == "#fff"
        assert state.metadata.model_extra == {"badge": "new"}
        assert state.metadata.is_terminal is False


class TestEngineOptions:
    """Tests for engine options."""

    def test_max_auto_transitions_must_be_positive(self):
        """Test the cascade bound must be at least one."""
        with pytest.raises(ValidationError):
            WorkflowEngineOptions(max_auto_transitions=0)

    def test_from_settings(self, test_settings):
        """Test options are built from workflow settings."""
        test_settings.workflow.max_auto_transitions = 4
        test_settings.workflow.debug = True

        options = WorkflowEngineOptions.from_settings(test_settings)

        assert options.max_auto_transitions == 4
        assert options.debug is True
        assert options.auto_evaluate is True


class TestWorkflowInstance:
    """Tests for workflow instances."""

    def test_record_success_moves_state(self):
        """Test recording a successful result updates the current state."""
        instance = WorkflowInstance(workflow_type="review", current_state="draft")
        before = instance.updated_at

        instance.record(
            TransitionResult(
                success=True,
                previous_state="draft",
                current_state="pending_review",
                transition_event="submit",
            )
        )

        assert instance.current_state == "pending_review"
        assert len(instance.history) == 1
        assert instance.updated_at >= before

    def test_record_failure_keeps_state(self):
        """Test recording a failed result keeps the current state."""
        instance = WorkflowInstance(workflow_type="review", current_state="draft")

        instance.record(
            TransitionResult(
                success=False,
                previous_state="draft",
                current_state="draft",
                transition_event="approve",
                error="nope",
            )
        )

        assert instance.current_state == "draft"
        assert instance.history[0].error == "nope"

    def test_instances_get_unique_ids(self):
        """Test each instance gets its own id."""
        a = WorkflowInstance(workflow_type="review", current_state="draft")
        b = WorkflowInstance(workflow_type="review", current_state="draft")

        assert a.id != b.id


class TestEvaluationResult:
    """Tests for evaluation results."""

    def test_defaults(self):
        """Test an empty evaluation result."""
        result = EvaluationResult(final_state="draft")

        assert result.transitioned is False
        assert result.transitions == []
        assert result.errors == []
