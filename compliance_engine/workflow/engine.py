"""
Workflow transition engine.

Executes state transitions for a declarative workflow definition:
- Guard evaluation for manually triggered transitions
- Ordered hook execution (before -> exit -> transition -> enter -> after)
- Bounded cascades of automatic transitions

A transition is atomic with respect to state: if any hook raises, the result
reports failure and the state does not move. Hook side effects already applied
to the caller's context are not rolled back.
"""

import inspect
import logging
from typing import Any, Generic, Optional, TypeVar, Union

from compliance_engine.workflow.models import (
    AvailableTransition,
    EvaluationResult,
    StateDefinition,
    TransitionResult,
    WorkflowDefinition,
    WorkflowEngineOptions,
    WorkflowInstance,
    WorkflowState,
)
from compliance_engine.workflow.validation import DefinitionValidator, ValidationResult

logger = logging.getLogger(__name__)

ContextT = TypeVar("ContextT")

GUARD_REJECTED = "Transition guard rejected the transition"


class InvalidWorkflowDefinitionError(Exception):
    """Raised when a workflow definition is structurally invalid."""

    def __init__(self, validation_result: ValidationResult):
        self.validation_result = validation_result
        self.errors = validation_result.errors
        super().__init__(
            f"Invalid workflow definition: {validation_result.errors[0].message}"
        )


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class WorkflowEngine(Generic[ContextT]):
    """
    State machine executor for a workflow definition.

    The definition and options are fixed at construction. The context passed
    to each operation belongs to the caller; the engine never inspects it and
    keeps no reference to it after the call returns. Callers sharing one
    context across concurrent operations must serialize access themselves.
    """

    def __init__(
        self,
        definition: WorkflowDefinition,
        options: Optional[Union[WorkflowEngineOptions, dict[str, Any]]] = None,
    ):
        self._definition = definition
        self._options = self._merge_options(options)

        self.validation_result = DefinitionValidator(definition).validate()
        if not self.validation_result.is_valid:
            raise InvalidWorkflowDefinitionError(self.validation_result)

        for warning in self.validation_result.warnings:
            logger.warning(f"[Workflow {definition.id}] {warning.message}")

    @staticmethod
    def _merge_options(
        options: Optional[Union[WorkflowEngineOptions, dict[str, Any]]],
    ) -> WorkflowEngineOptions:
        """Merge caller options over the configured defaults."""
        defaults = WorkflowEngineOptions.from_settings()
        if options is None:
            return defaults
        if isinstance(options, WorkflowEngineOptions):
            overrides = options.model_dump(exclude_unset=True)
        else:
            overrides = WorkflowEngineOptions.model_validate(options).model_dump(
                exclude_unset=True
            )
        return defaults.model_copy(update=overrides)

    @property
    def options(self) -> WorkflowEngineOptions:
        """Get effective engine options."""
        return self._options

    def get_definition(self) -> WorkflowDefinition:
        """Get the workflow definition."""
        return self._definition

    def get_state(self, state: WorkflowState) -> Optional[StateDefinition]:
        """Get a state definition, or None if the state is unknown."""
        return self._definition.states.get(state)

    def get_available_transitions(
        self,
        current_state: WorkflowState,
        context: ContextT,
    ) -> list[AvailableTransition]:
        """
        List the transitions out of a state, in declaration order.

        ``condition_met`` reflects the transition's auto_condition; it is
        False when no auto_condition is defined. Exceptions raised by an
        auto_condition propagate to the caller.

        Raises:
            TypeError: If an auto_condition returns an awaitable
        """
        state = self.get_state(current_state)
        if state is None:
            return []

        available = []
        for event, transition in state.transitions.items():
            condition_met = False
            if transition.auto_condition is not None:
                value = transition.auto_condition(context)
                if inspect.isawaitable(value):
                    if inspect.iscoroutine(value):
                        value.close()
                    raise TypeError(
                        f'auto_condition of "{event}" returned an awaitable; '
                        "auto-conditions must be synchronous"
                    )
                condition_met = bool(value)
            available.append(
                AvailableTransition(
                    event=event,
                    to=transition.to,
                    description=transition.description,
                    auto=transition.auto,
                    condition_met=condition_met,
                )
            )
        return available

    async def can_transition(
        self,
        current_state: WorkflowState,
        event: str,
        context: ContextT,
    ) -> bool:
        """Check whether ``event`` is allowed from ``current_state``."""
        state = self.get_state(current_state)
        if state is None:
            return False

        transition = state.transitions.get(event)
        if transition is None:
            return False

        if transition.guard is not None:
            try:
                return bool(await _maybe_await(transition.guard(context)))
            except Exception:
                return False

        return True

    def _failure(
        self,
        current_state: WorkflowState,
        event: str,
        error: str,
    ) -> TransitionResult:
        return TransitionResult(
            success=False,
            previous_state=current_state,
            current_state=current_state,
            transition_event=event,
            error=error,
        )

    async def execute_transition(
        self,
        current_state: WorkflowState,
        event: str,
        context: ContextT,
    ) -> TransitionResult:
        """
        Execute a named transition.

        Args:
            current_state: State the workflow is in
            event: Transition name to fire
            context: Caller-owned payload handed to guards and hooks

        Returns:
            TransitionResult; failures are reported, never raised
        """
        state = self.get_state(current_state)
        if state is None:
            return self._failure(
                current_state, event, f'State "{current_state}" not found in workflow'
            )

        transition = state.transitions.get(event)
        if transition is None:
            return self._failure(
                current_state,
                event,
                f'Transition "{event}" not found in state "{current_state}"',
            )

        if transition.guard is not None:
            try:
                allowed = await _maybe_await(transition.guard(context))
            except Exception as e:
                return self._failure(current_state, event, f"{GUARD_REJECTED}: {e}")
            if not allowed:
                return self._failure(current_state, event, GUARD_REJECTED)

        target_state = transition.to
        hooks = self._definition.hooks

        try:
            if hooks.before_transition is not None:
                await _maybe_await(
                    hooks.before_transition(context, current_state, target_state)
                )

            if state.on_exit is not None:
                await _maybe_await(state.on_exit(context))

            if transition.on_transition is not None:
                await _maybe_await(transition.on_transition(context))

            target = self._definition.states[target_state]
            if target.on_enter is not None:
                await _maybe_await(target.on_enter(context))

            if hooks.after_transition is not None:
                await _maybe_await(
                    hooks.after_transition(context, current_state, target_state)
                )
        except Exception as e:
            logger.error(
                f"[Workflow {self._definition.id}] Transition {current_state} "
                f"--[{event}]--> {target_state} failed: {e}",
                exc_info=True,
            )
            if hooks.on_error is not None:
                await _maybe_await(hooks.on_error(e, context))
            return self._failure(current_state, event, str(e) or type(e).__name__)

        if self._options.debug:
            logger.debug(
                f"[Workflow {self._definition.id}] Transition: "
                f"{current_state} --[{event}]--> {target_state}"
            )

        return TransitionResult(
            success=True,
            previous_state=current_state,
            current_state=target_state,
            transition_event=event,
        )

    async def evaluate_transitions(
        self,
        current_state: WorkflowState,
        context: ContextT,
    ) -> EvaluationResult:
        """
        Run the auto-transition cascade from ``current_state``.

        Each pass fires the first auto transition (in declaration order) whose
        auto_condition holds. A candidate that fails is recorded in ``errors``
        and the next candidate is tried. The cascade stops when a pass fires
        nothing or after ``max_auto_transitions`` transitions.

        An auto_condition that returns an awaitable is awaited. Exceptions
        raised by an auto_condition propagate to the caller.
        """
        result = EvaluationResult(final_state=current_state)
        limit = self._options.max_auto_transitions

        state_name = current_state
        iteration_count = 0

        while iteration_count < limit:
            state = self.get_state(state_name)
            if state is None:
                break

            fired = None
            for event, transition in state.transitions.items():
                if not transition.auto or transition.auto_condition is None:
                    continue
                if not await _maybe_await(transition.auto_condition(context)):
                    continue

                outcome = await self.execute_transition(state_name, event, context)
                if outcome.success:
                    fired = outcome
                    break
                if outcome.error:
                    result.errors.append(outcome.error)

            if fired is None:
                break

            result.transitioned = True
            result.transitions.append(fired)
            state_name = fired.current_state
            iteration_count += 1

        if iteration_count >= limit:
            message = f"Maximum auto-transitions ({limit}) reached. Possible infinite loop."
            logger.warning(f"[Workflow {self._definition.id}] {message}")
            result.errors.append(message)

        result.final_state = state_name
        return result

    async def advance(
        self,
        instance: WorkflowInstance,
        event: str,
    ) -> EvaluationResult:
        """
        Fire ``event`` on an instance and record the outcome in its history.

        When the transition succeeds and ``auto_evaluate`` is enabled, the
        auto-transition cascade runs from the new state and every cascaded
        result is recorded as well.
        """
        outcome = await self.execute_transition(
            instance.current_state, event, instance.context
        )
        instance.record(outcome)

        summary = EvaluationResult(
            transitioned=outcome.success,
            final_state=instance.current_state,
        )
        if not outcome.success:
            summary.errors.append(outcome.error or "")
            return summary

        summary.transitions.append(outcome)

        if self._options.auto_evaluate:
            cascade = await self.evaluate_transitions(
                instance.current_state, instance.context
            )
            for cascaded in cascade.transitions:
                instance.record(cascaded)
            summary.transitions.extend(cascade.transitions)
            summary.errors.extend(cascade.errors)

        summary.final_state = instance.current_state
        return summary

    def get_next_states(self, current_state: WorkflowState) -> list[WorkflowState]:
        """Get distinct target states reachable in one transition."""
        state = self.get_state(current_state)
        if state is None:
            return []

        # dict keeps first-seen order
        return list(dict.fromkeys(t.to for t in state.transitions.values()))

    def is_terminal_state(self, state: WorkflowState) -> bool:
        """
        Check if a state is terminal.

        Unknown states count as terminal. Metadata's is_terminal flag is
        descriptive only; terminality comes from the transition map.
        """
        state_def = self.get_state(state)
        if state_def is None:
            return True
        return not state_def.transitions

    def get_all_states(self) -> list[WorkflowState]:
        """Get all declared states in declaration order."""
        return list(self._definition.states)

    def get_terminal_states(self) -> list[WorkflowState]:
        """Get all terminal states."""
        return [s for s in self.get_all_states() if self.is_terminal_state(s)]


def create_workflow_engine(
    definition: WorkflowDefinition,
    options: Optional[Union[WorkflowEngineOptions, dict[str, Any]]] = None,
) -> WorkflowEngine:
    """Factory function to create a workflow engine."""
    return WorkflowEngine(definition, options)
