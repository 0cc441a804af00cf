"""
Workflow definition validation.

Checks structural invariants (initial state and transition targets exist) and
reports softer problems such as unreachable states or auto-transition cycles.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional

from compliance_engine.workflow.models import WorkflowDefinition


@dataclass
class ValidationError:
    """Represents a single validation error."""

    code: str
    message: str
    state: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationResult:
    """Result of definition validation."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    # Computed graph properties
    reachable_states: list[str] = field(default_factory=list)

    def add_error(
        self,
        code: str,
        message: str,
        state: Optional[str] = None,
        **details: Any,
    ) -> None:
        """Add a validation error."""
        self.errors.append(ValidationError(code, message, state, details))
        self.is_valid = False

    def add_warning(
        self,
        code: str,
        message: str,
        state: Optional[str] = None,
        **details: Any,
    ) -> None:
        """Add a validation warning."""
        self.warnings.append(ValidationError(code, message, state, details))


class DefinitionValidator:
    """
    Validates a workflow definition's state graph.

    Errors make the definition unusable; warnings are informational.
    """

    def __init__(self, definition: WorkflowDefinition):
        self.definition = definition
        self._states = definition.states

    def validate(self) -> ValidationResult:
        """
        Perform full validation of the definition.

        Returns:
            ValidationResult with errors, warnings, and reachable states
        """
        result = ValidationResult(is_valid=True)

        self._validate_initial_state(result)
        self._validate_transition_targets(result)
        self._check_auto_transitions(result)
        self._check_terminal_flags(result)
        self._check_unreachable_states(result)
        self._detect_auto_cycles(result)

        return result

    def _validate_initial_state(self, result: ValidationResult) -> None:
        initial = self.definition.initial_state
        if initial not in self._states:
            result.add_error(
                code="INVALID_INITIAL_STATE",
                message=f'initial state "{initial}" not found in states',
                state=initial,
            )

    def _validate_transition_targets(self, result: ValidationResult) -> None:
        for state_name, state in self._states.items():
            for event, transition in state.transitions.items():
                if transition.to not in self._states:
                    result.add_error(
                        code="UNKNOWN_TRANSITION_TARGET",
                        message=(
                            f'transition "{event}" from "{state_name}" '
                            f'targets unknown state "{transition.to}"'
                        ),
                        state=state_name,
                        event=event,
                        target=transition.to,
                    )

    def _check_auto_transitions(self, result: ValidationResult) -> None:
        """Auto transitions without a condition can never fire."""
        for state_name, state in self._states.items():
            for event, transition in state.transitions.items():
                if transition.auto and transition.auto_condition is None:
                    result.add_warning(
                        code="AUTO_WITHOUT_CONDITION",
                        message=(
                            f'auto transition "{event}" from "{state_name}" '
                            "has no auto_condition and will never fire"
                        ),
                        state=state_name,
                        event=event,
                    )

    def _check_terminal_flags(self, result: ValidationResult) -> None:
        for state_name, state in self._states.items():
            has_transitions = bool(state.transitions)
            if state.metadata.is_terminal and has_transitions:
                result.add_warning(
                    code="TERMINAL_FLAG_MISMATCH",
                    message=(
                        f'state "{state_name}" is flagged terminal but has '
                        f"transitions {list(state.transitions)}"
                    ),
                    state=state_name,
                )

    def _check_unreachable_states(self, result: ValidationResult) -> None:
        """BFS from the initial state over all transitions."""
        if not result.is_valid:
            return

        initial = self.definition.initial_state
        reachable = {initial}
        order = [initial]
        queue = deque([initial])

        while queue:
            state_name = queue.popleft()
            for transition in self._states[state_name].transitions.values():
                if transition.to not in reachable:
                    reachable.add(transition.to)
                    order.append(transition.to)
                    queue.append(transition.to)

        result.reachable_states = order

        unreachable = [name for name in self._states if name not in reachable]
        if unreachable:
            result.add_warning(
                code="UNREACHABLE_STATES",
                message=f"States {unreachable} are not reachable from '{initial}'",
                unreachable_states=unreachable,
            )

    def _detect_auto_cycles(self, result: ValidationResult) -> None:
        """
        Find a cycle made only of auto transitions.

        Such a cycle is legal; the engine's cascade bound cuts it.
        """
        if not result.is_valid:
            return

        auto_edges: dict[str, list[str]] = {
            name: [
                t.to
                for t in state.transitions.values()
                if t.auto and t.auto_condition is not None
            ]
            for name, state in self._states.items()
        }

        visited: set[str] = set()
        rec_stack: set[str] = set()
        cycle_path: list[str] = []

        def dfs(node: str, path: list[str]) -> bool:
            visited.add(node)
            rec_stack.add(node)
            path.append(node)

            for neighbor in auto_edges.get(node, []):
                if neighbor not in visited:
                    if dfs(neighbor, path):
                        return True
                elif neighbor in rec_stack:
                    cycle_start = path.index(neighbor)
                    cycle_path.extend(path[cycle_start:])
                    return True

            path.pop()
            rec_stack.remove(node)
            return False

        for node in self._states:
            if node not in visited and dfs(node, []):
                break

        if cycle_path:
            result.add_warning(
                code="AUTO_TRANSITION_CYCLE",
                message=f"Auto transitions form a cycle through states: {cycle_path}",
                cycle_states=cycle_path,
            )
