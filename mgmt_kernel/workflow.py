"""
Status workflow value objects (``mgmt_kernel.workflow``).

Responsibility
--------------
Pure value objects for small status state machines, such as the internship
lifecycle PENDING -> ONGOING -> COMPLETED.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
"""

from __future__ import annotations

from dataclasses import dataclass

from mgmt_kernel.exceptions import InvalidStatusTransitionError


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for an entity status.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    ``terminal_states`` are states with no outgoing transitions.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self):
        if self.initial_state not in self.states:
            raise ValueError(
                f"initial_state {self.initial_state!r} is not one of {self.states}"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"transition {t.action!r} references an unknown state"
                )

    def allowed_actions(self, state: str) -> tuple[str, ...]:
        return tuple(t.action for t in self.transitions if t.from_state == state)

    def apply(self, state: str, action: str) -> str:
        """Return the target state, or raise if ``action`` is not allowed."""
        for t in self.transitions:
            if t.from_state == state and t.action == action:
                return t.to_state
        raise InvalidStatusTransitionError(self.name, state, action)
