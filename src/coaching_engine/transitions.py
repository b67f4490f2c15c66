"""
Closed-world transition tables shared by the session and parking-lot state machines.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Mapping, Tuple


class TransitionTable:
    """
    Maps each state to the set of states it may move to.

    A state with no outgoing transitions is terminal. Every target must itself
    be a declared state, so a typo in a table fails at import time.
    """

    def __init__(self, mapping: Mapping[str, Iterable[str]]) -> None:
        self._table: Dict[str, FrozenSet[str]] = {
            state: frozenset(targets) for state, targets in mapping.items()
        }
        for state, targets in self._table.items():
            unknown = targets - self._table.keys()
            if unknown:
                raise ValueError(f"State {state!r} targets undeclared states: {sorted(unknown)}")

    @property
    def states(self) -> Tuple[str, ...]:
        return tuple(self._table)

    def allowed(self, from_state: str) -> FrozenSet[str]:
        return self._table.get(from_state, frozenset())

    def can_transition(self, from_state: str, to_state: str) -> bool:
        return to_state in self.allowed(from_state)

    def is_terminal(self, state: str) -> bool:
        return state in self._table and not self._table[state]

    def __contains__(self, state: object) -> bool:
        return state in self._table
