from __future__ import annotations
"""Simple finite state machine utility for enforcing allowed status transitions.

Usage:
    from erp.utils.fsm import TransitionValidator
    ALERT_FSM = TransitionValidator({
        'Open': {'Resolved', 'Ignored'},
        'Resolved': set(),
        'Ignored': set(),
    })
    ALERT_FSM.assert_can_transition(current_status, target_status)

Raises InvalidStateError (409) if invalid.
"""
from typing import Dict, Set
from erp.errors import InvalidStateError

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def is_terminal(self, status: str) -> bool:
        return not self.graph.get(status)

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise InvalidStateError(f"Invalid {self.field_name} transition {current} -> {target}")
        return True

__all__ = ['TransitionValidator']
