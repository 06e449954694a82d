from erp.errors import InvalidStateError
from erp.services.duplicates import ALERT_FSM
from erp.utils.fsm import TransitionValidator
import pytest


def test_transition_validator_allows_valid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    with pytest.raises(InvalidStateError) as exc:
        fsm.assert_can_transition('A', 'C')
    assert exc.value.code == 409
    assert 'A -> C' in exc.value.description


def test_unknown_state_has_no_transitions():
    fsm = TransitionValidator({'A': {'B'}})
    assert fsm.can_transition('Z', 'A') is False
    assert fsm.is_terminal('Z')


def test_alert_lifecycle_graph():
    assert ALERT_FSM.can_transition('Open', 'Resolved')
    assert ALERT_FSM.can_transition('Open', 'Ignored')
    for terminal in ('Resolved', 'Ignored'):
        assert ALERT_FSM.is_terminal(terminal)
        for target in ('Open', 'Resolved', 'Ignored'):
            assert not ALERT_FSM.can_transition(terminal, target)
