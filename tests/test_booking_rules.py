from wecare.domain.booking import (
    Action,
    AppointmentStatus,
    Role,
    TRANSITIONS,
    canonical_price,
    round_rating,
)


def table_edges():
    return {(source, t.to) for t in TRANSITIONS.values() for source in t.legal_from}


def test_transition_table_edges():
    pending, confirmed = AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED
    completed, cancelled = AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED
    assert table_edges() == {
        (pending, confirmed),
        (pending, cancelled),
        (confirmed, cancelled),
        (confirmed, completed),
    }


def test_terminal_statuses_have_no_outgoing_edges():
    terminal = {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    for source, _ in table_edges():
        assert source not in terminal


def test_each_action_belongs_to_one_role():
    assert TRANSITIONS[Action.ACCEPT].role == Role.NURSE
    assert TRANSITIONS[Action.DECLINE].role == Role.NURSE
    assert TRANSITIONS[Action.CANCEL].role == Role.PATIENT
    assert TRANSITIONS[Action.COMPLETE].role == Role.ADMIN


def test_canonical_price():
    assert canonical_price("Consultation") == 500
    assert canonical_price("Home visit") == 1200
    assert canonical_price("Emergency") == 2000
    assert canonical_price("Massage") is None


def test_round_rating_half_up():
    assert round_rating([4, 4, 5, 4]) == 4.3
    assert round_rating([5]) == 5.0
    assert round_rating([1, 2]) == 1.5
    assert round_rating([4, 5, 5]) == 4.7
    assert round_rating([]) is None
