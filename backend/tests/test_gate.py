import pytest

from heattrack.tracking.gate import GatePhase, GateState, GateVerdict, MovementGate

from conftest import fix_at


def test_first_fix_becomes_baseline_and_is_not_recorded():
    gate = MovementGate()
    baseline = fix_at(10.0, 20.0)

    state, decision = gate.evaluate(GateState(), baseline)

    assert decision.verdict is GateVerdict.baseline_set
    assert not decision.should_record
    assert state.baseline == baseline
    assert state.phase is GatePhase.awaiting_movement


def test_stays_waiting_below_threshold():
    gate = MovementGate(threshold_m=30)
    state, _ = gate.evaluate(GateState(), fix_at(0, 0))

    for i, lon in enumerate([0.0001, 0.0002, 0.0001, 0.0], start=1):
        state, decision = gate.evaluate(state, fix_at(0, lon, i * 5))
        assert decision.verdict is GateVerdict.waiting
        assert not decision.should_record
        assert decision.distance_m < 30
        assert state.phase is GatePhase.awaiting_movement


def test_waiting_reports_distance_from_baseline():
    gate = MovementGate()
    state, _ = gate.evaluate(GateState(), fix_at(0, 0))
    _, decision = gate.evaluate(state, fix_at(0, 0.0001, 5))
    assert decision.distance_m == pytest.approx(11.12, abs=0.05)


def test_crossing_threshold_starts_tracking_once():
    gate = MovementGate(threshold_m=30)
    state, _ = gate.evaluate(GateState(), fix_at(0, 0))

    state, decision = gate.evaluate(state, fix_at(0, 0.0005, 5))
    assert decision.verdict is GateVerdict.movement_started
    assert decision.should_record
    assert state.phase is GatePhase.tracking

    # Back at the baseline, or far away: always plain records from now on
    for i, lon in enumerate([0.0, 0.01, 0.0001], start=2):
        state, decision = gate.evaluate(state, fix_at(0, lon, i * 5))
        assert decision.verdict is GateVerdict.record
        assert decision.should_record
        assert state.movement_started


def test_threshold_is_inclusive():
    gate = MovementGate(threshold_m=0)
    state, _ = gate.evaluate(GateState(), fix_at(1, 1))
    _, decision = gate.evaluate(state, fix_at(1, 1, 5))
    assert decision.verdict is GateVerdict.movement_started


def test_baseline_never_moves():
    gate = MovementGate()
    baseline = fix_at(0, 0)
    state, _ = gate.evaluate(GateState(), baseline)
    for i, lon in enumerate([0.0001, 0.001, 0.002], start=1):
        state, _ = gate.evaluate(state, fix_at(0, lon, i))
        assert state.baseline == baseline


def test_evaluate_does_not_mutate_input_state():
    gate = MovementGate()
    initial = GateState()
    gate.evaluate(initial, fix_at(0, 0))
    assert initial.baseline is None
    assert initial.phase is GatePhase.awaiting_baseline


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        MovementGate(threshold_m=-1)
