"""Unit my_testing for the launch simulator core functionality."""

import numpy as np
import pytest

from launchSimulator import (
    AnomalyStatus,
    LaunchSimulator,
    MissionPhase,
    Severity,
    SimulatorConfig,
    TelemetrySnapshot,
    derive_anomaly_status,
    get_rocket,
    phase_at,
    telemetry_at,
)
from launchSimulator.core import trajectory_point_at
from launchSimulator.models import most_severe


class ConstantDraws:
    """Stand-in random source that always returns the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


def run_ticks(simulator, n, dt=0.1):
    return [r for r in (simulator.tick(dt) for _ in range(n)) if r is not None]


def test_phase_thresholds():
    """Test that phases switch exactly at the scripted mission times."""
    assert phase_at(-1.0) is MissionPhase.PRE_LAUNCH
    assert phase_at(0.0) is MissionPhase.IGNITION
    assert phase_at(2.999) is MissionPhase.IGNITION
    assert phase_at(3.0) is MissionPhase.LIFTOFF
    assert phase_at(10.0) is MissionPhase.MAX_Q
    assert phase_at(25.0) is MissionPhase.STAGE_SEPARATION
    assert phase_at(40.0) is MissionPhase.ORBIT_INSERTION
    assert phase_at(59.999) is MissionPhase.ORBIT_INSERTION
    assert phase_at(60.0) is MissionPhase.COMPLETED
    assert phase_at(1e6) is MissionPhase.COMPLETED


def test_phase_monotonicity():
    """Test that the phase index never decreases over a full 60 fps run."""
    simulator = LaunchSimulator(get_rocket("falcon-9"), rng=7)
    simulator.start()
    results = simulator.run(70.0, frame_dt=1 / 60)

    indices = [r.phase.index for r in results]
    assert np.all(np.diff(indices) >= 0)
    assert results[0].phase is MissionPhase.IGNITION
    assert results[-1].phase is MissionPhase.COMPLETED


def test_throttle_commits_once_per_interval():
    """Test that ten 0.01 s frames commit exactly one telemetry snapshot."""
    simulator = LaunchSimulator(rng=0)
    simulator.start()

    outcomes = [simulator.tick(0.01) for _ in range(10)]
    assert outcomes[:9] == [None] * 9
    assert outcomes[9] is not None
    assert len(simulator.history()) == 1
    assert np.isclose(simulator.simulation_time, 0.1)

    for _ in range(10):
        simulator.tick(0.01)
    assert len(simulator.history()) == 2


def test_thrust_decay_monotonic_and_floored():
    """Test that an armed fault only ever lowers thrust, never below the floor."""
    simulator = LaunchSimulator(rng=ConstantDraws(0.99))
    simulator.start()

    multipliers = []
    for _ in range(600):
        simulator.tick(0.1)
        multipliers.append(simulator.thrust_state.thrust_multiplier)

    trigger = simulator.thrust_state.anomaly_trigger_time
    assert trigger is not None
    assert 5.0 < trigger < 10.0
    assert np.all(np.diff(multipliers) <= 0)
    assert min(multipliers) >= 0.3
    assert multipliers[-1] == pytest.approx(0.3)


def test_fault_armed_once():
    """Test that later fault draws do not move the trigger time."""
    simulator = LaunchSimulator(rng=ConstantDraws(0.99))
    simulator.start()
    run_ticks(simulator, 60)
    first_trigger = simulator.thrust_state.anomaly_trigger_time

    run_ticks(simulator, 30)
    assert simulator.thrust_state.anomaly_trigger_time == first_trigger


def test_late_liftoff_fault_keeps_decaying_after_liftoff():
    """Test that a fault armed at the end of liftoff still decays thrust in max-q."""
    config = SimulatorConfig(fault_earliest_time=9.5)
    simulator = LaunchSimulator(config=config, rng=ConstantDraws(0.99))
    simulator.start()
    results = run_ticks(simulator, 150)

    trigger = simulator.thrust_state.anomaly_trigger_time
    assert phase_at(trigger) is MissionPhase.LIFTOFF
    assert 9.5 <= trigger < 10.0

    max_q = [r for r in results if r.phase is MissionPhase.MAX_Q]
    assert max_q[0].telemetry.timestamp - trigger <= config.fault_decay_delay + 0.2
    assert simulator.thrust_state.thrust_multiplier == pytest.approx(0.3)
    bumped = [r for r in max_q if r.telemetry.timestamp > 12.0]
    for r in bumped:
        assert r.telemetry.temperature == pytest.approx(telemetry_at(r.telemetry.timestamp, 0.3).temperature)
        assert r.telemetry.temperature > telemetry_at(r.telemetry.timestamp).temperature


def test_no_fault_without_draw():
    """Test that a draw that never fires leaves telemetry on the nominal curve."""
    simulator = LaunchSimulator(rng=ConstantDraws(0.0))
    simulator.start()
    results = run_ticks(simulator, 650)

    assert simulator.thrust_state.anomaly_trigger_time is None
    assert simulator.thrust_state.thrust_multiplier == 1.0
    for r in results:
        assert r.telemetry == telemetry_at(r.telemetry.timestamp)
        assert r.anomaly_status.guidance is Severity.NOMINAL


def test_fault_draws_only_after_five_seconds_of_liftoff():
    """Test that fault draws start once liftoff is past T+5 s."""
    draws = ConstantDraws(0.0)
    simulator = LaunchSimulator(rng=draws)
    simulator.start()

    run_ticks(simulator, 20, dt=0.25)  # up to T+5.0
    assert draws.calls == 20  # one guidance draw per tick

    run_ticks(simulator, 4, dt=0.25)  # T+5.25 .. T+6.0
    assert draws.calls == 20 + 2 * 4


def test_completed_boundary_values():
    """Test that reaching T+60 s yields the fixed orbit values."""
    simulator = LaunchSimulator(rng=0)
    simulator.start()
    result = simulator.tick(60.0)

    assert result.phase is MissionPhase.COMPLETED
    assert result.telemetry == TelemetrySnapshot(
        altitude=110000, speed=11200, acceleration=0, fuel=0, temperature=285, pressure=0, timestamp=60.0
    )
    assert result.trajectory_point is None


def test_fuel_bounded():
    """Test that fuel stays in [0, 100] for all mission times and thrust levels."""
    for T in (1.0, 0.75, 0.3):
        for t in np.linspace(0, 90, 901):
            fuel = telemetry_at(t, T).fuel
            assert 0.0 <= fuel <= 100.0


def test_telemetry_table_values():
    """Test representative points of the closed-form telemetry table."""
    ignition = telemetry_at(2.0)
    assert ignition.altitude == 0
    assert ignition.fuel == pytest.approx(100 - 4 / 3)
    assert ignition.temperature == pytest.approx(220)
    assert ignition.pressure == pytest.approx(101.3)

    liftoff = telemetry_at(5.0)
    assert liftoff.altitude == pytest.approx(200)
    assert liftoff.speed == pytest.approx(200)
    assert liftoff.acceleration == pytest.approx(3.5)
    assert liftoff.fuel == pytest.approx(92)
    assert liftoff.temperature == pytest.approx(360)
    assert liftoff.pressure == pytest.approx(91.3)
    assert telemetry_at(5.0, fault_fired=True).temperature == pytest.approx(440)

    max_q = telemetry_at(12.0, thrust_multiplier=0.7)
    assert max_q.altitude == pytest.approx(3500 + 4 * 100 * 0.7)
    assert max_q.speed == pytest.approx(700 + 2 * 200 * 0.7)
    assert max_q.temperature == pytest.approx(460 + 10 + 50)

    stage_sep = telemetry_at(30.0)
    assert stage_sep.altitude == pytest.approx(25000 + 25 * 200)
    assert stage_sep.temperature == pytest.approx(485)
    assert stage_sep.pressure == pytest.approx(16.3)

    orbit = telemetry_at(59.9, thrust_multiplier=0.5)
    assert orbit.fuel == pytest.approx(17.5 - 0.8 * 19.9)
    assert orbit.pressure == pytest.approx(0.33)
    assert orbit.temperature == pytest.approx(385 - 5 * 19.9 + 40)


def test_trajectory_points_only_in_powered_phases():
    """Test that trajectory points are laid down from liftoff to orbit insertion."""
    assert trajectory_point_at(1.0, 0.0) is None
    assert trajectory_point_at(60.0, 110000) is None

    point = trajectory_point_at(12.0, 4000.0)
    assert point.x == pytest.approx(1.0)
    assert point.y == pytest.approx(400.0)
    assert point.z == pytest.approx(0.4)

    simulator = LaunchSimulator(rng=3)
    simulator.start()
    results = run_ticks(simulator, 700)

    powered = [r for r in results if r.phase.powered]
    assert len(simulator.trajectory()) == len(powered)
    for r in powered:
        assert r.trajectory_point.y == pytest.approx(r.telemetry.altitude / 10)


def test_anomaly_rules():
    """Test the temperature, fuel and guidance severity rules."""
    hot = derive_anomaly_status(TelemetrySnapshot(temperature=650), 12.0, 0.0)
    assert hot.temperature is Severity.CRITICAL
    assert hot.overall is Severity.CRITICAL

    warm = derive_anomaly_status(TelemetrySnapshot(temperature=550), 12.0, 0.0)
    assert warm.temperature is Severity.WARNING
    assert warm.overall is Severity.WARNING

    assert derive_anomaly_status(TelemetrySnapshot(fuel=5), 15.0, 0.0).fuel is Severity.CRITICAL
    assert derive_anomaly_status(TelemetrySnapshot(fuel=5), 25.0, 0.0).fuel is Severity.WARNING
    assert derive_anomaly_status(TelemetrySnapshot(fuel=25), 35.0, 0.0).fuel is Severity.NOMINAL

    assert derive_anomaly_status(TelemetrySnapshot(), 20.0, 0.99).guidance is Severity.WARNING
    assert derive_anomaly_status(TelemetrySnapshot(), 20.0, 0.5).guidance is Severity.NOMINAL
    assert derive_anomaly_status(TelemetrySnapshot(), 50.0, 0.99).guidance is Severity.NOMINAL

    assert derive_anomaly_status(TelemetrySnapshot(temperature=900, fuel=1), 5.0, 0.99).engine is Severity.NOMINAL


def test_overall_is_worst_subsystem():
    """Test that overall status is the worst subsystem and re-derivable from telemetry."""
    simulator = LaunchSimulator(rng=ConstantDraws(0.99))
    simulator.start()

    for r in run_ticks(simulator, 650):
        status = r.anomaly_status
        assert status.overall is most_severe(status.engine, status.fuel, status.guidance, status.temperature)

        rederived = derive_anomaly_status(r.telemetry, r.telemetry.timestamp, 0.99)
        assert rederived == status


def test_severity_ordering():
    assert most_severe() is Severity.NOMINAL
    assert most_severe(Severity.WARNING, Severity.NOMINAL) is Severity.WARNING
    assert most_severe(Severity.WARNING, Severity.CRITICAL, Severity.NOMINAL) is Severity.CRITICAL
    assert AnomalyStatus.from_subsystems(Severity.NOMINAL, Severity.WARNING,
                                         Severity.NOMINAL, Severity.NOMINAL).overall is Severity.WARNING


def test_reset_clears_history():
    """Test that reset discards the run and returns to pre-launch."""
    simulator = LaunchSimulator(rng=1)
    simulator.start()
    run_ticks(simulator, 200)
    simulator.analysis = object()

    simulator.reset()
    assert list(simulator.history()) == []
    assert list(simulator.trajectory()) == []
    assert simulator.simulation_time == 0
    assert simulator.phase is MissionPhase.PRE_LAUNCH
    assert simulator.telemetry == TelemetrySnapshot()
    assert simulator.thrust_state.anomaly_trigger_time is None
    assert simulator.thrust_state.thrust_multiplier == 1.0
    assert simulator.analysis is None
    assert not simulator.is_running

    # Idempotent
    simulator.reset()
    assert list(simulator.history()) == []


def test_start_is_idempotent_and_restarts():
    simulator = LaunchSimulator(rng=1)
    simulator.start()
    run_ticks(simulator, 40)
    simulator.start()
    simulator.start()

    assert simulator.is_running
    assert simulator.simulation_time == 0
    assert list(simulator.history()) == []
    assert simulator.kinematics == {"altitude": 0.0, "speed": 0.0, "thrust": 1.0}


def test_stop_freezes_state():
    """Test that ticks are ignored while stopped."""
    simulator = LaunchSimulator(rng=1)
    simulator.start()
    run_ticks(simulator, 45)
    simulator.stop()

    frozen_time = simulator.simulation_time
    frozen_history = simulator.history()
    assert simulator.tick(1.0) is None
    assert simulator.simulation_time == frozen_time
    assert simulator.history() == frozen_history

    simulator.start()
    assert simulator.simulation_time == 0


def test_negative_delta_rejected():
    simulator = LaunchSimulator(rng=1)
    simulator.start()
    with pytest.raises(ValueError):
        simulator.tick(-0.1)
    assert simulator.simulation_time == 0


def test_seeded_runs_reproducible():
    """Test that the same seed yields identical histories."""
    histories = []
    for _ in range(2):
        simulator = LaunchSimulator(config=SimulatorConfig(seed=42))
        simulator.start()
        simulator.run(65.0, frame_dt=1 / 30)
        histories.append(simulator.history())
    assert histories[0] == histories[1]


def test_invalid_rng_rejected():
    with pytest.raises(TypeError):
        LaunchSimulator(rng="not a generator")


def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        SimulatorConfig(tick_interval=0)
    with pytest.raises(ValueError):
        SimulatorConfig(fault_probability=1.5)
