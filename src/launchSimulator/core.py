# Licensed under the PolyForm Noncommercial License 1.0.0
"""Core simulation logic for the launch simulator."""

import logging
from typing import List, Optional, Tuple, Union

import numpy as np

from .models import (
    AnomalyStatus,
    MissionPhase,
    PHASE_START_TIMES,
    RocketModel,
    Severity,
    SimulatorConfig,
    TelemetrySnapshot,
    ThrustAnomalyState,
    TickResult,
    TrajectoryPoint,
)

logger = logging.getLogger(__name__)

# Slack when comparing accumulated frame deltas against the tick interval
_TIME_EPS = 1e-9

# Telemetry once the vehicle has reached orbit
COMPLETED_TELEMETRY = dict(
    altitude=110000.0,
    speed=11200.0,
    acceleration=0.0,
    fuel=0.0,
    temperature=285.0,
    pressure=0.0,
)


def phase_at(t: float) -> MissionPhase:
    """Classify the mission phase from elapsed mission time."""
    if t < PHASE_START_TIMES[MissionPhase.IGNITION]:
        return MissionPhase.PRE_LAUNCH

    phase = MissionPhase.IGNITION
    for candidate, start in PHASE_START_TIMES.items():
        if t >= start:
            phase = candidate
    return phase


def telemetry_at(t: float, thrust_multiplier: float = 1.0, fault_fired: bool = False) -> TelemetrySnapshot:
    """
    Closed-form telemetry for mission time ``t``.

    Args:
        t: Mission time (s)
        thrust_multiplier: Remaining fraction of nominal thrust
        fault_fired: Whether a thrust fault draw fired on this tick (liftoff only)

    Returns:
        TelemetrySnapshot stamped with ``t``
    """
    phase = phase_at(t)
    T = thrust_multiplier
    degraded = T < 0.8

    if phase is MissionPhase.PRE_LAUNCH:
        return TelemetrySnapshot(timestamp=t)

    if phase is MissionPhase.IGNITION:
        values = dict(
            altitude=0.0,
            speed=0.0,
            acceleration=0.0,
            fuel=100 - (t / 3) * 2,
            temperature=20 + t * 100,
            pressure=101.3,
        )

    elif phase is MissionPhase.LIFTOFF:
        u = t - 3
        values = dict(
            altitude=u * u * 50 * T,
            speed=max(0.0, u * 100 * T),
            acceleration=3.5 * T,
            fuel=98 - u * 3,
            temperature=320 + u * 20 + (80 if fault_fired else 0),
            pressure=101.3 - u * 5,
        )

    elif phase is MissionPhase.MAX_Q:
        u = t - 10
        values = dict(
            altitude=3500 + u * u * 100 * T,
            speed=max(0.0, 700 + u * 200 * T),
            acceleration=4.2 * T,
            fuel=77 - u * 2.5,
            temperature=460 + u * 5 + (50 if degraded else 0),
            pressure=51.3 - u * 2,
        )

    elif phase is MissionPhase.STAGE_SEPARATION:
        u = t - 25
        values = dict(
            altitude=25000 + u * u * 200 * T,
            speed=max(0.0, 3700 + u * 300 * T),
            acceleration=2.8 * T,
            fuel=40 - u * 1.5,
            temperature=535 - u * 10 + (60 if degraded else 0),
            pressure=21.3 - u,
        )

    elif phase is MissionPhase.ORBIT_INSERTION:
        u = t - 40
        values = dict(
            altitude=70000 + u * u * 100 * T,
            speed=max(0.0, 8200 + u * 150 * T),
            acceleration=1.2 * T,
            fuel=max(0.0, 17.5 - u * 0.8),
            temperature=385 - u * 5 + (40 if degraded else 0),
            pressure=max(0.0, 6.3 - u * 0.3),
        )

    else:
        values = dict(COMPLETED_TELEMETRY)

    values["fuel"] = min(100.0, max(0.0, values["fuel"]))
    values["pressure"] = max(0.0, values["pressure"])
    return TelemetrySnapshot(timestamp=t, **values)


def trajectory_point_at(t: float, altitude: float) -> Optional[TrajectoryPoint]:
    """Scene-space position for a powered phase, or None outside liftoff..orbit-insertion."""
    phase = phase_at(t)
    if not phase.powered:
        return None

    u = t - PHASE_START_TIMES[phase]
    y = altitude / 10
    if phase is MissionPhase.LIFTOFF:
        return TrajectoryPoint(0.0, y, 0.0)
    if phase is MissionPhase.MAX_Q:
        return TrajectoryPoint(u * 0.5, y, u * 0.2)
    if phase is MissionPhase.STAGE_SEPARATION:
        return TrajectoryPoint(7.5 + u * 0.8, y, 3 + u * 0.3)
    return TrajectoryPoint(19.5 + u * 1.2, y, 7.5 + u * 0.5)


def derive_anomaly_status(telemetry: TelemetrySnapshot, t: float, draw: float,
                          config: Optional[SimulatorConfig] = None) -> AnomalyStatus:
    """
    Rule-based anomaly classification for one tick.

    Args:
        telemetry: Snapshot just computed for this tick
        t: Mission time (s)
        draw: Uniform value in [0, 1) deciding a guidance glitch
        config: Simulator configuration (defaults used if None)

    Returns:
        AnomalyStatus with ``overall`` set to the worst subsystem severity
    """
    config = config or SimulatorConfig()

    if telemetry.temperature > 600:
        temperature = Severity.CRITICAL
    elif telemetry.temperature > 500:
        temperature = Severity.WARNING
    else:
        temperature = Severity.NOMINAL

    if telemetry.fuel < 10 and t < 20:
        fuel = Severity.CRITICAL
    elif telemetry.fuel < 30 and t < 30:
        fuel = Severity.WARNING
    else:
        fuel = Severity.NOMINAL

    lo, hi = config.guidance_window
    if lo < t < hi and draw > 1 - config.guidance_glitch_probability:
        guidance = Severity.WARNING
    else:
        guidance = Severity.NOMINAL

    # Thrust decay is not reflected here; the engine channel stays nominal.
    engine = Severity.NOMINAL

    return AnomalyStatus.from_subsystems(engine=engine, fuel=fuel, guidance=guidance, temperature=temperature)


class LaunchSimulator:
    """
    Frame-driven, phase-scripted launch simulator for a single vehicle.

    The host calls :meth:`tick` once per rendered frame; telemetry is only
    recomputed once at least ``config.tick_interval`` of simulated time has
    accumulated since the last commit.
    """

    def __init__(self, rocket: Optional[RocketModel] = None,
                 config: Optional[SimulatorConfig] = None,
                 rng: Union[None, int, np.random.Generator] = None):
        """
        Initialize the simulator.

        Args:
            rocket: Selected vehicle, read only
            config: Simulator configuration
            rng: Random generator or seed; falls back to ``config.seed``
        """
        self.rocket = rocket
        self.config = config or SimulatorConfig()

        if rng is None:
            rng = np.random.default_rng(self.config.seed)
        elif isinstance(rng, (int, np.integer)):
            rng = np.random.default_rng(rng)
        elif not hasattr(rng, "random"):
            raise TypeError(f"rng must be None, an int seed, or expose random(), got {type(rng)}")
        self.rng = rng

        self.is_running = False
        self.analysis = None
        self._clear()

    def _clear(self):
        self.simulation_time = 0.0
        self.phase = MissionPhase.PRE_LAUNCH
        self.telemetry = TelemetrySnapshot()
        self.anomaly_status = AnomalyStatus()
        self.thrust_state = ThrustAnomalyState()
        self._last_committed = 0.0
        self._kinematics = {"altitude": 0.0, "speed": 0.0, "thrust": 1.0}
        self._history: List[TelemetrySnapshot] = []
        self._trajectory: List[TrajectoryPoint] = []

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self):
        """Begin a fresh run from T+0."""
        self._clear()
        self.is_running = True
        logger.info("Simulation started%s", f" for {self.rocket.name}" if self.rocket else "")

    def stop(self):
        """Pause the run; state is kept as is."""
        self.is_running = False
        logger.info("Simulation stopped at t=%.2fs", self.simulation_time)

    def reset(self):
        """Discard the run and any analysis result attached to it."""
        self._clear()
        self.is_running = False
        self.analysis = None
        logger.info("Simulation reset")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def history(self) -> Tuple[TelemetrySnapshot, ...]:
        return tuple(self._history)

    def trajectory(self) -> Tuple[TrajectoryPoint, ...]:
        return tuple(self._trajectory)

    @property
    def kinematics(self) -> dict:
        """Altitude, speed and thrust fraction of the last committed tick."""
        return dict(self._kinematics)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self, delta_time: float) -> Optional[TickResult]:
        """
        Advance the mission clock by one host frame.

        Args:
            delta_time: Wall-clock frame delta (s), must be non-negative

        Returns:
            TickResult when the tick committed new telemetry, otherwise None
        """
        if delta_time < 0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time}")
        if not self.is_running:
            return None

        self.simulation_time += delta_time
        if self.simulation_time - self._last_committed + _TIME_EPS < self.config.tick_interval:
            return None

        self._last_committed = self.simulation_time
        return self._commit(self.simulation_time)

    def _commit(self, t: float) -> TickResult:
        if t < self.config.tick_interval:
            self._kinematics = {"altitude": 0.0, "speed": 0.0, "thrust": 1.0}

        phase = phase_at(t)
        if phase is not self.phase:
            logger.info("Phase %s -> %s at t=%.2fs", self.phase.value, phase.value, t)
        self.phase = phase

        fault_fired = False
        if phase is MissionPhase.LIFTOFF and t > self.config.fault_earliest_time:
            fault_fired = self.rng.random() > 1 - self.config.fault_probability
            if fault_fired and not self.thrust_state.armed:
                self.thrust_state.anomaly_trigger_time = t
                logger.info("Thrust fault armed at t=%.2fs", t)

        if phase.powered:
            self._decay_thrust(t)

        telemetry = telemetry_at(t, self.thrust_state.thrust_multiplier, fault_fired)
        self.telemetry = telemetry
        self._history.append(telemetry)
        self._kinematics = {
            "altitude": telemetry.altitude,
            "speed": telemetry.speed,
            "thrust": self.thrust_state.thrust_multiplier,
        }

        point = trajectory_point_at(t, telemetry.altitude)
        if point is not None:
            self._trajectory.append(point)

        self.anomaly_status = derive_anomaly_status(telemetry, t, self.rng.random(), self.config)
        if self.anomaly_status.overall is Severity.CRITICAL:
            logger.warning("Critical anomaly at t=%.2fs: %s", t, self.anomaly_status.as_dict())

        return TickResult(
            phase=phase,
            telemetry=telemetry,
            anomaly_status=self.anomaly_status,
            trajectory_point=point,
        )

    def _decay_thrust(self, t: float):
        state = self.thrust_state
        if not state.armed or t - state.anomaly_trigger_time <= self.config.fault_decay_delay:
            return
        state.thrust_multiplier = max(self.config.thrust_floor,
                                      state.thrust_multiplier - self.config.decay_step)
        logger.debug("Thrust multiplier %.2f at t=%.2fs", state.thrust_multiplier, t)

    def run(self, duration: float, frame_dt: float = 1 / 60) -> List[TickResult]:
        """
        Drive the simulator at a fixed frame rate for ``duration`` simulated seconds.

        Returns:
            List of committed TickResults in order
        """
        if frame_dt <= 0:
            raise ValueError(f"frame_dt must be positive, got {frame_dt}")
        if not self.is_running:
            self.start()

        results = []
        n_frames = int(np.ceil(duration / frame_dt))
        for _ in range(n_frames):
            result = self.tick(frame_dt)
            if result is not None:
                results.append(result)
        return results
