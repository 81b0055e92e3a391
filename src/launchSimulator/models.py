# Licensed under the PolyForm Noncommercial License 1.0.0
"""Data models and constants for the launch simulator."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Tuple

# Physical constants
G = 6.674e-11  # Gravitational constant (m^3 kg^-1 s^-2)
R_earth = 6.371e6  # Earth's radius (m)
M_earth = 5.972e24  # Earth's mass (kg)
g0 = 9.81  # Gravity used to express accelerations in g

# Atmosphere
P0 = 101325.0  # Sea level pressure (Pa)
rho0 = 1.225  # Sea level density (kg/m^3)
H = 8500.0  # Scale height (m)

# Aerodynamics
CD = 0.75  # Drag coefficient
A_ref = 10.0  # Reference area (m^2)


class MissionPhase(str, Enum):
    """Named stage of flight, ordered by elapsed mission time."""

    PRE_LAUNCH = "pre-launch"
    IGNITION = "ignition"
    LIFTOFF = "liftoff"
    MAX_Q = "max-q"
    STAGE_SEPARATION = "stage-separation"
    ORBIT_INSERTION = "orbit-insertion"
    COMPLETED = "completed"

    @property
    def index(self) -> int:
        return _PHASE_ORDER.index(self)

    @property
    def powered(self) -> bool:
        """True for the phases that lay down a trajectory."""
        return MissionPhase.LIFTOFF.index <= self.index <= MissionPhase.ORBIT_INSERTION.index


_PHASE_ORDER = list(MissionPhase)

# Start time (s) of each phase after pre-launch
PHASE_START_TIMES = {
    MissionPhase.IGNITION: 0.0,
    MissionPhase.LIFTOFF: 3.0,
    MissionPhase.MAX_Q: 10.0,
    MissionPhase.STAGE_SEPARATION: 25.0,
    MissionPhase.ORBIT_INSERTION: 40.0,
    MissionPhase.COMPLETED: 60.0,
}


class Severity(str, Enum):
    """Anomaly severity, ordered nominal < warning < critical."""

    NOMINAL = "nominal"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = list(Severity)


def most_severe(*levels: Severity) -> Severity:
    """Return the highest severity among ``levels`` (nominal if empty)."""
    return max(levels, key=lambda s: s.rank, default=Severity.NOMINAL)


@dataclass(frozen=True)
class TelemetrySnapshot:
    """One tick's worth of readings.

    Attributes:
        altitude: Altitude above the pad (m)
        speed: Speed (m/s)
        acceleration: Acceleration (g)
        fuel: Fuel remaining (%)
        temperature: Vehicle temperature (°C)
        pressure: Ambient pressure (kPa)
        timestamp: Mission time at which the snapshot was taken (s)
    """
    altitude: float = 0.0
    speed: float = 0.0
    acceleration: float = 0.0
    fuel: float = 100.0
    temperature: float = 20.0
    pressure: float = 101.3
    timestamp: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


# Field order used for tabular export
TELEMETRY_FIELDS = ("timestamp", "altitude", "speed", "acceleration", "fuel", "temperature", "pressure")


@dataclass(frozen=True)
class TrajectoryPoint:
    """Scene-space position sample."""
    x: float
    y: float
    z: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class AnomalyStatus:
    """Per-subsystem severity plus the overall (worst) severity."""
    overall: Severity = Severity.NOMINAL
    engine: Severity = Severity.NOMINAL
    fuel: Severity = Severity.NOMINAL
    guidance: Severity = Severity.NOMINAL
    temperature: Severity = Severity.NOMINAL

    @classmethod
    def from_subsystems(cls, engine: Severity, fuel: Severity,
                        guidance: Severity, temperature: Severity) -> "AnomalyStatus":
        return cls(
            overall=most_severe(engine, fuel, guidance, temperature),
            engine=engine,
            fuel=fuel,
            guidance=guidance,
            temperature=temperature,
        )

    def as_dict(self) -> Dict[str, str]:
        return {k: v.value for k, v in asdict(self).items()}


@dataclass
class ThrustAnomalyState:
    """Simulated partial engine-thrust fault.

    Attributes:
        anomaly_trigger_time: Mission time the fault fired, or None
        thrust_multiplier: Remaining fraction of nominal thrust, in [0.3, 1.0]
    """
    anomaly_trigger_time: Optional[float] = None
    thrust_multiplier: float = 1.0

    @property
    def armed(self) -> bool:
        return self.anomaly_trigger_time is not None


@dataclass(frozen=True)
class RocketModel:
    """Static launch vehicle specification.

    Attributes:
        id: Catalog key
        name: Display name
        type: Vehicle class
        height: Height (m)
        diameter: Diameter (m)
        mass: Lift-off mass (kg)
        payload: Payload to LEO (kg)
        thrust_rating: Lift-off thrust (kN)
        specific_impulse: Specific impulse (s)
        fuel_capacity: Propellant load (kg)
        color: RGB tuple in [0, 1]
        geometry: Mesh key used by the renderer
        description: Free text
    """
    id: str
    name: str
    type: str
    height: float
    diameter: float
    mass: float
    payload: float
    thrust_rating: float
    specific_impulse: float
    fuel_capacity: float
    color: Tuple[float, float, float] = (0.5, 0.5, 0.5)
    geometry: str = ""
    description: str = ""

    def as_dict(self) -> Dict:
        data = asdict(self)
        data["color"] = dict(zip("rgb", self.color))
        return data


@dataclass(frozen=True)
class TickResult:
    """Everything produced by one committed tick."""
    phase: MissionPhase
    telemetry: TelemetrySnapshot
    anomaly_status: AnomalyStatus
    trajectory_point: Optional[TrajectoryPoint] = None


@dataclass
class SimulatorConfig:
    """Tunable constants of the phase simulator.

    Defaults reproduce the scripted launch profile.
    """
    tick_interval: float = 0.1  # Minimum simulated time between commits (s)
    fault_probability: float = 0.08  # Per-tick chance of a thrust fault during liftoff
    fault_earliest_time: float = 5.0  # Faults are only drawn after this mission time (s)
    fault_decay_delay: float = 0.5  # Delay between fault and first decay step (s)
    decay_step: float = 0.05  # Thrust multiplier lost per committed tick
    thrust_floor: float = 0.3
    guidance_glitch_probability: float = 0.02
    guidance_window: Tuple[float, float] = (15.0, 45.0)
    analysis_interval: float = 5.0  # Simulated seconds between analysis snapshots
    seed: Optional[int] = None

    def __post_init__(self):
        if self.tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {self.tick_interval}")
        if not 0.0 <= self.thrust_floor <= 1.0:
            raise ValueError(f"thrust_floor must lie in [0, 1], got {self.thrust_floor}")
        for name in ("fault_probability", "guidance_glitch_probability"):
            p = getattr(self, name)
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {p}")
