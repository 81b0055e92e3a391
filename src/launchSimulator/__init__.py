# Licensed under the PolyForm Noncommercial License 1.0.0
"""Launch Simulator - A deterministic, phase-scripted rocket launch telemetry core."""

from .models import (
    G,
    R_earth,
    M_earth,
    g0,
    AnomalyStatus,
    MissionPhase,
    RocketModel,
    Severity,
    SimulatorConfig,
    TelemetrySnapshot,
    ThrustAnomalyState,
    TickResult,
    TrajectoryPoint,
)

from .core import LaunchSimulator, derive_anomaly_status, phase_at, telemetry_at
from .physics import PhysicsState, ForceResult, compute_forces, integrate, simulate_ascent
from .catalog import ROCKET_MODELS, get_rocket
from .analysis import AnalysisDispatcher, TelemetryAnalysis
from .comparison import ComparisonSession
from .export import export_report, to_csv, to_json
from .plotting import plot_telemetry

__version__ = "0.1.0"
__all__ = [
    "LaunchSimulator",
    "ComparisonSession",
    "AnalysisDispatcher",
    "TelemetryAnalysis",
    "AnomalyStatus",
    "MissionPhase",
    "RocketModel",
    "Severity",
    "SimulatorConfig",
    "TelemetrySnapshot",
    "ThrustAnomalyState",
    "TickResult",
    "TrajectoryPoint",
    "PhysicsState",
    "ForceResult",
    "ROCKET_MODELS",
    "get_rocket",
    "derive_anomaly_status",
    "phase_at",
    "telemetry_at",
    "compute_forces",
    "integrate",
    "simulate_ascent",
    "export_report",
    "to_csv",
    "to_json",
    "plot_telemetry",
    "G",
    "R_earth",
    "M_earth",
    "g0",
]
