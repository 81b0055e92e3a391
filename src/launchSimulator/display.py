# Licensed under the PolyForm Noncommercial License 1.0.0
"""Values derived from simulator state for display layers."""

from typing import Optional

from .models import AnomalyStatus, MissionPhase, PHASE_START_TIMES, RocketModel, Severity

# Fraction of rated thrust shown on the thrust curve per phase
THRUST_FRACTIONS = {
    MissionPhase.LIFTOFF: 0.8,
    MissionPhase.MAX_Q: 0.8,
    MissionPhase.STAGE_SEPARATION: 0.5 * 0.6,
    MissionPhase.ORBIT_INSERTION: 0.5 * 0.3,
}

# (phase, label, milestone clock) in mission order
TIMELINE = [
    (MissionPhase.PRE_LAUNCH, "Pre-Launch", "T-00:00"),
] + [
    (phase, label, "T+" + "{:02d}:{:02d}".format(*divmod(int(PHASE_START_TIMES[phase]), 60)))
    for phase, label in [
        (MissionPhase.IGNITION, "Ignition"),
        (MissionPhase.LIFTOFF, "Liftoff"),
        (MissionPhase.MAX_Q, "Max-Q"),
        (MissionPhase.STAGE_SEPARATION, "Stage Sep"),
        (MissionPhase.ORBIT_INSERTION, "Orbit Insert"),
        (MissionPhase.COMPLETED, "Complete"),
    ]
]


def thrust_curve(phase: MissionPhase, rocket: Optional[RocketModel]) -> float:
    """Displayed engine thrust (kN) for the current phase."""
    if rocket is None:
        return 0.0
    return rocket.thrust_rating * THRUST_FRACTIONS.get(phase, 0.0)


def format_mission_time(seconds: float) -> str:
    """Mission clock as MM:SS."""
    seconds = max(0.0, seconds)
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


def alert_message(status: AnomalyStatus) -> Optional[str]:
    """Headline for a critical anomaly, or None when nothing is critical."""
    if status.overall is not Severity.CRITICAL:
        return None
    if status.engine is Severity.CRITICAL:
        return "Engine Thrust Decay Detected"
    if status.temperature is Severity.CRITICAL:
        return "Excessive Temperature Rise"
    if status.fuel is Severity.CRITICAL:
        return "Fuel System Failure"
    if status.guidance is Severity.CRITICAL:
        return "Guidance System Malfunction"
    return "System Anomaly Detected"
