# Licensed under the PolyForm Noncommercial License 1.0.0
"""Mission report export to CSV and JSON."""

import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .core import LaunchSimulator
from .models import TELEMETRY_FIELDS, TelemetrySnapshot

logger = logging.getLogger(__name__)

FORMATS = ("json", "csv")


def to_csv(history: Iterable[TelemetrySnapshot]) -> str:
    """Flat CSV of the telemetry history, one row per snapshot in append order."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(TELEMETRY_FIELDS)
    for snapshot in history:
        writer.writerow([getattr(snapshot, name) for name in TELEMETRY_FIELDS])
    return buf.getvalue()


def build_report(simulator: LaunchSimulator, exported_at: Optional[datetime] = None) -> Dict:
    """Collect everything a mission report contains as plain JSON types."""
    exported_at = exported_at or datetime.now(timezone.utc)
    analysis = simulator.analysis
    return {
        "rocket": simulator.rocket.as_dict() if simulator.rocket else None,
        "missionPhase": simulator.phase.value,
        "telemetryHistory": [s.as_dict() for s in simulator.history()],
        "trajectoryPoints": [p.as_dict() for p in simulator.trajectory()],
        "aiAnalysis": analysis.as_dict() if analysis is not None else None,
        "exportedAt": exported_at.isoformat(),
    }


def to_json(simulator: LaunchSimulator, indent: Optional[int] = 2, **kwargs) -> str:
    return json.dumps(build_report(simulator, **kwargs), indent=indent)


def export_report(simulator: LaunchSimulator, path: Union[str, Path], fmt: Optional[str] = None) -> Path:
    """
    Write a mission report to ``path``.

    Args:
        simulator: Simulator whose history and trajectory are exported
        path: Output file
        fmt: "json" or "csv"; inferred from the file suffix if None

    Returns:
        The path written
    """
    path = Path(path)
    fmt = (fmt or path.suffix.lstrip(".")).lower()
    if fmt not in FORMATS:
        raise ValueError(f"format must be one of {FORMATS}, got {fmt!r}")

    if fmt == "json":
        text = to_json(simulator)
    else:
        text = to_csv(simulator.history())

    path.write_text(text, encoding="utf-8")
    logger.info("Exported %d snapshots to %s", len(simulator.history()), path)
    return path
