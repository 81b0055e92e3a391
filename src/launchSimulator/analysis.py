# Licensed under the PolyForm Noncommercial License 1.0.0
"""
Hand-off of telemetry snapshots to an external risk-analysis service.

The simulator never waits on the service and never reads its verdict back;
the dispatcher only decides *when* to send, builds the payload, and keeps the
last result for display.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

from .core import LaunchSimulator
from .models import TickResult

logger = logging.getLogger(__name__)

RISK_LEVELS = ("low", "medium", "high", "critical")

# Only the first this-many seconds of each interval are eligible for dispatch
DISPATCH_WINDOW = 0.5


@dataclass
class Prediction:
    system: str
    risk: str
    prediction: str
    confidence: float


@dataclass
class TelemetryAnalysis:
    """Risk assessment returned by the analysis service."""
    overall_risk: str = "low"
    predictions: List[Prediction] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "TelemetryAnalysis":
        """Parse the service's JSON reply (camelCase keys)."""
        overall = data.get("overallRisk", "low")
        if overall not in RISK_LEVELS:
            raise ValueError(f"overallRisk must be one of {RISK_LEVELS}, got {overall!r}")

        predictions = []
        for p in data.get("predictions", []):
            risk = p.get("risk", "low")
            if risk not in RISK_LEVELS:
                raise ValueError(f"prediction risk must be one of {RISK_LEVELS}, got {risk!r}")
            confidence = min(1.0, max(0.0, float(p.get("confidence", 0.0))))
            predictions.append(Prediction(p.get("system", ""), risk, p.get("prediction", ""), confidence))

        return cls(overall, predictions, list(data.get("recommendations", [])))

    def as_dict(self) -> Dict:
        return {
            "overallRisk": self.overall_risk,
            "predictions": [
                {"system": p.system, "risk": p.risk, "prediction": p.prediction, "confidence": p.confidence}
                for p in self.predictions
            ],
            "recommendations": list(self.recommendations),
        }


def build_payload(result: TickResult, rocket_name: Optional[str]) -> Dict:
    """Telemetry message sent to the analysis service."""
    payload = result.telemetry.as_dict()
    payload["missionPhase"] = result.phase.value
    payload["rocketModel"] = rocket_name or "Unknown"
    return payload


AnalysisSink = Callable[[Dict], Union[None, Dict, TelemetryAnalysis]]


class AnalysisDispatcher:
    """Forward a snapshot to ``sink`` once per analysis interval.

    ``sink`` may return a reply (dict or TelemetryAnalysis), which is attached to
    the simulator as ``simulator.analysis``; returning None means the reply will
    arrive later through :meth:`receive`. Errors raised by the sink are logged and
    dropped.
    """

    def __init__(self, simulator: LaunchSimulator, sink: AnalysisSink):
        self.simulator = simulator
        self.sink = sink
        self.interval = simulator.config.analysis_interval
        self._last_window = None
        self._last_time = None

    def should_dispatch(self, t: float) -> bool:
        if t <= 0:
            return False
        window = math.floor(t / self.interval)
        return t - window * self.interval < DISPATCH_WINDOW and window != self._last_window

    def observe(self, result: Optional[TickResult]) -> bool:
        """Feed one tick result; returns True if a snapshot was dispatched."""
        if result is None or not self.simulator.is_running:
            return False

        t = result.telemetry.timestamp
        if self._last_time is not None and t <= self._last_time:
            # Simulator was restarted
            self._last_window = None
        self._last_time = t
        if not self.should_dispatch(t):
            return False

        self._last_window = math.floor(t / self.interval)
        rocket_name = self.simulator.rocket.name if self.simulator.rocket else None
        payload = build_payload(result, rocket_name)

        try:
            reply = self.sink(payload)
        except Exception:
            logger.exception("Analysis dispatch failed at t=%.2fs", t)
            return True

        if reply is not None:
            self.receive(reply)
        return True

    def receive(self, reply: Union[Dict, TelemetryAnalysis]):
        """Attach a (possibly late) analysis reply to the simulator."""
        if isinstance(reply, dict):
            try:
                reply = TelemetryAnalysis.from_dict(reply)
            except (AttributeError, TypeError, ValueError):
                logger.exception("Discarding malformed analysis reply")
                return
        self.simulator.analysis = reply
        logger.info("Analysis received: overall risk %s", reply.overall_risk)
