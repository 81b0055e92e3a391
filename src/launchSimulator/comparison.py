# Licensed under the PolyForm Noncommercial License 1.0.0
"""Side-by-side flights of several vehicles."""

import itertools
import logging
from typing import Dict, Optional

from .core import LaunchSimulator
from .models import RocketModel, SimulatorConfig, TickResult

logger = logging.getLogger(__name__)


class ComparisonSession:
    """
    Owns one independent :class:`LaunchSimulator` per compared vehicle.

    Simulators share no state; each gets its own random generator seeded from
    ``seed`` plus its insertion order so runs are reproducible.
    """

    def __init__(self, config: Optional[SimulatorConfig] = None, seed: Optional[int] = None):
        self.config = config or SimulatorConfig()
        self.seed = seed
        self.simulators: Dict[str, LaunchSimulator] = {}
        self._counter = itertools.count()

    def add_rocket(self, rocket: RocketModel) -> str:
        """Add a vehicle and return its entry id."""
        n = next(self._counter)
        entry_id = f"{rocket.id}-{n}"
        rng = None if self.seed is None else self.seed + n
        self.simulators[entry_id] = LaunchSimulator(rocket, self.config, rng=rng)
        logger.info("Comparison entry %s added", entry_id)
        return entry_id

    def remove_rocket(self, entry_id: str):
        if entry_id not in self.simulators:
            raise KeyError(f"No comparison entry {entry_id!r}")
        del self.simulators[entry_id]

    def clear(self):
        self.simulators.clear()

    def start_all(self):
        for simulator in self.simulators.values():
            simulator.start()

    def stop_all(self):
        for simulator in self.simulators.values():
            simulator.stop()

    def tick_all(self, delta_time: float) -> Dict[str, Optional[TickResult]]:
        """Advance every simulator by the same frame delta."""
        return {entry_id: sim.tick(delta_time) for entry_id, sim in self.simulators.items()}

    def summary(self) -> Dict[str, Dict]:
        """Latest phase, mission time and telemetry per entry."""
        return {
            entry_id: {
                "rocket": sim.rocket.name,
                "phase": sim.phase.value,
                "simulationTime": sim.simulation_time,
                "telemetry": sim.telemetry.as_dict(),
            }
            for entry_id, sim in self.simulators.items()
        }
