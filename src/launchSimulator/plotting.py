# Licensed under the PolyForm Noncommercial License 1.0.0
"""Plotting functions for launch simulation results."""

from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .core import phase_at
from .models import MissionPhase, TelemetrySnapshot, TrajectoryPoint

# (field, title, y label, scale)
_PANELS = [
    ("altitude", "Altitude vs Time", "Altitude [km]", 1e-3),
    ("speed", "Speed vs Time", "Speed [m/s]", 1.0),
    ("acceleration", "Acceleration vs Time", "Acceleration [g]", 1.0),
    ("fuel", "Fuel vs Time", "Fuel [%]", 1.0),
    ("temperature", "Temperature vs Time", "Temperature [°C]", 1.0),
    ("pressure", "Pressure vs Time", "Pressure [kPa]", 1.0),
]


def plot_telemetry(history: Sequence[TelemetrySnapshot],
                   trajectory: Sequence[TrajectoryPoint] = (),
                   show: bool = True, save_path: Optional[str] = None) -> None:
    """
    Plot a telemetry history, coloured by mission phase.

    Args:
        history: Telemetry snapshots in append order
        trajectory: Scene-space trajectory points
        show: Whether to display the plot
        save_path: If provided, save the plot to this path
    """
    if len(history) == 0:
        raise ValueError("history is empty; nothing to plot")

    t = np.array([s.timestamp for s in history])
    phases = np.array([phase_at(ti).index for ti in t])

    fig, axes = plt.subplots(3, 3, figsize=(15, 15))

    # Define colours for phases
    unique_phases = np.unique(phases)
    colors = plt.cm.viridis(np.linspace(0, 1, len(unique_phases)))
    names = list(MissionPhase)

    for (name, title, ylabel, scale), ax in zip(_PANELS, axes.flat):
        values = np.array([getattr(s, name) for s in history]) * scale
        for phase_idx, color in zip(unique_phases, colors):
            mask = phases == phase_idx
            ax.plot(t[mask], values[mask], color=color, label=names[phase_idx].value)
        ax.set_title(title)
        ax.set_xlabel("Time [s]")
        ax.set_ylabel(ylabel)
        ax.legend()

    # Speed vs Altitude
    speed = np.array([s.speed for s in history])
    altitude = np.array([s.altitude for s in history]) / 1000
    for phase_idx, color in zip(unique_phases, colors):
        mask = phases == phase_idx
        axes[2, 0].plot(speed[mask], altitude[mask], color=color, label=names[phase_idx].value)
    axes[2, 0].set_title("Speed vs Altitude")
    axes[2, 0].set_xlabel("Speed [m/s]")
    axes[2, 0].set_ylabel("Altitude [km]")
    axes[2, 0].legend()

    # Scene-space trajectory, side and top views
    if len(trajectory) > 0:
        xyz = np.array([[p.x, p.y, p.z] for p in trajectory])
        axes[2, 1].plot(xyz[:, 0], xyz[:, 1], color="tab:orange")
        axes[2, 2].plot(xyz[:, 0], xyz[:, 2], color="tab:orange")
    axes[2, 1].set_title("Trajectory (side view)")
    axes[2, 1].set_xlabel("x")
    axes[2, 1].set_ylabel("y")
    axes[2, 2].set_title("Trajectory (top view)")
    axes[2, 2].set_xlabel("x")
    axes[2, 2].set_ylabel("z")

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
    if show:
        plt.show()

    plt.close(fig)
