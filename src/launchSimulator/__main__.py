# Licensed under the PolyForm Noncommercial License 1.0.0
"""
Command-line interface for the launch simulator.
"""

import argparse
import logging
import os


def main(argv=None):
    """Fly one catalog vehicle through a full launch and report the result."""
    import numpy as np

    from .catalog import get_rocket, list_rockets
    from .core import LaunchSimulator
    from .display import format_mission_time, thrust_curve
    from .export import export_report
    from .models import SimulatorConfig
    from .physics import simulate_ascent

    parser = argparse.ArgumentParser(prog="launchSimulator", description=main.__doc__)
    parser.add_argument("--rocket", default="falcon-9", choices=list_rockets())
    parser.add_argument("--seed", type=int, default=None, help="Seed for fault and glitch draws")
    parser.add_argument("--fps", type=float, default=60.0, help="Host frame rate driving the simulator")
    parser.add_argument("--duration", type=float, default=65.0, help="Simulated seconds to run")
    parser.add_argument("--export", default=None, help="Write a mission report (.json or .csv)")
    parser.add_argument("--plot", action="store_true", help="Plot the telemetry history")
    parser.add_argument("--ascent", action="store_true", help="Also integrate the continuous force model")
    args = parser.parse_args(argv)
    if args.fps <= 0:
        parser.error(f"--fps must be positive, got {args.fps}")

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    print("Launch Simulator")
    print("================")

    rocket = get_rocket(args.rocket)
    simulator = LaunchSimulator(rocket, SimulatorConfig(seed=args.seed))

    print(f"Vehicle: {rocket.name} ({rocket.type})")
    print("Running simulation...")
    simulator.start()
    results = simulator.run(args.duration, frame_dt=1.0 / args.fps)

    history = simulator.history()
    if not results:
        parser.error(f"--duration {args.duration} is shorter than one simulator tick")

    worst = max(results, key=lambda r: r.anomaly_status.overall.rank)

    print(f"\nSimulation Complete!")
    print(f"Mission time: T+{format_mission_time(simulator.simulation_time)}")
    print(f"Final phase: {simulator.phase.value}")
    print(f"Committed ticks: {len(history)}")
    print(f"Peak altitude: {max(s.altitude for s in history) / 1000:.1f} km")
    print(f"Peak temperature: {max(s.temperature for s in history):.0f} °C")
    print(f"Peak displayed thrust: {max(thrust_curve(r.phase, rocket) for r in results):.0f} kN")
    print(f"Thrust multiplier: {simulator.thrust_state.thrust_multiplier:.2f}")
    print(f"Worst status: {worst.anomaly_status.overall.value} at T+{worst.telemetry.timestamp:.1f}s")

    if args.ascent:
        ascent = simulate_ascent(rocket)
        print(f"\nContinuous model: {ascent['message']}")
        print(f"Peak altitude: {np.max(ascent['altitude']) / 1000:.1f} km")
        print(f"Peak speed: {np.max(ascent['speed']):.0f} m/s")

    if args.export:
        path = export_report(simulator, args.export)
        print(f"Report written to {path}")

    if args.plot:
        from .plotting import plot_telemetry
        print("Plotting results...")
        plot_telemetry(history, simulator.trajectory(), show=True)


if __name__ == "__main__":
    main()
