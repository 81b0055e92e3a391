# Licensed under the PolyForm Noncommercial License 1.0.0
"""
Continuous force model and integrators.

This is the alternative to the scripted phase tables in :mod:`core`: forces are
computed from thrust, quadratic drag, inverse-square gravity and an isothermal
exponential atmosphere, and the trajectory is integrated rather than looked up.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

import numpy as np
from scipy.integrate import solve_ivp

from .models import A_ref, CD, G, H, M_earth, P0, R_earth, RocketModel, g0, rho0

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


@dataclass
class PhysicsState:
    """Inputs of the force model.

    Attributes:
        altitude: Altitude (m)
        speed: Speed (m/s)
        fuel: Fuel remaining (%)
        rocket_mass: Nominal vehicle mass (kg)
        thrust: Engine thrust (N)
        time: Mission time (s), informational
    """
    altitude: float
    speed: float
    fuel: float
    rocket_mass: float
    thrust: float
    time: float = 0.0


@dataclass(frozen=True)
class ForceResult:
    """Outputs of the force model.

    Attributes:
        acceleration: Net acceleration (g)
        temperature: Vehicle skin temperature (°C)
        pressure: Ambient pressure (kPa)
        drag: Drag force (kN)
        gravity: Local gravitational acceleration (m/s^2)
    """
    acceleration: float
    temperature: float
    pressure: float
    drag: float
    gravity: float


def gravity(altitude: ArrayLike) -> ArrayLike:
    """Calculate gravitational acceleration at given altitude."""
    return G * M_earth / (R_earth + altitude) ** 2


def atmosphere(altitude: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
    """
    Isothermal exponential atmosphere.

    Args:
        altitude: Altitude above sea level (m)

    Returns:
        Tuple of (density in kg/m^3, pressure in Pa)
    """
    decay = np.exp(-np.asarray(altitude, dtype=float) / H)
    return rho0 * decay, P0 * decay


def ambient_temperature(altitude: ArrayLike) -> np.ndarray:
    """Lapse-rate temperature bands (°C)."""
    altitude = np.atleast_1d(np.asarray(altitude, dtype=float))
    T = np.empty_like(altitude)

    # Troposphere
    mask = altitude < 11000
    T[mask] = 15 - 0.0065 * altitude[mask]

    # Lower stratosphere
    mask = (altitude >= 11000) & (altitude < 20000)
    T[mask] = -56.5

    # Upper stratosphere
    mask = (altitude >= 20000) & (altitude < 32000)
    T[mask] = -56.5 + 0.001 * (altitude[mask] - 20000)

    mask = altitude >= 32000
    T[mask] = -44.5 + 0.0028 * (altitude[mask] - 32000)

    return T


def _forces(altitude, speed, fuel, rocket_mass, thrust) -> Dict[str, np.ndarray]:
    """Vectorised force model. All arguments broadcast against each other."""
    altitude = np.atleast_1d(np.asarray(altitude, dtype=float))
    speed = np.atleast_1d(np.asarray(speed, dtype=float))
    fuel = np.atleast_1d(np.asarray(fuel, dtype=float))

    g = gravity(altitude)
    density, pressure = atmosphere(altitude)
    drag = 0.5 * density * speed ** 2 * CD * A_ref

    effective_mass = rocket_mass * (0.5 + fuel / 200)

    # Engine cuts off once the tanks are empty
    applied_thrust = np.where(fuel > 0, thrust, 0.0)
    net_force = applied_thrust - drag - effective_mass * g
    acceleration = net_force / effective_mass / g0

    temperature = ambient_temperature(altitude)
    mach = speed / np.sqrt(1.4 * 287 * (temperature + 273.15))
    dynamic_heating = 0.5 * density * speed ** 3 / 1e6
    temperature = temperature + dynamic_heating * 10

    transonic = (mach > 0.8) & (mach < 1.2)
    temperature = np.where(transonic, temperature + 100 * (1 - np.abs(mach - 1)), temperature)

    return {
        "acceleration": acceleration,
        "temperature": temperature,
        "pressure": pressure / 1000,
        "drag": drag / 1000,
        "gravity": g,
    }


def compute_forces(state: PhysicsState) -> ForceResult:
    """
    Evaluate the force model for a single state.

    Args:
        state: Altitude, speed, fuel, mass and thrust of the vehicle

    Returns:
        ForceResult with acceleration in g, pressure in kPa and drag in kN
    """
    out = _forces(state.altitude, state.speed, state.fuel, state.rocket_mass, state.thrust)
    return ForceResult(**{k: float(v[0]) for k, v in out.items()})


def integrate(altitude: float, speed: float, acceleration: float, dt: float) -> Tuple[float, float]:
    """
    Semi-implicit Euler step.

    Args:
        altitude: Current altitude (m)
        speed: Current speed (m/s)
        acceleration: Acceleration over the step (g)
        dt: Step size (s)

    Returns:
        Tuple of (altitude, speed), both floored at zero
    """
    if dt < 0:
        raise ValueError(f"dt must be non-negative, got {dt}")
    new_speed = speed + acceleration * dt * g0
    avg_speed = (speed + new_speed) / 2
    new_altitude = max(0.0, altitude + avg_speed * dt)
    return new_altitude, max(0.0, new_speed)


def default_burn_time(rocket: RocketModel) -> float:
    """Seconds to empty the tanks at rated thrust and specific impulse."""
    mass_flow = rocket.thrust_rating * 1000 / (rocket.specific_impulse * g0)
    return rocket.fuel_capacity / mass_flow


def simulate_ascent(rocket: RocketModel, t_span: Tuple[float, float] = (0.0, 120.0),
                    burn_time: Optional[float] = None, max_step: float = 1.0,
                    method: str = "ivp", **solver_kwargs) -> Dict:
    """
    Integrate a vertical ascent with the continuous force model.

    Args:
        rocket: Vehicle to fly; ``mass`` and ``thrust_rating`` are used
        t_span: Time span for simulation (start, end) in seconds
        burn_time: Seconds until fuel reaches 0%; derived from the rocket if None
        max_step: Maximum step size (s); the fixed step for ``method="euler"``
        method: ``"ivp"`` for solve_ivp, ``"euler"`` for repeated :func:`integrate`
        **solver_kwargs: Additional arguments to pass to solve_ivp

    Returns:
        Dictionary of arrays keyed like the telemetry fields
    """
    if burn_time is None:
        burn_time = default_burn_time(rocket)
    if burn_time <= 0:
        raise ValueError(f"burn_time must be positive, got {burn_time}")

    thrust = rocket.thrust_rating * 1000  # kN -> N
    burn_rate = 100.0 / burn_time  # % per second

    logger.info("Integrating %s ascent over %s with %s (burn %.1fs)", rocket.name, t_span, method, burn_time)

    if method == "ivp":
        t, altitude, speed, fuel, message = _solve_ivp_ascent(rocket.mass, thrust, burn_rate,
                                                              t_span, max_step, **solver_kwargs)
    elif method == "euler":
        t, altitude, speed, fuel, message = _euler_ascent(rocket.mass, thrust, burn_rate, t_span, max_step)
    else:
        raise ValueError(f"method must be 'ivp' or 'euler', got {method!r}")

    derived = _forces(altitude, speed, fuel, rocket.mass, thrust)

    results = {
        't': t,
        'altitude': altitude,
        'speed': speed,
        'fuel': fuel,
        'rocket': rocket,
        'success': True,
        'message': message,
    }
    results.update(derived)
    return results


def _euler_ascent(mass, thrust, burn_rate, t_span, dt):
    t0, tf = t_span
    n_steps = int(np.ceil((tf - t0) / dt))
    times = [t0]
    altitude, speed, fuel = [0.0], [0.0], [100.0]

    for _ in range(n_steps):
        step = min(dt, tf - times[-1])
        a = compute_forces(PhysicsState(altitude[-1], speed[-1], fuel[-1], mass, thrust, times[-1])).acceleration
        h, v = integrate(altitude[-1], speed[-1], a, step)
        times.append(times[-1] + step)
        altitude.append(h)
        speed.append(v)
        fuel.append(max(0.0, fuel[-1] - burn_rate * step))

    return np.array(times), np.array(altitude), np.array(speed), np.array(fuel), 'Simulation completed'


def _solve_ivp_ascent(mass, thrust, burn_rate, t_span, max_step, **solver_kwargs):

    def equations_of_motion(t, y, powered):
        h, v, fuel = y
        a = compute_forces(PhysicsState(h, v, fuel if powered else 0.0, mass, thrust, t)).acceleration * g0
        # Resting on the pad
        if h <= 0 and v <= 0 and a < 0:
            a = 0.0
        return [v, a, -burn_rate if powered else 0.0]

    def burnout_event(t, y, powered):
        return y[2] if powered else 1.0

    burnout_event.terminal = True
    burnout_event.direction = -1

    def crash_event(t, y, powered):
        return y[0]

    crash_event.terminal = True
    crash_event.direction = -1

    def apogee_event(t, y, powered):
        return 1.0 if powered else y[1]

    apogee_event.terminal = True
    apogee_event.direction = -1

    t0, tf = t_span
    y0 = np.array([0.0, 0.0, 100.0])
    powered = True
    times, states = [], []
    message = 'Simulation completed'

    while t0 < tf:
        sol = solve_ivp(
            equations_of_motion,
            (t0, tf),
            y0,
            method='DOP853',
            max_step=max_step,
            events=[burnout_event, crash_event, apogee_event],
            args=(powered,),
            **solver_kwargs
        )
        times.append(sol.t)
        states.append(sol.y)

        if len(sol.t_events[1]) > 0:
            message = 'Vehicle returned to the ground'
            break

        if len(sol.t_events[2]) > 0:
            message = 'Apogee reached'
            break

        if powered and len(sol.t_events[0]) > 0:
            logger.info("Burnout at t=%.2fs, altitude %.0fm", sol.t[-1], sol.y[0, -1])
            powered = False
            y0 = sol.y[:, -1].copy()
            y0[2] = 0.0
            t0 = sol.t[-1]
            continue

        break

    t = np.concatenate(times)
    y = np.hstack(states)
    altitude = np.maximum(y[0], 0.0)
    speed = np.maximum(y[1], 0.0)
    fuel = np.clip(y[2], 0.0, 100.0)
    return t, altitude, speed, fuel, message
