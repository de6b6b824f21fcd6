"""
Numerical Integration Engine
=============================
Produces trajectories for one launch under two force models:

1. **Analytic** (no drag) — closed-form kinematics sampled every Δt.
2. **Numerical** (quadratic drag) — fixed-step integration with either
   - Euler (1st order): one acceleration evaluation per step
   - Runge-Kutta 4th order (RK4): four evaluations per step

Each numerical step advances velocity first, then moves the position with
the *updated* velocity:

    v_{n+1} = step(v_n)
    x_{n+1} = x_n + v_{n+1} * dt

Integration stops on the first sample below ground; that overshoot sample
is replaced by the linearly interpolated ground crossing, so every returned
trajectory ends at y = 0 exactly.

Output: Trajectory dataclass with read-only state history arrays.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple

from .drag_model import G, make_acceleration
from .projectile import LaunchParameters, KinematicState, ParameterError


EULER = 'euler'
RK4 = 'rk4'
ANALYTIC = 'analytic'

MAX_FLIGHT_TIME = 60.0  # s of simulated time


class NonTerminationError(RuntimeError):
    """No ground impact found within the simulated-time bound."""

    def __init__(self, params: LaunchParameters, elapsed: float):
        self.params = params
        self.elapsed = elapsed
        super().__init__(
            f"No landing within {elapsed:.2f} s of simulated flight "
            f"(v0={params.velocity} m/s, θ={params.angle_deg}°, "
            f"k={params.drag_k} kg/m, m={params.mass} kg, dt={params.dt} s)"
        )


class DegenerateInterpolationError(ArithmeticError):
    """Ground-crossing interpolation would divide by zero or yield NaN."""


@dataclass(frozen=True)
class Trajectory:
    """Complete trajectory output."""
    params: LaunchParameters
    method: str               # 'analytic', 'euler' or 'rk4'
    dt: float                 # timestep used

    # Arrays — each has shape (N,)
    time: np.ndarray
    x: np.ndarray             # downrange
    y: np.ndarray             # altitude
    vx: np.ndarray
    vy: np.ndarray
    speed: np.ndarray

    def __len__(self) -> int:
        return len(self.time)

    @property
    def range_total(self) -> float:
        """Horizontal range at impact (m)."""
        return float(self.x[-1])

    @property
    def max_altitude(self) -> float:
        """Maximum altitude reached (m)."""
        return float(np.max(self.y))

    @property
    def flight_time(self) -> float:
        """Total flight time (s)."""
        return float(self.time[-1])

    @property
    def impact_velocity(self) -> float:
        """Speed at impact (m/s)."""
        return float(self.speed[-1])

    @property
    def impact_angle_deg(self) -> float:
        """Angle of descent at impact (degrees below horizontal)."""
        return float(np.degrees(np.arctan2(-self.vy[-1], self.vx[-1])))

    def states(self) -> Iterator[KinematicState]:
        for t, x, y, vx, vy in zip(self.time, self.x, self.y, self.vx, self.vy):
            yield KinematicState(t=float(t), x=float(x), y=float(y),
                                 vx=float(vx), vy=float(vy))

    def summary(self) -> str:
        """Human-readable summary string."""
        p = self.params
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {self.method.upper():<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Timestep     : {self.dt:<36.4f} ║",
            f"║  Samples      : {len(self):<36d} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch vel   : {p.velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {p.angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Mass         : {p.mass:>10.3f} kg{'':<23s} ║",
            f"║  Drag k       : {p.drag_k:>10.4f} kg/m{'':<21s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.range_total:>10.2f} m{'':<24s} ║",
            f"║  Max altitude : {self.max_altitude:>10.2f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.3f} s{'':<24s} ║",
            f"║  Impact vel   : {self.impact_velocity:>10.2f} m/s{'':<22s} ║",
            f"║  Impact angle : {self.impact_angle_deg:>10.1f} °{'':<24s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


# ══════════════════════════════════════════════════════════════════════════
#  Analytic solver (no drag)
# ══════════════════════════════════════════════════════════════════════════

def flight_time_no_drag(params: LaunchParameters) -> float:
    """Time to reach y = 0 without drag (positive root of y(t) = 0)."""
    _, vy0 = params.initial_velocity()
    y0 = params.launch_height
    if y0 == 0.0:
        return max(2.0 * vy0 / G, 0.0)
    return float((vy0 + np.sqrt(vy0 ** 2 + 2.0 * G * y0)) / G)


def solve_no_drag(params: LaunchParameters) -> Trajectory:
    """
    Closed-form drag-free trajectory.

    x(t) = v0 cosθ t
    y(t) = y0 + v0 sinθ t - ½ g t²

    Sampled at 0, dt, 2dt, ... and the exact flight time T.
    """
    vx0, vy0 = params.initial_velocity()
    T = flight_time_no_drag(params)
    dt = params.dt

    n = int(np.floor(T / dt))
    times = dt * np.arange(n + 1, dtype=float)
    if times[-1] < T - 1e-12:
        times = np.append(times, T)
    else:
        times[-1] = T

    x = vx0 * times
    y = params.launch_height + vy0 * times - 0.5 * G * times ** 2
    y = np.maximum(y, 0.0)
    y[-1] = 0.0
    vx = np.full_like(times, vx0)
    vy = vy0 - G * times

    return _freeze(Trajectory(
        params=params,
        method=ANALYTIC,
        dt=dt,
        time=times,
        x=x,
        y=y,
        vx=vx,
        vy=vy,
        speed=np.hypot(vx, vy),
    ))


# ══════════════════════════════════════════════════════════════════════════
#  Stepping rules
# ══════════════════════════════════════════════════════════════════════════

def euler_step(vx: float, vy: float, dt: float,
               accel: Callable) -> Tuple[float, float]:
    """v_{n+1} = v_n + a(v_n) dt"""
    ax, ay = accel(vx, vy)
    return vx + ax * dt, vy + ay * dt


def rk4_step(vx: float, vy: float, dt: float,
             accel: Callable) -> Tuple[float, float]:
    """Classical RK4 on dv/dt = a(v), applied to both components."""
    k1x, k1y = accel(vx, vy)
    k2x, k2y = accel(vx + 0.5 * dt * k1x, vy + 0.5 * dt * k1y)
    k3x, k3y = accel(vx + 0.5 * dt * k2x, vy + 0.5 * dt * k2y)
    k4x, k4y = accel(vx + dt * k3x, vy + dt * k3y)

    vx_new = vx + (dt / 6.0) * (k1x + 2 * k2x + 2 * k3x + k4x)
    vy_new = vy + (dt / 6.0) * (k1y + 2 * k2y + 2 * k3y + k4y)
    return vx_new, vy_new


STEPPERS = {
    EULER: euler_step,
    RK4: rk4_step,
}


def get_stepper(scheme: str) -> Callable:
    """Look up a stepping rule by name ('euler' or 'rk4')."""
    key = str(scheme).lower()
    if key not in STEPPERS:
        raise ParameterError(
            f"Unknown scheme '{scheme}'. Available: {list(STEPPERS.keys())}"
        )
    return STEPPERS[key]


def interpolate_ground_crossing(prev: tuple, over: tuple) -> tuple:
    """
    Replace a below-ground sample with the linearly interpolated crossing.

    ``prev`` and ``over`` are (t, x, y, vx, vy) with prev y >= 0 > over y.
    The returned sample has y = 0.0 exactly.
    """
    t0, x0, y0, vx0, vy0 = prev
    t1, x1, y1, vx1, vy1 = over

    denom = y0 - y1
    if denom == 0.0:
        raise DegenerateInterpolationError(
            f"Cannot locate ground crossing: consecutive samples share "
            f"y = {y0} at t = {t0} and t = {t1}"
        )
    frac = y0 / denom
    if not np.isfinite(frac):
        raise DegenerateInterpolationError(
            f"Ground-crossing fraction is not finite "
            f"(y_prev = {y0}, y_over = {y1})"
        )

    return (
        t0 + frac * (t1 - t0),
        x0 + frac * (x1 - x0),
        0.0,
        vx0 + frac * (vx1 - vx0),
        vy0 + frac * (vy1 - vy0),
    )


# ══════════════════════════════════════════════════════════════════════════
#  Numerical solver (quadratic drag)
# ══════════════════════════════════════════════════════════════════════════

def solve_drag(params: LaunchParameters, scheme: str = RK4,
               max_time: float = MAX_FLIGHT_TIME) -> Trajectory:
    """
    Integrate the drag-affected trajectory until ground impact.

    Raises NonTerminationError if no impact occurs within ``max_time``
    seconds of simulated flight.
    """
    step = get_stepper(scheme)
    accel = make_acceleration(params.drag_k, params.mass)
    dt = params.dt

    t, x, y = 0.0, 0.0, params.launch_height
    vx, vy = params.initial_velocity()
    history = [(t, x, y, vx, vy)]

    while t < max_time:
        vx, vy = step(vx, vy, dt, accel)
        x += vx * dt
        y += vy * dt
        t += dt

        history.append((t, x, y, vx, vy))

        if y < 0.0:
            history[-1] = interpolate_ground_crossing(history[-2], history[-1])
            return _build_result(history, params, str(scheme).lower(), dt)

    raise NonTerminationError(params, t)


def simulate_euler(params: LaunchParameters,
                   max_time: float = MAX_FLIGHT_TIME) -> Trajectory:
    """Forward Euler on velocity, position from the updated velocity."""
    return solve_drag(params, EULER, max_time)


def simulate_rk4(params: LaunchParameters,
                 max_time: float = MAX_FLIGHT_TIME) -> Trajectory:
    """RK4 on velocity, position from the updated velocity."""
    return solve_drag(params, RK4, max_time)


def _build_result(history: List[tuple], params, method, dt) -> Trajectory:
    """Convert history list to Trajectory."""
    times, xs, ys, vxs, vys = (np.array(col) for col in zip(*history))

    return _freeze(Trajectory(
        params=params,
        method=method,
        dt=dt,
        time=times,
        x=xs,
        y=ys,
        vx=vxs,
        vy=vys,
        speed=np.hypot(vxs, vys),
    ))


def _freeze(traj: Trajectory) -> Trajectory:
    for arr in (traj.time, traj.x, traj.y, traj.vx, traj.vy, traj.speed):
        arr.flags.writeable = False
    return traj
