"""
Interactive Launch Session
==========================
Frame-by-frame simulation state for an animated front end.

The whole session lives in an immutable SimulationContext. Every call
(launch, step_context, reset) returns a new context; the caller (the
rendering loop) owns its lifecycle. Drawing code only reads the context.

Each frame advances every airborne ball by one ``frame_dt`` step with the
same stepping rule and ground-crossing correction as the batch solver,
using the physical drag calibration k / m. When a ball lands, its
(angle, range) sample is recorded next to the drag-free range for the
same launch, so the session accumulates a range vs angle curve in the
order the user fires.

Trails are a rendering concern: TrailBuffer is a bounded ring buffer the
renderer keeps per ball, outside the context.
"""

import dataclasses
from collections import deque
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .drag_model import make_acceleration
from .projectile import LaunchParameters, KinematicState, ParameterError
from .integrator import (
    solve_no_drag, get_stepper, interpolate_ground_crossing,
    MAX_FLIGHT_TIME, RK4,
)
from .sweep import SweepCollector, SweepResult


@dataclass(frozen=True)
class SessionConfig:
    frame_dt: float = 1.0 / 60.0      # s per animation frame
    scheme: str = RK4
    trail_length: int = 120           # points kept per trail
    max_time: float = MAX_FLIGHT_TIME

    def __post_init__(self):
        if self.frame_dt <= 0:
            raise ParameterError(f"frame_dt must be positive, got {self.frame_dt}")
        if self.trail_length < 1:
            raise ParameterError(
                f"trail_length must be at least 1, got {self.trail_length}")
        get_stepper(self.scheme)


@dataclass(frozen=True)
class Ball:
    """One launched projectile."""
    params: LaunchParameters
    state: KinematicState
    landed: bool = False
    timed_out: bool = False           # hit the flight-time bound, no impact

    @property
    def range_total(self) -> Optional[float]:
        if not self.landed or self.timed_out:
            return None
        return self.state.x


@dataclass(frozen=True)
class SimulationContext:
    config: SessionConfig
    balls: Tuple[Ball, ...] = ()
    # (angle_deg, no_drag_range, drag_range or None) in landing order
    samples: Tuple[Tuple[float, float, Optional[float]], ...] = ()
    frame: int = 0

    @property
    def airborne(self) -> Tuple[Ball, ...]:
        return tuple(b for b in self.balls if not b.landed)

    def sweep(self) -> Tuple[SweepResult, SweepResult]:
        """Range vs angle of every landed launch, sorted by angle."""
        collector = SweepCollector()
        for angle, r_ideal, r_drag in self.samples:
            collector.add(angle, r_ideal, r_drag)
        return collector.results()


class TrailBuffer:
    """Fixed-length (x, y) history; the oldest point is evicted first."""

    def __init__(self, maxlen: int = 120):
        self._points = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._points)

    @property
    def maxlen(self) -> int:
        return self._points.maxlen

    def append(self, x: float, y: float):
        self._points.append((x, y))

    def clear(self):
        self._points.clear()

    def points(self) -> np.ndarray:
        """Trail as an (N, 2) array, oldest first."""
        if not self._points:
            return np.empty((0, 2))
        return np.array(self._points)


def new_context(config: Optional[SessionConfig] = None) -> SimulationContext:
    return SimulationContext(config=config or SessionConfig())


def reset(ctx: SimulationContext) -> SimulationContext:
    """Discard all balls and samples, keep the configuration."""
    return new_context(ctx.config)


def launch(ctx: SimulationContext, params: LaunchParameters) -> SimulationContext:
    """Add a ball; it is stepped at the session frame rate."""
    p = params.replace(dt=ctx.config.frame_dt)
    ball = Ball(params=p, state=p.initial_state())
    return dataclasses.replace(ctx, balls=ctx.balls + (ball,))


def step_ball(ball: Ball, config: SessionConfig) -> Ball:
    """Advance one airborne ball by one frame."""
    if ball.landed:
        return ball

    p = ball.params
    s = ball.state
    dt = config.frame_dt
    step = get_stepper(config.scheme)
    accel = make_acceleration(p.drag_k, p.mass)

    vx, vy = step(s.vx, s.vy, dt, accel)
    new = (s.t + dt, s.x + vx * dt, s.y + vy * dt, vx, vy)

    if new[2] < 0.0:
        t, x, y, vx, vy = interpolate_ground_crossing(
            (s.t, s.x, s.y, s.vx, s.vy), new)
        return Ball(params=p, state=KinematicState(t, x, y, vx, vy), landed=True)

    state = KinematicState(*new)
    if state.t >= config.max_time:
        return Ball(params=p, state=state, landed=True, timed_out=True)
    return Ball(params=p, state=state)


def step_context(ctx: SimulationContext) -> SimulationContext:
    """Advance every airborne ball by one frame and record new landings."""
    balls = []
    samples = list(ctx.samples)
    for ball in ctx.balls:
        stepped = step_ball(ball, ctx.config)
        if stepped.landed and not ball.landed:
            r_ideal = solve_no_drag(stepped.params).range_total
            samples.append((stepped.params.angle_deg, r_ideal,
                            stepped.range_total))
        balls.append(stepped)

    return dataclasses.replace(ctx, balls=tuple(balls),
                               samples=tuple(samples), frame=ctx.frame + 1)


def run_until_landed(ctx: SimulationContext,
                     max_frames: Optional[int] = None) -> SimulationContext:
    """Step until no ball is airborne (or ``max_frames`` have run)."""
    n = 0
    while ctx.airborne and (max_frames is None or n < max_frames):
        ctx = step_context(ctx)
        n += 1
    return ctx
