"""
Launch Parameters & Kinematic State
===================================
Defines the immutable launch specification consumed by every solver and
the per-sample state recorded along a trajectory.

Coordinate system:
  x = downrange (horizontal), launch at x = 0
  y = altitude  (vertical, up positive, ground at y = 0)
"""

import dataclasses
from dataclasses import dataclass

import numpy as np

from .drag_model import REFERENCE_BALLS, drag_parameter


class ParameterError(ValueError):
    """Launch or sweep parameters rejected before any stepping."""


@dataclass(frozen=True)
class KinematicState:
    """Snapshot of projectile state at one instant."""
    t: float
    x: float
    y: float
    vx: float
    vy: float

    @property
    def speed(self) -> float:
        return float(np.hypot(self.vx, self.vy))


@dataclass(frozen=True)
class LaunchParameters:
    """
    Complete specification of one launch.

    ``drag_k`` is the lumped quadratic-drag parameter ½ ρ Cd A (kg/m);
    the drag acceleration is (k / mass) |v| v.
    """
    velocity: float = 40.0           # m/s  launch speed
    angle_deg: float = 35.0          # degrees above horizontal
    mass: float = 0.2                # kg
    drag_k: float = 0.06             # kg/m
    dt: float = 0.002                # s    integration step
    launch_height: float = 0.0       # m    above ground

    def __post_init__(self):
        for name in ('velocity', 'angle_deg', 'mass', 'drag_k', 'dt',
                     'launch_height'):
            value = getattr(self, name)
            if not np.isfinite(value):
                raise ParameterError(f"{name} must be finite, got {value!r}")

        if self.velocity <= 0:
            raise ParameterError(
                f"Launch speed must be positive, got {self.velocity}")
        if not 0.0 <= self.angle_deg <= 90.0:
            raise ParameterError(
                f"Launch angle must lie in [0, 90] degrees, got {self.angle_deg}")
        if self.mass <= 0:
            raise ParameterError(f"Mass must be positive, got {self.mass}")
        if self.drag_k < 0:
            raise ParameterError(
                f"Drag parameter must be non-negative, got {self.drag_k}")
        if self.dt <= 0:
            raise ParameterError(f"Time step must be positive, got {self.dt}")
        if self.launch_height < 0:
            raise ParameterError(
                f"Launch height must be non-negative, got {self.launch_height}")

    @classmethod
    def for_ball(cls, ball_key: str, velocity: float = 40.0,
                 angle_deg: float = 35.0, dt: float = 0.002,
                 launch_height: float = 0.0) -> 'LaunchParameters':
        """Build parameters from one of the REFERENCE_BALLS presets."""
        if ball_key not in REFERENCE_BALLS:
            raise ParameterError(
                f"Unknown ball '{ball_key}'. "
                f"Available: {list(REFERENCE_BALLS.keys())}"
            )
        data = REFERENCE_BALLS[ball_key]
        return cls(
            velocity=velocity,
            angle_deg=angle_deg,
            mass=data['mass'],
            drag_k=drag_parameter(data['cd'], data['diameter']),
            dt=dt,
            launch_height=launch_height,
        )

    @property
    def angle_rad(self) -> float:
        return float(np.radians(self.angle_deg))

    def initial_velocity(self) -> tuple:
        """Launch speed + angle as (vx, vy)."""
        theta = self.angle_rad
        return (float(self.velocity * np.cos(theta)),
                float(self.velocity * np.sin(theta)))

    def initial_state(self) -> KinematicState:
        vx, vy = self.initial_velocity()
        return KinematicState(t=0.0, x=0.0, y=self.launch_height, vx=vx, vy=vy)

    def replace(self, **changes) -> 'LaunchParameters':
        """Validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)
