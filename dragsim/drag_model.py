"""
Force Model
===========
Accelerations acting on a point-mass projectile in the vertical plane.

Two models are provided:
- No drag: gravity only, ax = 0, ay = -g
- Quadratic drag: F = -k |v| v with k = ½ ρ Cd A, divided by mass

Coordinate system:
  x = downrange (horizontal)
  y = altitude  (vertical, up positive, ground at y = 0)

Reference ball data (mass, diameter, Cd) are typical sea-level values used
to build physically calibrated demo parameter sets.
"""

import numpy as np


# ── Constants ─────────────────────────────────────────────────────────────
G                = 9.81        # m/s²
SEA_LEVEL_DENSITY = 1.225      # kg/m³


# ══════════════════════════════════════════════════════════════════════════
#  Reference balls — (mass, diameter, Cd) for common projectiles
# ══════════════════════════════════════════════════════════════════════════

BASEBALL_DATA = {
    'name': 'Baseball',
    'mass': 0.145,
    'diameter': 0.0737,
    'cd': 0.35,
}

SOFTBALL_DATA = {
    'name': 'Softball',
    'mass': 0.185,
    'diameter': 0.097,
    'cd': 0.45,
}

TENNIS_BALL_DATA = {
    'name': 'Tennis Ball',
    'mass': 0.057,
    'diameter': 0.067,
    'cd': 0.55,
}

SHOT_PUT_DATA = {
    'name': 'Shot Put (7.26 kg)',
    'mass': 7.26,
    'diameter': 0.12,
    'cd': 0.47,
}

REFERENCE_BALLS = {
    'baseball': BASEBALL_DATA,
    'softball': SOFTBALL_DATA,
    'tennis_ball': TENNIS_BALL_DATA,
    'shot_put': SHOT_PUT_DATA,
}


def drag_parameter(cd: float, diameter: float,
                   rho: float = SEA_LEVEL_DENSITY) -> float:
    """
    Lumped quadratic-drag parameter k = ½ ρ Cd A (kg/m).

    Parameters
    ----------
    cd : float
        Drag coefficient (dimensionless)
    diameter : float
        Ball diameter (m); A = π (d/2)²
    rho : float
        Air density (kg/m³), constant
    """
    area = np.pi * (diameter / 2) ** 2
    return 0.5 * rho * cd * area


# ══════════════════════════════════════════════════════════════════════════
#  Accelerations
# ══════════════════════════════════════════════════════════════════════════

def acceleration_no_drag(vx: float, vy: float) -> tuple:
    """Gravity only: (0, -g)."""
    return 0.0, -G


def acceleration_quadratic_drag(vx: float, vy: float,
                                drag_k: float, mass: float) -> tuple:
    """
    Gravity plus quadratic drag.

        ax = -(k/m) |v| vx
        ay = -g - (k/m) |v| vy

    With k = 0 this is exactly (0, -g).
    """
    v = np.sqrt(vx * vx + vy * vy)
    c = drag_k / mass
    ax = -c * v * vx
    ay = -G - c * v * vy
    return float(ax), float(ay)


def make_acceleration(drag_k: float, mass: float):
    """
    Return ``accel(vx, vy) -> (ax, ay)`` for the given drag calibration.

    k = 0 gets the gravity-only model directly.
    """
    if drag_k == 0.0:
        return acceleration_no_drag

    def accel(vx, vy):
        return acceleration_quadratic_drag(vx, vy, drag_k, mass)

    return accel


if __name__ == "__main__":
    print("Reference Balls — lumped drag parameter k = ½ρCdA")
    print("=" * 56)
    print(f"{'Ball':<22} {'m (kg)':>8} {'d (m)':>8} {'Cd':>6} {'k (kg/m)':>10}")
    print("-" * 56)
    for key, data in REFERENCE_BALLS.items():
        k = drag_parameter(data['cd'], data['diameter'])
        print(f"{data['name']:<22} {data['mass']:>8.3f} {data['diameter']:>8.4f} "
              f"{data['cd']:>6.2f} {k:>10.6f}")
