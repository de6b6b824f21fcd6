"""
Range vs Launch Angle Sweep
===========================
Runs one launch per angle and collects the impact range for the drag-free
(analytic) and drag-affected (numerical) models.

Samples can arrive in any order — a batch sweep adds them in ascending
order, an interactive session adds one per user launch — so every result
is re-sorted by angle when it is read out of the SweepCollector.

The optimal launch angle is found by fitting a cubic spline through the
sampled curve and maximizing it on the sampled interval.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from scipy.interpolate import interp1d
from scipy.optimize import minimize_scalar

from .projectile import LaunchParameters, ParameterError
from .integrator import (
    solve_no_drag, solve_drag, NonTerminationError, RK4, MAX_FLIGHT_TIME,
)


# Reference sweep: 10° to 80° at 1° resolution
DEFAULT_SWEEP = {
    'angle_min': 10.0,
    'angle_max': 80.0,
    'count': 71,
}


@dataclass
class SweepResult:
    """Range vs angle curve for one force model, ascending by angle."""
    label: str
    angles: np.ndarray                 # degrees
    ranges: np.ndarray                 # m
    skipped: Tuple[float, ...] = ()    # angles with no landing within bound

    def __len__(self) -> int:
        return len(self.angles)

    def as_pairs(self) -> List[Tuple[float, float]]:
        return [(float(a), float(r)) for a, r in zip(self.angles, self.ranges)]

    def range_at(self, angle_deg: float) -> Optional[float]:
        """Range sampled at ``angle_deg``, or None if that angle is absent."""
        hits = np.flatnonzero(self.angles == float(angle_deg))
        return float(self.ranges[hits[0]]) if len(hits) else None

    def optimal_angle(self) -> Tuple[float, float]:
        """
        Angle of maximum range (degrees, metres).

        Uses a cubic spline through the samples when there are at least
        four of them, otherwise the best sampled point.
        """
        if len(self.angles) == 0:
            raise ValueError(f"Sweep '{self.label}' has no samples")

        i_best = int(np.argmax(self.ranges))
        best = (float(self.angles[i_best]), float(self.ranges[i_best]))
        if len(self.angles) < 4:
            return best

        spline = interp1d(self.angles, self.ranges, kind='cubic',
                          assume_sorted=True)
        res = minimize_scalar(
            lambda a: -float(spline(a)),
            bounds=(float(self.angles[0]), float(self.angles[-1])),
            method='bounded',
        )
        if not res.success or -res.fun < best[1]:
            return best
        return float(res.x), float(-res.fun)


class SweepCollector:
    """
    Accumulates (angle, range) samples from individual launches.

    Re-adding an angle replaces the earlier sample.
    """

    def __init__(self):
        self._no_drag: Dict[float, float] = {}
        self._drag: Dict[float, float] = {}
        self._skipped: Dict[float, None] = {}

    def __len__(self) -> int:
        return len(self._no_drag)

    def add(self, angle_deg: float, no_drag_range: float,
            drag_range: Optional[float] = None):
        """
        Record one launch. ``drag_range=None`` marks an angle whose drag
        run never landed.
        """
        angle = float(angle_deg)
        self._no_drag[angle] = float(no_drag_range)
        if drag_range is None:
            self._drag.pop(angle, None)
            self._skipped[angle] = None
        else:
            self._drag[angle] = float(drag_range)
            self._skipped.pop(angle, None)

    def clear(self):
        self._no_drag.clear()
        self._drag.clear()
        self._skipped.clear()

    def results(self) -> Tuple[SweepResult, SweepResult]:
        """(no_drag, drag) curves, each sorted ascending by angle."""
        return (
            _sorted_result('No drag', self._no_drag),
            _sorted_result('Quadratic drag', self._drag,
                           skipped=tuple(sorted(self._skipped))),
        )


def _sorted_result(label, samples: Dict[float, float], skipped=()) -> SweepResult:
    angles = np.array(list(samples.keys()), dtype=float)
    ranges = np.array(list(samples.values()), dtype=float)
    order = np.argsort(angles, kind='stable')
    return SweepResult(label=label, angles=angles[order], ranges=ranges[order],
                       skipped=skipped)


def angles_for_step(angle_min: float, angle_max: float, step: float) -> int:
    """Number of evenly spaced samples giving ``step`` degree resolution."""
    if step <= 0:
        raise ParameterError(f"Angle step must be positive, got {step}")
    return int(round((angle_max - angle_min) / step)) + 1


def sweep_angles(params: LaunchParameters,
                 angle_min: float = DEFAULT_SWEEP['angle_min'],
                 angle_max: float = DEFAULT_SWEEP['angle_max'],
                 count: int = DEFAULT_SWEEP['count'],
                 scheme: str = RK4,
                 max_time: float = MAX_FLIGHT_TIME,
                 verbose: bool = False) -> Tuple[SweepResult, SweepResult]:
    """
    Range vs angle for the drag-free and drag-affected models.

    All other launch parameters are taken from ``params``. Angles whose
    drag run does not land within the flight-time bound are left out of
    the drag curve and listed in its ``skipped`` field.
    """
    if not (0.0 <= angle_min <= 90.0 and 0.0 <= angle_max <= 90.0):
        raise ParameterError(
            f"Sweep bounds must lie in [0, 90] degrees, "
            f"got [{angle_min}, {angle_max}]")
    if angle_min > angle_max:
        raise ParameterError(
            f"angle_min ({angle_min}) must not exceed angle_max ({angle_max})")
    if count < 1:
        raise ParameterError(f"Sweep needs at least one angle, got {count}")
    if count > 1 and angle_min == angle_max:
        raise ParameterError(
            f"{count} samples of a single angle would produce duplicates")

    collector = SweepCollector()

    if verbose:
        print(f"\n  Sweeping {count} angles from {angle_min:.1f}° to "
              f"{angle_max:.1f}° ({scheme.upper()}, dt={params.dt}s)")

    for angle in np.linspace(angle_min, angle_max, count):
        p = params.replace(angle_deg=float(angle))
        r_ideal = solve_no_drag(p).range_total
        try:
            r_drag = solve_drag(p, scheme, max_time).range_total
        except NonTerminationError as exc:
            if verbose:
                print(f"  ! {angle:5.1f}°  skipped — {exc}")
            r_drag = None
        collector.add(angle, r_ideal, r_drag)

    no_drag, drag = collector.results()

    if verbose:
        a_ideal, r_ideal = no_drag.optimal_angle()
        print(f"  No drag        — best {a_ideal:5.1f}°  range {r_ideal:8.2f} m")
        if len(drag):
            a_drag, r_drag = drag.optimal_angle()
            print(f"  Quadratic drag — best {a_drag:5.1f}°  range {r_drag:8.2f} m")

    return no_drag, drag
