"""
Integrator Convergence Study
============================
Compares the Euler and RK4 integrators against two references:

  - the analytic drag-free range (same launch with k = 0), which both
    schemes must reproduce to within integration error
  - a fine-timestep RK4 run of the drag-affected launch

Repeating this over a ladder of timesteps shows how quickly each scheme
converges and how far apart the two schemes are at a given dt.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Sequence

from .projectile import LaunchParameters
from .integrator import solve_no_drag, simulate_euler, simulate_rk4


DEFAULT_DTS = (0.05, 0.02, 0.01, 0.005, 0.002, 0.001)
REFERENCE_DT = 1e-4

# Drag-free reproduction must be within this at dt <= 0.002 s
VACUUM_TOLERANCE_PCT = 1.0


@dataclass
class ConvergenceResult:
    """Result of one timestep in the study."""
    dt: float
    euler_range: float          # drag range, Euler (m)
    rk4_range: float            # drag range, RK4 (m)
    reference_range: float      # drag range, RK4 at REFERENCE_DT (m)
    euler_error: float          # |euler - reference| (m)
    rk4_error: float            # |rk4 - reference| (m)
    scheme_gap: float           # |euler - rk4| (m)
    analytic_range: float       # drag-free closed form (m)
    euler_vacuum_error_pct: float
    rk4_vacuum_error_pct: float


def _percent_error(value: float, exact: float) -> float:
    """Relative error in %; nan when the exact range is zero (flat launch)."""
    if exact == 0.0:
        return float('nan')
    return 100.0 * abs(value - exact) / abs(exact)


def convergence_study(params: LaunchParameters,
                      dts: Sequence[float] = DEFAULT_DTS,
                      reference_dt: float = REFERENCE_DT,
                      verbose: bool = True) -> List[ConvergenceResult]:
    """
    Run Euler and RK4 at each timestep and compare against the references.

    Returns list of ConvergenceResult, one per dt, in the order given.
    """
    reference = simulate_rk4(params.replace(dt=reference_dt)).range_total

    vacuum = params.replace(drag_k=0.0)
    analytic = solve_no_drag(vacuum).range_total

    if verbose:
        print(f"\n{'='*78}")
        print(f"  CONVERGENCE: v0={params.velocity} m/s  θ={params.angle_deg}°  "
              f"m={params.mass} kg  k={params.drag_k} kg/m")
        print(f"  Reference drag range (RK4, dt={reference_dt}s): {reference:.4f} m")
        print(f"  Analytic drag-free range: {analytic:.4f} m")
        print(f"{'='*78}")
        print(f"{'dt (s)':>8} {'Euler (m)':>11} {'RK4 (m)':>11} {'Err E':>9} "
              f"{'Err RK4':>9} {'|E-RK4|':>9} {'Vac E %':>9} {'Vac RK4 %':>10}")
        print("-" * 78)

    results = []
    for dt in dts:
        euler = simulate_euler(params.replace(dt=dt)).range_total
        rk4 = simulate_rk4(params.replace(dt=dt)).range_total
        euler_vac = simulate_euler(vacuum.replace(dt=dt)).range_total
        rk4_vac = simulate_rk4(vacuum.replace(dt=dt)).range_total

        cr = ConvergenceResult(
            dt=dt,
            euler_range=euler,
            rk4_range=rk4,
            reference_range=reference,
            euler_error=abs(euler - reference),
            rk4_error=abs(rk4 - reference),
            scheme_gap=abs(euler - rk4),
            analytic_range=analytic,
            euler_vacuum_error_pct=_percent_error(euler_vac, analytic),
            rk4_vacuum_error_pct=_percent_error(rk4_vac, analytic),
        )
        results.append(cr)

        if verbose:
            print(f"{dt:>8.4f} {euler:>11.4f} {rk4:>11.4f} {cr.euler_error:>9.4f} "
                  f"{cr.rk4_error:>9.4f} {cr.scheme_gap:>9.4f} "
                  f"{cr.euler_vacuum_error_pct:>9.3f} {cr.rk4_vacuum_error_pct:>10.3f}")

    if verbose:
        fine = [r for r in results if r.dt <= 0.002]
        worst = max((max(r.euler_vacuum_error_pct, r.rk4_vacuum_error_pct)
                     for r in fine), default=float('nan'))
        print("-" * 78)
        print(f"  Worst drag-free error at dt ≤ 0.002 s: {worst:.3f}%")
        status = "✓ PASS" if np.isfinite(worst) and worst < VACUUM_TOLERANCE_PCT \
            else "✗ CHECK TIMESTEP"
        print(f"  Status: {status}")
        print(f"{'='*78}\n")

    return results


if __name__ == "__main__":
    convergence_study(LaunchParameters(), verbose=True)
