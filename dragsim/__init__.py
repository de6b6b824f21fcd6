"""
Projectile Motion with Quadratic Air Resistance
===============================================
A teaching tool that contrasts the ideal (drag-free) trajectory of a
projectile with the trajectory under quadratic air resistance:
  - Analytic no-drag kinematics
  - Quadratic drag F = -k|v|v integrated with Euler or RK4
  - Exact ground-impact location by linear interpolation
  - Range vs launch angle sweeps for both models

Also includes a frame-stepped interactive session model, an integrator
convergence study, and matplotlib plots of all of the above.
"""

from .drag_model import (
    G, REFERENCE_BALLS, drag_parameter,
    acceleration_no_drag, acceleration_quadratic_drag, make_acceleration,
)
from .projectile import LaunchParameters, KinematicState, ParameterError
from .integrator import (
    Trajectory, solve_no_drag, solve_drag, simulate_euler, simulate_rk4,
    euler_step, rk4_step, EULER, RK4, MAX_FLIGHT_TIME,
    NonTerminationError, DegenerateInterpolationError,
)
from .sweep import SweepResult, SweepCollector, sweep_angles, angles_for_step
from .session import (
    SessionConfig, SimulationContext, Ball, TrailBuffer,
    new_context, launch, step_context, run_until_landed, reset,
)
from .validation import convergence_study, ConvergenceResult
from .visualization import (
    plot_trajectory_comparison, plot_range_vs_angle, plot_euler_vs_rk4,
    plot_convergence, create_trajectory_animation,
)

__version__ = "1.0.0"
__all__ = [
    'LaunchParameters', 'KinematicState', 'Trajectory', 'SweepResult',
    'solve_no_drag', 'solve_drag', 'simulate_euler', 'simulate_rk4',
    'sweep_angles', 'SweepCollector', 'angles_for_step',
    'euler_step', 'rk4_step', 'EULER', 'RK4', 'MAX_FLIGHT_TIME',
    'G', 'REFERENCE_BALLS', 'drag_parameter',
    'acceleration_no_drag', 'acceleration_quadratic_drag', 'make_acceleration',
    'ParameterError', 'NonTerminationError', 'DegenerateInterpolationError',
    'SessionConfig', 'SimulationContext', 'Ball', 'TrailBuffer',
    'new_context', 'launch', 'step_context', 'run_until_landed', 'reset',
    'convergence_study', 'ConvergenceResult',
    'plot_trajectory_comparison', 'plot_range_vs_angle', 'plot_euler_vs_rk4',
    'plot_convergence', 'create_trajectory_animation',
]
