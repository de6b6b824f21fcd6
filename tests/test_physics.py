"""
Unit Tests for the Force Model and Trajectory Solvers
=====================================================
Tests core physics modules for correctness.
Run: python -m pytest tests/ -v
"""

import sys
import os
import dataclasses
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dragsim.drag_model import (
    G, REFERENCE_BALLS, drag_parameter,
    acceleration_no_drag, acceleration_quadratic_drag, make_acceleration,
)
from dragsim.projectile import LaunchParameters, ParameterError
from dragsim.integrator import (
    solve_no_drag, solve_drag, simulate_euler, simulate_rk4,
    euler_step, rk4_step, interpolate_ground_crossing, flight_time_no_drag,
    NonTerminationError, DegenerateInterpolationError,
)


SCENARIOS = [
    # (v0, angle, mass, k, dt, y0)
    (40.0, 35.0, 0.2, 0.06, 0.002, 0.0),
    (40.0, 45.0, 0.2, 0.0, 0.002, 0.0),
    (30.0, 10.0, 0.145, 0.05, 0.01, 0.0),
    (60.0, 80.0, 0.2, 0.12, 0.005, 0.0),
    (25.0, 30.0, 0.145, 0.001, 0.002, 12.5),
    (10.0, 0.0, 0.2, 0.06, 0.016, 2.0),
]


class TestForceModel:
    """Verify the no-drag and quadratic-drag accelerations."""

    def test_no_drag_is_gravity(self):
        assert acceleration_no_drag(30.0, -4.0) == (0.0, -G)

    def test_zero_k_reduces_exactly_to_no_drag(self):
        for vx, vy in [(30.0, 20.0), (-5.0, 0.0), (0.0, -12.0)]:
            ax, ay = acceleration_quadratic_drag(vx, vy, 0.0, 0.2)
            assert ax == 0.0
            assert ay == -G

    def test_drag_opposes_motion(self):
        vx, vy = 30.0, 15.0
        ax, ay = acceleration_quadratic_drag(vx, vy, 0.06, 0.2)
        # Remove gravity and check the drag part points against v
        assert ax * vx + (ay + G) * vy < 0

    def test_drag_magnitude(self):
        """|a_drag| = k v² / m"""
        vx, vy = 30.0, 40.0
        k, m = 0.06, 0.2
        ax, ay = acceleration_quadratic_drag(vx, vy, k, m)
        mag = np.hypot(ax, ay + G)
        assert abs(mag - k * 50.0 ** 2 / m) < 1e-9

    def test_drag_zero_at_rest(self):
        ax, ay = acceleration_quadratic_drag(0.0, 0.0, 0.06, 0.2)
        assert ax == 0.0
        assert ay == -G

    def test_make_acceleration(self):
        assert make_acceleration(0.0, 0.2) is acceleration_no_drag
        accel = make_acceleration(0.06, 0.2)
        assert accel(10.0, 5.0) == acceleration_quadratic_drag(10.0, 5.0, 0.06, 0.2)

    def test_drag_parameter(self):
        expected = 0.5 * 1.225 * 0.47 * np.pi * 0.05 ** 2
        assert abs(drag_parameter(0.47, 0.1) - expected) < 1e-12

    def test_reference_balls_positive_k(self):
        for data in REFERENCE_BALLS.values():
            assert drag_parameter(data['cd'], data['diameter']) > 0


class TestLaunchParameters:
    """Validation happens before any stepping."""

    @pytest.mark.parametrize("changes", [
        dict(velocity=0.0),
        dict(velocity=-3.0),
        dict(dt=0.0),
        dict(dt=-0.01),
        dict(angle_deg=-1.0),
        dict(angle_deg=90.5),
        dict(mass=0.0),
        dict(mass=-0.2),
        dict(drag_k=-0.01),
        dict(launch_height=-1.0),
        dict(velocity=float('nan')),
        dict(dt=float('inf')),
    ])
    def test_invalid_parameters_rejected(self, changes):
        with pytest.raises(ParameterError):
            LaunchParameters(**changes)

    def test_parameter_error_is_value_error(self):
        assert issubclass(ParameterError, ValueError)

    def test_boundary_angles_allowed(self):
        LaunchParameters(angle_deg=0.0)
        LaunchParameters(angle_deg=90.0)

    def test_immutable(self):
        p = LaunchParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.velocity = 10.0

    def test_replace_validates(self):
        p = LaunchParameters()
        assert p.replace(angle_deg=60.0).angle_deg == 60.0
        assert p.angle_deg == 35.0
        with pytest.raises(ParameterError):
            p.replace(dt=0.0)

    def test_initial_velocity_vector(self):
        p = LaunchParameters(velocity=100.0, angle_deg=45.0)
        vx, vy = p.initial_velocity()
        assert abs(np.hypot(vx, vy) - 100.0) < 1e-9
        assert abs(vy - 100 * np.sin(np.radians(45))) < 1e-9

    def test_initial_state(self):
        p = LaunchParameters(launch_height=3.0)
        s = p.initial_state()
        assert (s.t, s.x, s.y) == (0.0, 0.0, 3.0)
        assert abs(s.speed - p.velocity) < 1e-9

    def test_for_ball(self):
        p = LaunchParameters.for_ball('baseball', velocity=45.0)
        assert p.mass == REFERENCE_BALLS['baseball']['mass']
        assert p.velocity == 45.0
        assert p.drag_k > 0

    def test_for_ball_unknown(self):
        with pytest.raises(ParameterError):
            LaunchParameters.for_ball('bowling_ball')


class TestAnalyticSolver:
    """Closed-form drag-free trajectory."""

    def test_range_formula(self):
        """v0=40, θ=45° ⇒ range = v0²/g ≈ 163.1 m"""
        traj = solve_no_drag(LaunchParameters(velocity=40.0, angle_deg=45.0))
        assert abs(traj.range_total - 40.0 ** 2 / G) < 1e-9
        assert abs(traj.range_total - 163.1) < 0.05

    @pytest.mark.parametrize("angle", [10.0, 27.5, 45.0, 63.0, 80.0])
    def test_range_formula_angles(self, angle):
        v0 = 30.0
        traj = solve_no_drag(LaunchParameters(velocity=v0, angle_deg=angle))
        expected = v0 ** 2 * np.sin(2 * np.radians(angle)) / G
        assert abs(traj.range_total - expected) < 1e-9

    def test_flight_time_elevated_launch(self):
        p = LaunchParameters(velocity=20.0, angle_deg=30.0, launch_height=10.0)
        vy0 = 20.0 * np.sin(np.radians(30.0))
        expected = (vy0 + np.sqrt(vy0 ** 2 + 2 * G * 10.0)) / G
        traj = solve_no_drag(p)
        assert abs(traj.flight_time - expected) < 1e-12
        assert abs(flight_time_no_drag(p) - expected) < 1e-12

    def test_elevated_launch_goes_further(self):
        p = LaunchParameters(velocity=20.0, angle_deg=30.0)
        assert (solve_no_drag(p.replace(launch_height=10.0)).range_total
                > solve_no_drag(p).range_total)

    def test_sampling_grid(self):
        p = LaunchParameters(velocity=40.0, angle_deg=35.0, dt=0.01)
        traj = solve_no_drag(p)
        assert traj.time[0] == 0.0
        assert traj.y[0] == 0.0
        steps = np.diff(traj.time)
        assert np.all(steps > 0)
        assert np.all(steps <= 0.01 + 1e-12)
        assert traj.time[-1] == flight_time_no_drag(p)

    def test_ground_exact_and_non_negative(self):
        traj = solve_no_drag(LaunchParameters(velocity=33.3, angle_deg=71.0, dt=0.007))
        assert traj.y[-1] == 0.0
        assert np.all(traj.y >= 0.0)

    def test_flat_launch_from_ground(self):
        traj = solve_no_drag(LaunchParameters(angle_deg=0.0))
        assert len(traj) == 1
        assert traj.range_total == 0.0
        assert traj.flight_time == 0.0

    def test_ignores_drag(self):
        p = LaunchParameters(drag_k=0.5)
        assert solve_no_drag(p).range_total == solve_no_drag(p.replace(drag_k=0.0)).range_total

    def test_arrays_read_only(self):
        traj = solve_no_drag(LaunchParameters())
        with pytest.raises(ValueError):
            traj.x[0] = 1.0

    def test_trajectory_fields_frozen(self):
        traj = solve_no_drag(LaunchParameters())
        with pytest.raises(dataclasses.FrozenInstanceError):
            traj.method = 'rk4'
        with pytest.raises(dataclasses.FrozenInstanceError):
            traj.x = np.zeros(3)


class TestStepping:
    """Single-step rules."""

    def test_euler_step_constant_accel(self):
        vx, vy = euler_step(10.0, 5.0, 0.1, acceleration_no_drag)
        assert vx == 10.0
        assert abs(vy - (5.0 - G * 0.1)) < 1e-12

    def test_rk4_step_constant_accel(self):
        vx, vy = rk4_step(10.0, 5.0, 0.1, acceleration_no_drag)
        assert vx == 10.0
        assert abs(vy - (5.0 - G * 0.1)) < 1e-12

    def test_rk4_step_matches_exact_horizontal_decay(self):
        """dv/dt = -c v² with no vertical motion has v(t) = v0 / (1 + c v0 t)."""
        c, v0, dt = 0.3, 20.0, 0.01

        def accel(vx, vy):
            return -c * abs(vx) * vx, 0.0

        exact = v0 / (1 + c * v0 * dt)
        rk4_vx, _ = rk4_step(v0, 0.0, dt, accel)
        euler_vx, _ = euler_step(v0, 0.0, dt, accel)
        assert abs(rk4_vx - exact) < abs(euler_vx - exact)
        assert abs(rk4_vx - exact) < 1e-4


class TestGroundCrossing:
    """Linear interpolation of the impact point."""

    def test_interpolation_midpoint(self):
        prev = (1.0, 10.0, 2.0, 5.0, -5.0)
        over = (1.1, 10.5, -2.0, 5.0, -6.0)
        t, x, y, vx, vy = interpolate_ground_crossing(prev, over)
        assert abs(t - 1.05) < 1e-12
        assert abs(x - 10.25) < 1e-12
        assert y == 0.0
        assert abs(vy - (-5.5)) < 1e-12

    def test_prev_on_ground(self):
        prev = (0.0, 0.0, 0.0, 40.0, 0.0)
        over = (0.01, 0.4, -0.001, 40.0, -0.1)
        t, x, y, _, _ = interpolate_ground_crossing(prev, over)
        assert (t, x, y) == (0.0, 0.0, 0.0)

    def test_equal_heights_degenerate(self):
        with pytest.raises(DegenerateInterpolationError):
            interpolate_ground_crossing((0.0, 0.0, 1.0, 1.0, 0.0),
                                        (0.1, 0.1, 1.0, 1.0, 0.0))

    def test_non_finite_degenerate(self):
        with pytest.raises(DegenerateInterpolationError):
            interpolate_ground_crossing((0.0, 0.0, np.inf, 1.0, 0.0),
                                        (0.1, 0.1, -1.0, 1.0, 0.0))


class TestIntegrators:
    """Verify numerical integration methods."""

    def test_euler_runs(self):
        result = simulate_euler(LaunchParameters(dt=0.01))
        assert result.flight_time > 0
        assert result.range_total > 0
        assert result.method == 'euler'

    def test_rk4_runs(self):
        result = simulate_rk4(LaunchParameters(dt=0.01))
        assert result.flight_time > 0
        assert result.range_total > 0
        assert result.method == 'rk4'

    def test_scheme_name_case_insensitive(self):
        assert solve_drag(LaunchParameters(dt=0.01), 'RK4').method == 'rk4'

    def test_unknown_scheme(self):
        with pytest.raises(ParameterError):
            solve_drag(LaunchParameters(), 'midpoint')

    @pytest.mark.parametrize("scheme", ['euler', 'rk4'])
    @pytest.mark.parametrize("v0,angle,mass,k,dt,y0", SCENARIOS)
    def test_ground_exactness(self, scheme, v0, angle, mass, k, dt, y0):
        p = LaunchParameters(velocity=v0, angle_deg=angle, mass=mass,
                             drag_k=k, dt=dt, launch_height=y0)
        traj = solve_drag(p, scheme)
        assert traj.y[-1] == 0.0
        assert np.all(traj.y >= 0.0)
        assert np.all(np.diff(traj.time) >= 0.0)

    @pytest.mark.parametrize("scheme", ['euler', 'rk4'])
    @pytest.mark.parametrize("v0,angle", [(40.0, 45.0), (30.0, 20.0),
                                          (55.0, 70.0), (15.0, 35.0)])
    def test_zero_drag_matches_analytic(self, scheme, v0, angle):
        p = LaunchParameters(velocity=v0, angle_deg=angle, drag_k=0.0, dt=0.002)
        numeric = solve_drag(p, scheme).range_total
        analytic = solve_no_drag(p).range_total
        assert abs(numeric - analytic) / analytic < 0.01

    def test_drag_reduces_range(self):
        base = LaunchParameters(velocity=40.0, angle_deg=35.0, mass=0.2)
        r0 = solve_drag(base.replace(drag_k=0.0)).range_total
        r1 = solve_drag(base.replace(drag_k=0.06)).range_total
        r2 = solve_drag(base.replace(drag_k=0.12)).range_total
        assert r0 > r1 > r2

    def test_heavier_projectile_goes_further(self):
        base = LaunchParameters(velocity=40.0, angle_deg=35.0, drag_k=0.06)
        assert (solve_drag(base.replace(mass=0.4)).range_total
                > solve_drag(base.replace(mass=0.2)).range_total)

    def test_schemes_converge(self):
        """Euler and RK4 agree as dt → 0."""
        base = LaunchParameters(velocity=40.0, angle_deg=35.0, mass=0.2, drag_k=0.06)
        fine = base.replace(dt=1e-4)
        coarse = base.replace(dt=1e-2)
        gap_fine = abs(simulate_euler(fine).range_total - simulate_rk4(fine).range_total)
        gap_coarse = abs(simulate_euler(coarse).range_total - simulate_rk4(coarse).range_total)
        assert gap_fine < 0.1
        assert gap_fine < gap_coarse

    def test_first_sample_is_launch_state(self):
        p = LaunchParameters(launch_height=4.0, dt=0.01)
        traj = simulate_rk4(p)
        first = next(traj.states())
        assert first == p.initial_state()
        assert len(list(traj.states())) == len(traj)

    def test_non_termination_signalled(self):
        p = LaunchParameters(dt=0.01)
        with pytest.raises(NonTerminationError) as info:
            solve_drag(p, max_time=0.5)
        assert info.value.params is p
        assert info.value.elapsed >= 0.5

    def test_zero_speed_is_parameter_error(self):
        with pytest.raises(ParameterError):
            solve_drag(LaunchParameters(velocity=0.0, angle_deg=90.0))

    def test_flat_launch_lands_immediately(self):
        traj = solve_drag(LaunchParameters(angle_deg=0.0))
        assert traj.range_total == 0.0
        assert traj.flight_time == 0.0
        assert traj.y[-1] == 0.0

    def test_vertical_launch_has_no_range(self):
        traj = solve_drag(LaunchParameters(angle_deg=90.0))
        assert abs(traj.range_total) < 1e-9
        assert traj.flight_time > 0

    def test_impact_angle_steeper_with_drag(self):
        base = LaunchParameters(velocity=40.0, angle_deg=45.0, mass=0.2)
        ideal = simulate_rk4(base.replace(drag_k=0.0))
        drag = simulate_rk4(base.replace(drag_k=0.06))
        assert abs(ideal.impact_angle_deg - 45.0) < 0.5
        assert drag.impact_angle_deg > ideal.impact_angle_deg

    def test_summary_mentions_range(self):
        traj = simulate_rk4(LaunchParameters(dt=0.01))
        assert f"{traj.range_total:.2f}" in traj.summary()


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
