#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PROJECTILE DRAG SIMULATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete simulation pipeline:
    1. Reference ball drag parameters
    2. Single launch: drag-free vs quadratic drag (RK4)
    3. Euler vs RK4 accuracy comparison
    4. Integrator convergence study
    5. Range vs launch angle sweep (10°–80°)
    6. Interactive session replay (launches fired out of order)
    7. Animated launch GIF

  Usage:
    python main.py                   # Run everything, write to outputs/
    python main.py --quick           # Skip animation (faster)
    python main.py --out results     # Write images to results/
═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import os
import time

from dragsim.drag_model import REFERENCE_BALLS, drag_parameter
from dragsim.projectile import LaunchParameters
from dragsim.integrator import solve_no_drag, solve_drag, simulate_euler, simulate_rk4
from dragsim.sweep import sweep_angles
from dragsim.session import new_context, launch, run_until_landed, SessionConfig
from dragsim.validation import convergence_study
from dragsim.visualization import (
    plot_trajectory_comparison, plot_range_vs_angle, plot_euler_vs_rk4,
    plot_convergence, create_trajectory_animation, ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     PROJECTILE MOTION WITH QUADRATIC AIR RESISTANCE                   ║
║     ─────────────────────────────────────────────────────             ║
║     Ideal (analytic) vs drag  ·  F = −k|v|v                           ║
║     Methods: Euler · RK4 │ Exact ground-crossing interpolation        ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def output_dir_from_argv(argv, default='outputs'):
    if '--out' in argv:
        i = argv.index('--out')
        if i + 1 < len(argv):
            return argv[i + 1]
    return default


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv

    banner()
    out = ensure_output_dir(output_dir_from_argv(sys.argv))

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Reference balls
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Reference Balls (k = ½ρCdA)")
    for key, data in REFERENCE_BALLS.items():
        k = drag_parameter(data['cd'], data['diameter'])
        p = LaunchParameters.for_ball(key)
        r = solve_drag(p).range_total
        print(f"  {data['name']:<22s}  m={data['mass']:>6.3f} kg  "
              f"k={k:.6f} kg/m  range @40 m/s, 35°: {r:>7.2f} m")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Single launch
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Single Launch — No Drag vs Quadratic Drag")

    params = LaunchParameters(
        velocity=40.0,
        angle_deg=35.0,
        mass=0.2,
        drag_k=0.06,
        dt=0.002,
        launch_height=0.0,
    )

    traj_ideal = solve_no_drag(params)
    traj_drag = solve_drag(params, 'rk4')
    print(traj_ideal.summary())
    print(traj_drag.summary())

    fig = plot_trajectory_comparison(
        traj_ideal, traj_drag, save_path=f'{out}/01_trajectory_comparison.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/01_trajectory_comparison.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Euler vs RK4
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Euler vs RK4 Numerical Accuracy")

    coarse = params.replace(dt=0.01)  # Large timestep to show differences
    result_euler = simulate_euler(coarse)
    result_rk4 = simulate_rk4(coarse)
    print(f"  Euler (dt={coarse.dt}s) — Range: {result_euler.range_total:.3f} m  "
          f"ToF: {result_euler.flight_time:.3f} s")
    print(f"  RK4   (dt={coarse.dt}s) — Range: {result_rk4.range_total:.3f} m  "
          f"ToF: {result_rk4.flight_time:.3f} s")
    print(f"  Δ Range: {result_euler.range_total - result_rk4.range_total:+.3f} m")

    fig = plot_euler_vs_rk4(result_euler, result_rk4,
                            save_path=f'{out}/03_euler_vs_rk4.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/03_euler_vs_rk4.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Convergence study
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Integrator Convergence")
    conv = convergence_study(params)
    fig = plot_convergence(conv, save_path=f'{out}/04_convergence.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/04_convergence.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Range vs angle sweep
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Range vs Launch Angle (10°–80°)")
    sweep_ideal, sweep_drag = sweep_angles(params, verbose=True)

    fig = plot_range_vs_angle(sweep_ideal, sweep_drag,
                              save_path=f'{out}/02_range_vs_angle.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/02_range_vs_angle.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Interactive session replay
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Interactive Session (frame-stepped launches)")

    ctx = new_context(SessionConfig())
    for angle in (60.0, 20.0, 45.0, 30.0, 75.0):
        ctx = launch(ctx, params.replace(angle_deg=angle))
    ctx = run_until_landed(ctx)

    print(f"  Fired in order : {[b.params.angle_deg for b in ctx.balls]}")
    print(f"  Frames stepped : {ctx.frame} (dt={ctx.config.frame_dt:.4f}s)")
    s_ideal, s_drag = ctx.sweep()
    for a, r0 in s_ideal.as_pairs():
        r1 = s_drag.range_at(a)
        drag_txt = f"{r1:8.2f} m" if r1 is not None else "no landing"
        print(f"  {a:5.1f}°  no drag {r0:8.2f} m   drag {drag_txt}")

    fig = plot_range_vs_angle(s_ideal, s_drag,
                              save_path=f'{out}/05_session_sweep.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/05_session_sweep.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Launch animation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 7: Launch Animation (GIF)")
        create_trajectory_animation([traj_ideal, traj_drag],
                                    save_path=f'{out}/06_launch_animation.gif',
                                    frames=120)
        print(f"  ✓ Saved: {out}/06_launch_animation.gif")
    else:
        section("PHASE 7: Animation SKIPPED (--quick mode)")

    # ══════════════════════════════════════════════════════════════════════
    #  SUMMARY
    # ══════════════════════════════════════════════════════════════════════
    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"""
  All outputs saved to: {os.path.abspath(out)}/

  Generated files:
    01_trajectory_comparison.png — Drag-free vs drag trajectory
    02_range_vs_angle.png        — Range vs launch angle sweep
    03_euler_vs_rk4.png          — Numerical method comparison
    04_convergence.png           — Error vs timestep
    05_session_sweep.png         — Sweep accumulated by the session
    {'06_launch_animation.gif     — Animated launch' if not quick else '(animation skipped)'}

  Total runtime: {elapsed:.1f} seconds
""")


if __name__ == "__main__":
    main()
