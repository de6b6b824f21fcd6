"""
Visualization Engine
====================
Plots for trajectory and sweep analysis:
  1. Trajectory comparison (drag-free vs quadratic drag)
  2. Range vs launch angle (both models, optimal angles marked)
  3. Euler vs RK4 comparison
  4. Convergence study (error vs timestep)
  5. Animated launch (saved as GIF)
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from typing import List, Sequence
import os

from .integrator import Trajectory
from .sweep import SweepResult
from .session import TrailBuffer
from .validation import ConvergenceResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'no_drag_color': '#00d4ff',
    'drag_color': '#ff6b35',
}

LEGEND_KW = dict(facecolor='#1a1a1a', edgecolor='#444',
                 labelcolor=STYLE['text_color'])


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _save(fig, save_path):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory_comparison(no_drag: Trajectory, drag: Trajectory,
                               save_path: str = None) -> plt.Figure:
    """Height vs distance for the drag-free and drag-affected launches."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    p = drag.params
    ax.plot(no_drag.x, no_drag.y, color=STYLE['no_drag_color'], linewidth=2.5,
            linestyle='--', label=f'No drag — {no_drag.range_total:.1f} m')
    ax.plot(drag.x, drag.y, color=STYLE['drag_color'], linewidth=2.5,
            label=f'Quadratic drag ({drag.method.upper()}) — '
                  f'{drag.range_total:.1f} m')

    for traj, color in ((no_drag, STYLE['no_drag_color']),
                        (drag, STYLE['drag_color'])):
        idx_max = int(np.argmax(traj.y))
        ax.plot(traj.x[idx_max], traj.y[idx_max], '^', color=color,
                markersize=9, zorder=5)
        ax.plot(traj.x[-1], traj.y[-1], 'x', color=color,
                markersize=11, markeredgewidth=3, zorder=5)

    ax.set_xlabel('Distance (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title(f'Projectile Trajectory — v₀={p.velocity:.0f} m/s, '
                 f'θ={p.angle_deg:.0f}°, m={p.mass} kg, k={p.drag_k} kg/m',
                 fontsize=13, fontweight='bold')
    ax.legend(loc='upper right', fontsize=10, **LEGEND_KW)
    ax.set_ylim(bottom=0)
    ax.set_xlim(left=0)

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Range vs Angle
# ══════════════════════════════════════════════════════════════════════════

def plot_range_vs_angle(no_drag: SweepResult, drag: SweepResult,
                        save_path: str = None) -> plt.Figure:
    """Range vs launch angle for both force models."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    for sweep, color, style in ((no_drag, STYLE['no_drag_color'], '--'),
                                (drag, STYLE['drag_color'], '-')):
        if len(sweep) == 0:
            continue
        ax.plot(sweep.angles, sweep.ranges, color=color, linestyle=style,
                linewidth=2.5, label=sweep.label)
        a_opt, r_opt = sweep.optimal_angle()
        ax.plot(a_opt, r_opt, 'o', color=color, markersize=9, zorder=5)
        ax.annotate(f'{a_opt:.1f}°', (a_opt, r_opt),
                    textcoords='offset points', xytext=(0, 10),
                    ha='center', color=color, fontsize=10)

    if drag.skipped:
        ax.plot(drag.skipped, np.zeros(len(drag.skipped)), 'x',
                color='#ff5252', markersize=8, label='No landing')

    ax.set_xlabel('Launch Angle (°)', fontsize=12)
    ax.set_ylabel('Range (m)', fontsize=12)
    ax.set_title('Range vs Launch Angle', fontsize=14, fontweight='bold')
    ax.legend(fontsize=11, **LEGEND_KW)
    ax.set_ylim(bottom=0)

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Euler vs RK4 Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_euler_vs_rk4(euler_result: Trajectory,
                      rk4_result: Trajectory,
                      save_path: str = None) -> plt.Figure:
    """Compare Euler and RK4 trajectories to show accuracy difference."""
    fig, axes = plt.subplots(1, 3, figsize=(18, 5))
    _apply_dark_style(fig, axes)

    # Trajectory
    ax = axes[0]
    ax.plot(euler_result.x, euler_result.y,
            color='#ff6b35', linewidth=2, linestyle='--',
            label=f'Euler (dt={euler_result.dt}s)')
    ax.plot(rk4_result.x, rk4_result.y,
            color='#00d4ff', linewidth=2, label=f'RK4 (dt={rk4_result.dt}s)')
    ax.set_xlabel('Distance (m)')
    ax.set_ylabel('Height (m)')
    ax.set_title('Trajectory Comparison', fontweight='bold')
    ax.legend(fontsize=10, **LEGEND_KW)
    ax.set_ylim(bottom=0)

    # Speed
    ax = axes[1]
    ax.plot(euler_result.time, euler_result.speed,
            color='#ff6b35', linewidth=2, linestyle='--', label='Euler')
    ax.plot(rk4_result.time, rk4_result.speed,
            color='#00d4ff', linewidth=2, label='RK4')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Speed (m/s)')
    ax.set_title('Speed vs Time', fontweight='bold')
    ax.legend(fontsize=10, **LEGEND_KW)

    # Metrics comparison
    ax = axes[2]
    ax.axis('off')
    ax.set_facecolor('#111111')

    text_lines = [
        f"{'Metric':<18} {'Euler':>10} {'RK4':>10} {'Δ':>9}",
        f"{'─'*49}",
        f"{'Range (m)':<18} {euler_result.range_total:>10.3f} "
        f"{rk4_result.range_total:>10.3f} "
        f"{euler_result.range_total - rk4_result.range_total:>+9.3f}",
        f"{'Max Height (m)':<18} {euler_result.max_altitude:>10.3f} "
        f"{rk4_result.max_altitude:>10.3f} "
        f"{euler_result.max_altitude - rk4_result.max_altitude:>+9.3f}",
        f"{'Flight Time (s)':<18} {euler_result.flight_time:>10.3f} "
        f"{rk4_result.flight_time:>10.3f} "
        f"{euler_result.flight_time - rk4_result.flight_time:>+9.3f}",
        f"{'Impact Vel (m/s)':<18} {euler_result.impact_velocity:>10.3f} "
        f"{rk4_result.impact_velocity:>10.3f} "
        f"{euler_result.impact_velocity - rk4_result.impact_velocity:>+9.3f}",
    ]

    ax.text(0.05, 0.85, '\n'.join(text_lines), transform=ax.transAxes,
            fontsize=10, fontfamily='monospace', color=STYLE['text_color'],
            verticalalignment='top')
    ax.set_title('Numerical Comparison', fontweight='bold',
                 color=STYLE['text_color'])

    fig.suptitle('Euler vs Runge-Kutta 4th Order — Accuracy Comparison',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'], y=1.02)
    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Convergence Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_convergence(results: List[ConvergenceResult],
                     save_path: str = None) -> plt.Figure:
    """Range error vs timestep for both schemes (log-log)."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _apply_dark_style(fig, axes)

    dts = [r.dt for r in results]
    floor = 1e-12  # keep exact zeros visible on log axes

    ax = axes[0]
    ax.loglog(dts, [max(r.euler_error, floor) for r in results], 'o--',
              color='#ff6b35', linewidth=2, markersize=7, label='Euler')
    ax.loglog(dts, [max(r.rk4_error, floor) for r in results], 's-',
              color='#00d4ff', linewidth=2, markersize=7, label='RK4')
    ax.loglog(dts, [max(r.scheme_gap, floor) for r in results], ':',
              color='#ffeb3b', linewidth=1.5, label='|Euler − RK4|')
    ax.set_xlabel('Timestep (s)')
    ax.set_ylabel('Range Error (m)')
    ax.set_title('Drag Range vs Fine-dt Reference', fontweight='bold')
    ax.legend(fontsize=10, **LEGEND_KW)

    ax = axes[1]
    ax.loglog(dts, [max(r.euler_vacuum_error_pct, floor) for r in results],
              'o--', color='#ff6b35', linewidth=2, markersize=7, label='Euler')
    ax.loglog(dts, [max(r.rk4_vacuum_error_pct, floor) for r in results],
              's-', color='#00d4ff', linewidth=2, markersize=7, label='RK4')
    ax.axhline(y=1.0, color='#ff5252', linestyle='--', alpha=0.6, label='1 %')
    ax.set_xlabel('Timestep (s)')
    ax.set_ylabel('Range Error (%)')
    ax.set_title('k = 0 vs Analytic Range', fontweight='bold')
    ax.legend(fontsize=10, **LEGEND_KW)

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  5. Animated Launch (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_trajectory_animation(trajectories: Sequence[Trajectory],
                                save_path: str = 'outputs/trajectory_anim.gif',
                                frames: int = 100,
                                trail_length: int = 40) -> str:
    """Create animated GIF of one or more launches with fading trails."""
    from matplotlib.animation import FuncAnimation, PillowWriter

    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x_max = max(float(np.max(t.x)) for t in trajectories)
    y_max = max(float(np.max(t.y)) for t in trajectories)
    t_max = max(t.flight_time for t in trajectories)

    ax.set_xlim(0, max(x_max, 1e-3) * 1.05)
    ax.set_ylim(0, max(y_max, 1e-3) * 1.15)
    ax.set_xlabel('Distance (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title('Launch Animation', fontsize=14, fontweight='bold')

    colors = STYLE['accent_colors']
    trails = [TrailBuffer(trail_length) for _ in trajectories]
    trail_lines, points = [], []
    for i, traj in enumerate(trajectories):
        color = colors[i % len(colors)]
        line, = ax.plot([], [], color=color, linewidth=1.5, alpha=0.6)
        point, = ax.plot([], [], 'o', color=color, markersize=8,
                         label=f'{traj.method.upper()}  k={traj.params.drag_k}')
        trail_lines.append(line)
        points.append(point)
    ax.legend(fontsize=10, loc='upper right', **LEGEND_KW)
    time_text = ax.text(0.02, 0.95, '', transform=ax.transAxes,
                        color=STYLE['text_color'], fontsize=11,
                        fontfamily='monospace')

    frame_times = np.linspace(0.0, t_max, frames)

    def animate(frame_idx):
        t_now = frame_times[frame_idx]
        for traj, trail, line, point in zip(trajectories, trails,
                                            trail_lines, points):
            idx = min(int(np.searchsorted(traj.time, t_now)), len(traj) - 1)
            trail.append(traj.x[idx], traj.y[idx])
            pts = trail.points()
            line.set_data(pts[:, 0], pts[:, 1])
            point.set_data([traj.x[idx]], [traj.y[idx]])
        time_text.set_text(f't={t_now:.2f}s')
        return (*trail_lines, *points, time_text)

    anim = FuncAnimation(fig, animate, frames=frames, interval=50, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=20),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    print(f"  Animation saved: {save_path}")
    return save_path
