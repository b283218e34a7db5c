"""
Example: Drawing spirograph patterns and inverting them by clicking.

Traces each preset with the adaptive tracer, draws the samples as a
polyline, and on a mouse click marks the point of the curve nearest to the
click together with its parameter t.
"""

import argparse
import logging

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from curve import SimpleSpirograph, FunctionCurve, closest_parameter
from tracer import walk
from utils import segment_lengths


# =============================================================================
# Presets
# =============================================================================

SPIROGRAPH_PRESETS = [
    {'title': "Classic (100, 70, pen 60)",
     'params': {'outer_radius': 100, 'gear_radius': 70,
                'outer_center': (100, 100), 'pen_offset': (60, 0)}},
    {'title': "Five loops (96, 40, pen 30)",
     'params': {'outer_radius': 96, 'gear_radius': 40, 'pen_offset': (30, 0)}},
    {'title': "Star (105, 42, pen 40)",
     'params': {'outer_radius': 105, 'gear_radius': 42, 'pen_offset': (40, 0),
                'gear_start': np.pi / 2}},
    {'title': "Dense (144, 54, pen 45)",
     'params': {'outer_radius': 144, 'gear_radius': 54, 'pen_offset': (45, 10)}},
]


def lissajous(t, a=3, b=4, delta=0, scale=60.0):
    """Lissajous curve (a:b), scaled to screen units"""
    return (scale * np.sin(a * t + np.pi/2), scale * np.sin(b * t + delta))


def preset_by_title(title):
    for preset in SPIROGRAPH_PRESETS:
        if preset['title'].lower().startswith(title.lower()):
            return preset
    raise KeyError(f"no preset named {title!r}")


# =============================================================================
# Plotting
# =============================================================================

def plot_traced_curve(ax, curve, start, end, ds, title="Curve"):
    """
    Trace a curve and draw it as a polyline colored by parameter.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axes to plot on
    curve : Curve
        Curve to draw
    start, end : float
        Parameter range
    ds : float
        Desired spacing between samples
    title : str
        Plot title

    Returns
    -------
    ndarray, shape (N, 2)
        The traced samples
    """
    samples = list(walk(curve, start, end, ds=ds))
    ts = np.array([t for t, _ in samples])
    pts = np.array([p.xy for _, p in samples])

    segments = np.stack([pts[:-1], pts[1:]], axis=1)
    lc = LineCollection(segments, cmap='viridis', linewidths=1.0)
    lc.set_array(ts[:-1])
    ax.add_collection(lc)

    ax.autoscale()
    ax.set_aspect('equal', 'box')
    ax.set_title(title, fontsize=11)
    ax.axis('off')
    return pts


class ClickInverter:
    """
    Marks the curve point nearest to each mouse click on an axes.

    Attributes
    ----------
    history : list of (x, y, t)
        Clicks handled so far
    """

    def __init__(self, ax, curve, start, end):
        self.ax = ax
        self.curve = curve
        self.start = start
        self.end = end
        self.history = []
        self.marker, = ax.plot([], [], 'o', color='C3', ms=7, mec='k', zorder=10)
        self.label = ax.text(0.01, 0.01, '', transform=ax.transAxes, fontsize=9)

    def __call__(self, event):
        if event.inaxes is not self.ax or event.xdata is None:
            return
        t = closest_parameter(self.curve, (event.xdata, event.ydata),
                              self.start, self.end)
        x, y = self.curve.value(t).xy
        self.history.append((event.xdata, event.ydata, t))
        self.marker.set_data([x], [y])
        self.label.set_text(f't = {t:.6f}')
        print(f"  click ({event.xdata:.2f}, {event.ydata:.2f}) -> t={t:.6f} at ({x:.2f}, {y:.2f})")
        self.ax.figure.canvas.draw_idle()


def _print_trace_stats(title, pts):
    steps = segment_lengths(pts)
    print(f"✓ {title}: {len(pts)} samples")
    print(f"  Step mean: {np.mean(steps):.4f}, std: {np.std(steps):.4e}")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Draw spirograph patterns")
    ap.add_argument("--preset", default=None,
                    help="Draw only the preset whose title starts with this")
    ap.add_argument("--ds", type=float, default=0.5,
                    help="Desired distance between traced samples")
    ap.add_argument("--end", type=float, default=None,
                    help="Last curve parameter (default: one full period)")
    ap.add_argument("--save", default=None, help="Save the figure to this path")
    ap.add_argument("--no-show", action="store_true", help="Do not open a window")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap.parse_args(argv)


def main(argv=None):
    """Trace the presets, draw them, and invert clicks on the curves."""
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    presets = [preset_by_title(args.preset)] if args.preset else SPIROGRAPH_PRESETS

    print("=" * 60)
    print("Tracing spirograph presets")
    print("=" * 60)

    n = len(presets) + 1
    cols = min(n, 3)
    rows = int(np.ceil(n / cols))
    fig, axes = plt.subplots(rows, cols, figsize=(5*cols, 5*rows))
    axes = np.array(axes).reshape(-1)

    inverters = []
    for idx, preset in enumerate(presets):
        curve = SimpleSpirograph.from_dict(preset['params'])
        end = args.end if args.end is not None else curve.period()
        pts = plot_traced_curve(axes[idx], curve, 0.0, end, args.ds, title=preset['title'])
        _print_trace_stats(preset['title'], pts)
        inverters.append(ClickInverter(axes[idx], curve, 0.0, end))

    # Any parametric function works with the same tracer
    lissajous_curve = FunctionCurve(lissajous)
    pts = plot_traced_curve(axes[len(presets)], lissajous_curve, 0.0, 2*np.pi, args.ds,
                            title="Lissajous (3:4)")
    _print_trace_stats("Lissajous (3:4)", pts)
    inverters.append(ClickInverter(axes[len(presets)], lissajous_curve, 0.0, 2*np.pi))

    for j in range(n, rows*cols):
        axes[j].axis('off')

    for inverter in inverters:
        fig.canvas.mpl_connect('button_press_event', inverter)

    if args.save:
        try:
            fig.tight_layout()
            fig.savefig(args.save, dpi=150, bbox_inches='tight')
            print(f"Saved figure to '{args.save}'")
        except Exception as e:
            print(f"Warning: failed to save figure: {e}")

    if not args.no_show:
        print("\nClick on a curve to find the nearest parameter t.")
        plt.show()


if __name__ == "__main__":
    main()
