"""
Adaptive tracing of parametric curves.

Steps through the curve parameter so that consecutive samples are roughly
``ds`` apart in the output plane: the step in t is ds divided by the local
speed |dP/dt|, estimated by a forward finite difference. Fast parts of the
curve get dense parameter sampling, slow parts sparse sampling. This is an
arc-length approximation only; curvature within a step is not corrected.
"""

import logging
import math

import numpy as np

from complex_number import Complex


logger = logging.getLogger(__name__)


class TracerStallError(RuntimeError):
    """Raised when the tracer cannot make progress along the curve."""


def speed(curve, t, dt=1e-4, ft=None):
    """
    Forward-difference estimate of |dP/dt| at t.

    Parameters
    ----------
    curve : Curve
        Curve to differentiate
    t : float
        Parameter value
    dt : float
        Finite-difference step
    ft : Complex, optional
        curve.value(t), if already known

    Returns
    -------
    float
    """
    if ft is None:
        ft = Complex.of(curve.value(t))
    return Complex.of(curve.value(t + dt)).sub(ft).mag / dt


def _check_args(start, end, ds, dt):
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValueError(f"trace bounds must be finite, got [{start!r}, {end!r}]")
    if start > end:
        raise ValueError(f"trace start {start!r} is after end {end!r}")
    if not ds > 0:
        raise ValueError(f"ds must be positive, got {ds!r}")
    if not dt > 0:
        raise ValueError(f"dt must be positive, got {dt!r}")


def walk(curve, start, end, ds=0.5, dt=1e-4):
    """
    Walk a curve from start to end in steps of roughly ``ds``.

    Parameters
    ----------
    curve : Curve
        Curve to trace
    start, end : float
        Parameter range, start <= end
    ds : float
        Desired distance between consecutive samples
    dt : float
        Finite-difference step for the speed estimate

    Returns
    -------
    iterator of tuple
        (t, point) with point a Complex, consumed once; the first sample is at ``start``
        and the last exactly at ``end``

    Raises
    ------
    TracerStallError
        If the speed estimate is zero or not finite, a point is not finite,
        or a step fails to advance t
    """
    _check_args(start, end, ds, dt)
    return _walk(curve, float(start), float(end), ds, dt)


def _walk(curve, start, end, ds, dt):
    t = start
    ft = Complex.of(curve.value(t))
    yield t, ft
    while t < end:
        logger.debug("Evaluating %g", t)
        if not (math.isfinite(ft.real) and math.isfinite(ft.imag)):
            raise TracerStallError(f"curve point at t={t!r} is not finite: {ft}")
        dfdt = speed(curve, t, dt, ft=ft)
        if not (math.isfinite(dfdt) and dfdt > 0):
            raise TracerStallError(
                f"non-finite step at t={t!r}: speed estimate is {dfdt!r}")
        t_next = min(end, t + ds / dfdt)
        if not t_next > t:
            raise TracerStallError(
                f"step {ds / dfdt!r} does not advance t={t!r}")
        t = t_next
        ft = Complex.of(curve.value(t))
        yield t, ft


def trace_curve(curve, start, end, ds=0.5, dt=1e-4):
    """
    Sample points along a curve for a renderer.

    Same walk as :func:`walk`; yields (x, y) pairs to be joined with
    straight line segments.
    """
    return (point.xy for _, point in walk(curve, start, end, ds=ds, dt=dt))


def trace_parameters(curve, start, end, ds=0.5, dt=1e-4):
    """Parameter values accepted by :func:`walk`, as an ndarray."""
    return np.fromiter((t for t, _ in walk(curve, start, end, ds=ds, dt=dt)),
                       dtype=float)


def trace_array(curve, start, end, ds=0.5, dt=1e-4):
    """
    Sample points along a curve as an array.

    Returns
    -------
    ndarray, shape (N, 2)
        Sample points, first at ``start`` and last at ``end``
    """
    pts = np.array(list(trace_curve(curve, start, end, ds=ds, dt=dt)), dtype=float)
    logger.debug("Traced %d samples over [%g, %g]", len(pts), start, end)
    return pts.reshape(-1, 2)
