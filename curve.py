"""
Parametric curves evaluated as complex values, and their inversion
(finding the parameter whose point is closest to a given point).
"""

import logging
import math
from collections.abc import Mapping
from fractions import Fraction
from typing import Protocol, runtime_checkable

import numpy as np

from complex_number import Complex
from golden import NonConvergenceError, minimize
from utils import points_from_params


logger = logging.getLogger(__name__)


class InvalidCurveParametersError(ValueError):
    """Raised when a curve is configured with meaningless geometry."""


@runtime_checkable
class Curve(Protocol):
    """Anything that can be evaluated at a real parameter t."""

    def value(self, t) -> Complex:
        ...


class FunctionCurve:
    """
    Curve backed by a plain parametric function.

    Parameters
    ----------
    parametric_func : callable
        Function P(t) returning (x, y) or a complex number
    """

    def __init__(self, parametric_func):
        self.P = parametric_func

    def value(self, t):
        return Complex.of(self.P(t))

    def __call__(self, t):
        """Allow curve to be called directly: curve(t) == (x, y)"""
        return self.value(t).xy


class SimpleSpirograph:
    """
    Pen on a circular gear rolling inside a circular ring.

    The parameter t is the rotation of the pen about the gear centre
    (radians, running backwards). The gear centre orbits the ring at
    t * gear_radius / outer_radius, which is the rolling-without-slipping
    constraint.

    Parameters
    ----------
    outer_radius : float
        Radius of the fixed ring, > 0
    gear_radius : float
        Radius of the rolling gear, 0 < gear_radius < outer_radius
    outer_center : complex-like
        Centre of the ring
    gear_start : float
        Initial angle of the gear centre (radians, 0 is the +x axis)
    pen_offset : complex-like
        Pen position relative to the gear centre at t = 0

    Raises
    ------
    InvalidCurveParametersError
        If the radii do not describe a gear that fits inside the ring
    """

    PARAM_NAMES = ('outer_radius', 'gear_radius', 'outer_center',
                   'gear_start', 'pen_offset')

    def __init__(self, outer_radius=10.0, gear_radius=2.0, outer_center=0.0,
                 gear_start=0.0, pen_offset=(1.0, 1.0)):
        outer_radius = float(outer_radius)
        gear_radius = float(gear_radius)
        if not (math.isfinite(outer_radius) and outer_radius > 0):
            raise InvalidCurveParametersError(
                f"outer_radius must be a positive finite number, got {outer_radius!r}")
        if not (math.isfinite(gear_radius) and 0 < gear_radius < outer_radius):
            raise InvalidCurveParametersError(
                f"gear_radius must lie in (0, outer_radius={outer_radius!r}), "
                f"got {gear_radius!r}")

        self.outer_radius = outer_radius
        self.gear_radius = gear_radius
        self.outer_center = Complex.of(outer_center)
        self.gear_start = float(gear_start)
        self.pen_offset = Complex.of(pen_offset)

    @classmethod
    def from_dict(cls, params):
        """Build from a mapping using the names in ``PARAM_NAMES``."""
        unknown = set(params) - set(cls.PARAM_NAMES)
        if unknown:
            raise InvalidCurveParametersError(
                f"unknown spirograph parameters: {sorted(unknown)}")
        return cls(**params)

    def to_dict(self):
        return {
            'outer_radius': self.outer_radius,
            'gear_radius': self.gear_radius,
            'outer_center': self.outer_center.xy,
            'gear_start': self.gear_start,
            'pen_offset': self.pen_offset.xy,
        }

    def value(self, t):
        pen = self.pen_offset.mul(Complex.polar(1, -t))
        gear_center = Complex.polar(
            self.outer_radius - self.gear_radius,
            self.gear_start + t * self.gear_radius / self.outer_radius)
        return self.outer_center.add(pen, gear_center)

    def period(self, max_denominator=1000):
        """
        Parameter span after which the pattern closes.

        With gear_radius / outer_radius = p / q in lowest terms, the pen has
        turned q times and the gear has orbited p times at t = 2πq.
        Irrational ratios are approximated with denominators up to
        ``max_denominator``.
        """
        ratio = Fraction(self.gear_radius / self.outer_radius)
        return 2 * math.pi * ratio.limit_denominator(max_denominator).denominator

    def __call__(self, t):
        return self.value(t).xy

    def __repr__(self):
        params = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"SimpleSpirograph({params})"


def evaluate_curve(curve_params, t):
    """
    Evaluate a curve at t.

    Parameters
    ----------
    curve_params : Curve or mapping
        A curve, or SimpleSpirograph parameters as a mapping
    t : float
        Curve parameter

    Returns
    -------
    tuple
        Point (x, y)
    """
    if isinstance(curve_params, Mapping):
        curve_params = SimpleSpirograph.from_dict(curve_params)
    return Complex.of(curve_params.value(t)).xy


def reverse(curve, pos, t0, t1, tol=1e-8):
    """
    Find the curve parameter whose point is nearest to ``pos``.

    Starts at t0 with a first step of (t1 - t0) / 100 and returns the
    local minimum of the squared distance found downhill from there.
    Choosing a window that contains the true nearest point is up to the
    caller; global optimality is not checked.

    Parameters
    ----------
    curve : Curve
        Curve to invert
    pos : complex-like
        Target point
    t0, t1 : float
        Parameter search window
    tol : float
        Relative tolerance passed to the minimizer

    Returns
    -------
    float
        Parameter of the nearest point found
    """
    pos = Complex.of(pos)

    def distance(t):
        return curve.value(t).sub(pos).mag2

    return minimize(distance, t0, t0 + (t1 - t0) / 100, tol=tol)


invert_curve = reverse


def closest_parameter(curve, point, start, end, num_points=2000, num_seeds=4, tol=1e-8):
    """
    Find the parameter in [start, end] of the curve point closest to ``point``.

    Samples the curve, takes the ``num_seeds`` best local minima of the
    sampled distance as initial guesses, refines each with :func:`reverse`
    in a window of a few sample spacings, and keeps the best. Several seeds
    guard against a self-intersecting curve passing close to the query
    point on another branch.

    Parameters
    ----------
    curve : Curve
        Curve to invert
    point : complex-like
        Query point
    start, end : float
        Parameter range to search
    num_points : int
        Number of samples for the initial guesses
    num_seeds : int
        Number of initial guesses to refine
    tol : float
        Relative tolerance passed to the minimizer

    Returns
    -------
    float
        Parameter t in [start, end]
    """
    if not start < end:
        raise ValueError(f"need start < end, got [{start!r}, {end!r}]")
    if num_points < 2:
        raise ValueError(f"num_points must be at least 2, got {num_points!r}")
    pos = Complex.of(point)

    def distance(t):
        return curve.value(t).sub(pos).mag2

    ts = np.linspace(start, end, num_points)
    pts = points_from_params(curve, ts)
    dists = np.hypot(pts[:, 0] - pos.real, pts[:, 1] - pos.imag)
    dists = np.where(np.isnan(dists), np.inf, dists)
    if np.all(np.isinf(dists)):
        raise ValueError("curve is undefined over the whole search range")

    # Local minima of the sampled distance, best first
    is_min = (np.r_[True, dists[1:] <= dists[:-1]]
              & np.r_[dists[:-1] <= dists[1:], True]
              & np.isfinite(dists))
    seeds = np.flatnonzero(is_min)
    seeds = seeds[np.argsort(dists[seeds], kind='stable')][:max(1, num_seeds)]

    spacing = (end - start) / (num_points - 1)
    best_t, best_d = None, np.inf
    for idx in seeds:
        t_seed = float(ts[idx])
        lo = max(start, t_seed - 2 * spacing)
        hi = min(end, t_seed + 2 * spacing)
        try:
            t = min(end, max(start, reverse(curve, pos, lo, hi, tol=tol)))
        except NonConvergenceError:
            # Local search ran off the curve's domain; fall back to the seed
            logger.debug("Refinement from t=%g did not converge", t_seed)
            t = t_seed
        # Keep the seed if the local search wandered off to something worse
        for candidate in (t, t_seed):
            d = distance(candidate)
            if d < best_d:
                best_t, best_d = candidate, d

    logger.debug("Closest point to %s is t=%g (%d seeds, distance %g)",
                 pos, best_t, len(seeds), math.sqrt(best_d))
    return best_t
