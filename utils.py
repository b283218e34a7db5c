"""
Utility functions for sampled curves.
"""

import numpy as np

from complex_number import Complex


def points_from_params(curve, params):
    """
    Evaluate a curve at given parameter values.

    Parameters
    ----------
    curve : Curve
        Object with a ``value(t)`` method
    params : array_like
        Parameter values

    Returns
    -------
    ndarray, shape (N, 2)
        Points on curve
    """
    params = np.asarray(params, dtype=float).reshape(-1)
    pts = np.empty((len(params), 2))
    for i, t in enumerate(params):
        pts[i] = Complex.of(curve.value(float(t))).xy
    return pts


def segment_lengths(points):
    """
    Lengths of the straight segments joining consecutive points.

    Parameters
    ----------
    points : array_like, shape (N, 2)
        Polyline vertices

    Returns
    -------
    ndarray, shape (N-1,)
    """
    points = np.asarray(points, dtype=float)
    return np.hypot(np.diff(points[:, 0]), np.diff(points[:, 1]))


def polyline_length(points):
    """Total length of the polyline through ``points``."""
    return float(np.sum(segment_lengths(points)))
