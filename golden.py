"""
Golden-section search for a local minimum of a function of one variable.

The search runs in two phases:
- Bracketing: walk downhill from two starting abscissae, using parabolic
  extrapolation where it helps, until a triple (a, b, c) with
  f(b) <= f(a) and f(b) <= f(c) is found.
- Refinement: shrink the bracket by the golden ratio, one function
  evaluation per iteration, until it is narrower than the tolerance.

References:
- Press et al., "Numerical Recipes", section 10.1 (mnbrak / golden)
"""

import logging
import math


logger = logging.getLogger(__name__)

PHI = (1 + math.sqrt(5)) / 2  # 1.618
PHI1 = PHI - 1                # 0.618
PHI2 = 1 - PHI1               # 0.382

GLIMIT = 10.0  # maximum magnification of a parabolic extrapolation
TINY = 1e-20   # smallest magnitude allowed for the parabola denominator


class NonConvergenceError(RuntimeError):
    """Raised when a search does not converge within its iteration budget."""


def _check_finite(phase, xs, fs):
    if not all(math.isfinite(x) for x in xs) or any(math.isnan(v) for v in fs):
        raise NonConvergenceError(
            f"{phase}: search left the finite domain at abscissae {xs} "
            f"with values {fs}")


def bracket(f, a, b, max_iter=1000):
    """
    Bracket a local minimum of f, starting from two distinct abscissae.

    Parameters
    ----------
    f : callable
        Function of one real variable
    a, b : float
        Starting abscissae; the search heads downhill from the higher one
    max_iter : int
        Maximum number of extrapolation steps

    Returns
    -------
    tuple
        (a, b, c, fa, fb, fc) with b between a and c,
        fb <= fa and fb <= fc

    Raises
    ------
    ValueError
        If a and b coincide
    NonConvergenceError
        If no bracket is found within ``max_iter`` steps, or the search
        runs off to infinity / produces NaN
    """
    if a == b:
        raise ValueError(f"starting abscissae must differ, got a == b == {a!r}")

    fa = f(a)
    fb = f(b)
    # Make a -> b the downhill direction
    if fa < fb:
        a, b, fa, fb = b, a, fb, fa
    c = b + PHI * (b - a)
    fc = f(c)

    iterations = 0
    while fb > fc:
        iterations += 1
        if iterations > max_iter:
            raise NonConvergenceError(
                f"bracketing: no minimum bracketed after {max_iter} steps "
                f"(last window {a!r}, {b!r}, {c!r})")

        # Parabolic extrapolation through (a, fa), (b, fb), (c, fc)
        r = (b - a) * (fb - fc)
        q = (b - c) * (fb - fa)
        denom = 2 * (q - r)
        denom = min(-TINY, denom) if denom < 0 else max(TINY, denom)
        u = b - ((b - c) * q - (b - a) * r) / denom
        ulim = b + GLIMIT * (c - b)

        if (b - u) * (u - c) > 0:
            # u between b and c
            fu = f(u)
            if fu < fc:
                a, b, fa, fb = b, u, fb, fu
                break
            elif fu > fb:
                c, fc = u, fu
                break
            # Parabola was no use, default magnification
            u = c + PHI * (c - b)
            fu = f(u)
        elif (c - u) * (u - ulim) > 0:
            # u between c and the extrapolation limit
            fu = f(u)
            if fu < fc:
                b, c, u = c, u, u + PHI * (u - c)
                fb, fc, fu = fc, fu, f(u)
        elif (u - ulim) * (ulim - c) >= 0:
            # u beyond the limit: clamp
            u = ulim
            fu = f(u)
        else:
            u = c + PHI * (c - b)
            fu = f(u)

        a, b, c = b, c, u
        fa, fb, fc = fb, fc, fu
        _check_finite("bracketing", (a, b, c), (fa, fb, fc))

    _check_finite("bracketing", (a, b, c), (fa, fb, fc))
    logger.debug("Bracketed minimum in (%g, %g, %g) after %d steps",
                 a, b, c, iterations)
    return a, b, c, fa, fb, fc


def golden_section(f, a, b, c, fb=None, tol=1e-8, abs_tol=1e-12, max_iter=1000):
    """
    Refine a bracket (a, b, c) by golden-section search.

    Parameters
    ----------
    f : callable
        Function of one real variable
    a, b, c : float
        Bracket with b between a and c and f(b) no larger than the ends
    fb : float, optional
        f(b), if already known
    tol : float
        Relative tolerance on the bracket width
    abs_tol : float
        Absolute floor added to the tolerance, so minima at 0 terminate
    max_iter : int
        Maximum number of golden-section steps

    Returns
    -------
    float
        Abscissa of the smaller of the two final interior values
    """
    if fb is None:
        fb = f(b)

    # Put the new interior point in the larger of the two segments
    if abs(c - b) > abs(b - a):
        x1, f1 = b, fb
        x2 = b + PHI2 * (c - b)
        f2 = f(x2)
    else:
        x2, f2 = b, fb
        x1 = b - PHI2 * (b - a)
        f1 = f(x1)

    iterations = 0
    while abs(c - a) > tol * (abs(x1) + abs(x2)) + abs_tol:
        iterations += 1
        if iterations > max_iter:
            raise NonConvergenceError(
                f"golden section: bracket ({a!r}, {c!r}) still wider than "
                f"tolerance after {max_iter} steps")
        if f2 < f1:
            a, x1, f1 = x1, x2, f2
            x2 = PHI1 * x1 + PHI2 * c
            f2 = f(x2)
        else:
            c, x2, f2 = x2, x1, f1
            x1 = PHI1 * x2 + PHI2 * a
            f1 = f(x1)

    logger.debug("Golden section converged after %d steps", iterations)
    return x1 if f1 < f2 else x2


def minimize(f, a, b, tol=1e-8, c=None, abs_tol=1e-12, max_iter=1000):
    """
    Find a local minimum of f near the interval spanned by a and b.

    Parameters
    ----------
    f : callable
        Function of one real variable; need not be smooth
    a, b : float
        Distinct starting abscissae
    tol : float
        Relative tolerance: the final bracket is narrower than
        ``tol * (|x1| + |x2|) + abs_tol``
    c : float, optional
        Third abscissa. When given, (a, b, c) is used as the bracket
        directly and the bracketing phase is skipped.
    abs_tol : float
        Absolute tolerance floor
    max_iter : int
        Iteration cap for each phase

    Returns
    -------
    float
        Abscissa of the located minimum

    Raises
    ------
    ValueError
        If a and b coincide and no c is given
    NonConvergenceError
        If either phase exceeds ``max_iter`` or leaves the finite domain
    """
    if c is None:
        a, b, c, _, fb, _ = bracket(f, a, b, max_iter=max_iter)
    else:
        fb = f(b)
    return golden_section(f, a, b, c, fb=fb, tol=tol, abs_tol=abs_tol,
                          max_iter=max_iter)
