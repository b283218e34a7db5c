"""
Immutable complex numbers used as 2D points, vectors and rotations.

Every operation returns a new value and never raises: degenerate inputs
(division by zero, overflow in exp, log of zero) produce ordinary float
results such as inf or nan instead of exceptions.
"""

import math
import numbers
import sys


# Largest argument math.exp accepts without OverflowError
_EXP_LIMIT = math.log(sys.float_info.max)


class Complex:
    """
    Immutable complex value (re, im).

    Plain reals, Python complex numbers and (x, y) pairs are accepted
    wherever a Complex is expected; they are converted once per operation
    by :meth:`Complex.of`.

    Notes
    -----
    The reciprocal of zero (and division by zero) is the sentinel
    ``INFINITY == Complex(inf, 0)``: infinite magnitude, undefined
    direction. This is an approximation, not a signed infinity per
    component, and should not be treated as safe division.
    """

    __slots__ = ('_re', '_im')

    def __init__(self, re=0.0, im=0.0):
        object.__setattr__(self, '_re', float(re))
        object.__setattr__(self, '_im', float(im))

    def __setattr__(self, name, value):
        raise AttributeError("Complex values are immutable")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, z, im=0.0):
        """
        Lift a value to Complex.

        Parameters
        ----------
        z : Complex, real, complex or (x, y) sequence
            Value to convert
        im : float
            Extra imaginary part added to the result

        Returns
        -------
        Complex
        """
        if isinstance(z, Complex):
            return z if not im else Complex(z._re, z._im + im)
        if isinstance(z, numbers.Real):
            return Complex(z, im)
        if isinstance(z, numbers.Complex):
            return Complex(z.real, z.imag + im)
        try:
            x, y = z
        except (TypeError, ValueError):
            raise TypeError(f"cannot convert {z!r} to Complex") from None
        return Complex(x, float(y) + im)

    @classmethod
    def rect(cls, re, im):
        return cls(re, im)

    @classmethod
    def polar(cls, mag, arg):
        if math.isinf(arg):
            return cls(math.nan, math.nan)
        return cls(mag * math.cos(arg), mag * math.sin(arg))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def real(self):
        return self._re

    @property
    def imag(self):
        return self._im

    @property
    def xy(self):
        """Cartesian pair (x, y) for renderers and numpy."""
        return (self._re, self._im)

    @property
    def mag(self):
        # hypot avoids overflow/underflow in the intermediate squares
        return math.hypot(self._re, self._im)

    @property
    def mag2(self):
        return self._re * self._re + self._im * self._im

    @property
    def arg(self):
        return math.atan2(self._im, self._re)

    @property
    def conj(self):
        return Complex(self._re, -self._im) if self._im else self

    @property
    def neg(self):
        return Complex(-self._re, -self._im)

    @property
    def recip(self):
        r = self.mag
        if not r:
            return INFINITY
        # Dividing by r twice is less likely to overflow than dividing by r²
        return Complex(self._re / r / r, -self._im / r / r)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, *zs):
        """Sum of self and all of ``zs``, left to right."""
        re, im = self._re, self._im
        for z in zs:
            z = Complex.of(z)
            re += z._re
            im += z._im
        return Complex(re, im)

    def mul(self, *zs):
        """Product of self and all of ``zs``, folded left to right."""
        re, im = self._re, self._im
        for z in zs:
            z = Complex.of(z)
            # temporary keeps the old re for the imaginary part
            new_re = re * z._re - im * z._im
            im = re * z._im + im * z._re
            re = new_re
        return Complex(re, im)

    def sub(self, z):
        z = Complex.of(z)
        return Complex(self._re - z._re, self._im - z._im)

    def div(self, z):
        """
        Quotient self / z.

        Both operands are scaled by 1/|z| before forming the cross terms,
        which keeps intermediate values near unit scale. Division by zero
        returns ``INFINITY``.
        """
        z = Complex.of(z)
        r = z.mag
        if not r:
            return INFINITY
        a, b = self._re / r, self._im / r
        c, d = z._re / r, z._im / r
        return Complex(a * c + b * d, b * c - a * d)

    def exp(self):
        r = math.inf if self._re > _EXP_LIMIT else math.exp(self._re)
        if math.isinf(self._im):
            return Complex(math.nan, math.nan)
        return Complex(r * math.cos(self._im), r * math.sin(self._im))

    def log(self):
        """Principal logarithm; the imaginary part lies in (-π, π]."""
        m = self.mag
        return Complex(math.log(m) if m else -math.inf, self.arg)

    def pow(self, z):
        return self.log().mul(z).exp()

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return Complex.of(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return Complex.of(other).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return Complex.of(other).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return Complex.of(other).div(self)

    def __pow__(self, other):
        return self.pow(other)

    def __neg__(self):
        return self.neg

    def __abs__(self):
        return self.mag

    def __complex__(self):
        return complex(self._re, self._im)

    def __iter__(self):
        yield self._re
        yield self._im

    def __eq__(self, other):
        # Only numeric operands; pairs lift in arithmetic but hash differently
        if not isinstance(other, (Complex, numbers.Complex)):
            return NotImplemented
        other = Complex.of(other)
        return self._re == other._re and self._im == other._im

    def __hash__(self):
        return hash(complex(self._re, self._im))

    def __repr__(self):
        return f"Complex({self._re!r}, {self._im!r})"

    def __str__(self):
        return f"{self._re} + {self._im}i"


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)
I = Complex(0.0, 1.0)
INFINITY = Complex(math.inf, 0.0)


def add(*zs):
    """Sum of ``zs`` folded left to right from ZERO."""
    return ZERO.add(*zs)


def mul(*zs):
    """Product of ``zs`` folded left to right from ONE."""
    return ONE.mul(*zs)
