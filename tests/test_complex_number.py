import math

import pytest

from complex_number import Complex, ZERO, ONE, I, INFINITY, add, mul


SAMPLES = [
    Complex(1.0, 2.0),
    Complex(-3.5, 0.25),
    Complex(1e-3, -7.0),
    Complex(42.0, 0.0),
    Complex(-0.5, -0.5),
]


def assert_close(z, w, tol=1e-9):
    w = Complex.of(w)
    assert z.real == pytest.approx(w.real, abs=tol)
    assert z.imag == pytest.approx(w.imag, abs=tol)


def test_lifting():
    assert Complex.of(3) == Complex(3.0, 0.0)
    assert Complex.of(2.5, im=1.0) == Complex(2.5, 1.0)
    assert Complex.of(1 - 2j) == Complex(1.0, -2.0)
    assert Complex.of((4, 5)) == Complex(4.0, 5.0)
    z = Complex(1, 1)
    assert Complex.of(z) is z
    with pytest.raises(TypeError):
        Complex.of(None)


def test_immutable():
    z = Complex(1, 2)
    with pytest.raises(AttributeError):
        z.real = 3
    z.add(1, I)
    z.mul(2, I)
    assert z == Complex(1, 2)


def test_polar_and_rect():
    assert Complex.polar(1, 0) == Complex.rect(1, 0)
    assert_close(Complex.polar(1, math.pi / 2), Complex.rect(0, 1))
    assert_close(Complex.polar(2, math.pi), Complex.rect(-2, 0))


def test_accessors():
    z = Complex(3, -4)
    assert z.real == 3 and z.imag == -4
    assert z.mag == 5
    assert z.mag2 == 25
    assert z.arg == pytest.approx(math.atan2(-4, 3))
    assert z.conj == Complex(3, 4)
    assert z.neg == Complex(-3, 4)
    assert z.xy == (3.0, -4.0)
    assert abs(z) == 5


def test_conj_of_real_is_same_value():
    z = Complex(7, 0)
    assert z.conj is z


def test_mag_avoids_overflow():
    z = Complex(1e200, 1e200)
    assert math.isfinite(z.mag)
    assert z.mag == pytest.approx(math.sqrt(2) * 1e200)


@pytest.mark.parametrize("z", SAMPLES)
@pytest.mark.parametrize("w", SAMPLES)
def test_add_sub_inverse(z, w):
    assert_close(z.add(w).sub(w), z)


@pytest.mark.parametrize("z", SAMPLES)
@pytest.mark.parametrize("w", SAMPLES)
def test_mul_div_inverse(z, w):
    assert_close(z.mul(w).div(w), z, tol=1e-9 * max(1.0, z.mag))


@pytest.mark.parametrize("z", SAMPLES)
def test_product_with_conjugate_is_real(z):
    p = z.mul(z.conj)
    assert p.imag == pytest.approx(0.0, abs=1e-12)
    assert p.real == pytest.approx(z.mag2)


def test_mul_matches_builtin_complex():
    z, w = Complex(1, 2), Complex(3, -1)
    assert complex(z.mul(w)) == pytest.approx((1 + 2j) * (3 - 1j))
    assert complex(z.div(w)) == pytest.approx((1 + 2j) / (3 - 1j))


def test_variadic_fold_and_identities():
    assert add() == ZERO
    assert mul() == ONE
    assert add(1, I, Complex(2, 3)) == Complex(3, 4)
    assert_close(mul(I, I, I, I), ONE)
    assert Complex(1, 1).add(1, 2, 3) == Complex(7, 1)
    assert_close(Complex(2, 0).mul(I, 3), Complex(0, 6))


def test_real_operands_are_lifted():
    z = Complex(2, 3)
    assert z.add(1) == Complex(3, 3)
    assert z.mul(2) == Complex(4, 6)
    assert_close(z.div(2), Complex(1, 1.5))
    assert z.sub(2.5) == Complex(-0.5, 3)


def test_reciprocal():
    assert_close(Complex(0, 2).recip, Complex(0, -0.5))
    assert_close(Complex(3, 4).recip.mul(Complex(3, 4)), ONE)


def test_reciprocal_and_division_of_zero_give_sentinel():
    assert ZERO.recip == INFINITY
    assert Complex(1, 2).div(0) == INFINITY
    assert Complex(1, 2).div(ZERO) == INFINITY
    assert math.isinf(INFINITY.mag)


@pytest.mark.parametrize("z", SAMPLES)
def test_exp_log_roundtrip(z):
    assert_close(z.log().exp(), z, tol=1e-9 * z.mag)


def test_log_exp_wraps_to_principal_branch():
    z = Complex(0.5, 4.0)
    w = z.exp().log()
    assert w.real == pytest.approx(0.5)
    assert w.imag == pytest.approx(math.remainder(4.0, 2 * math.pi))
    assert -math.pi < w.imag <= math.pi


def test_log_of_negative_real_is_on_positive_branch():
    assert_close(Complex(-1, 0).log(), Complex(0, math.pi))


def test_pow():
    assert_close(I.pow(2), Complex(-1, 0))
    assert_close(Complex(4, 0).pow(0.5), Complex(2, 0))
    assert_close(Complex(2, 0).pow(Complex(0, 0)), ONE)


def test_degenerate_cases_do_not_raise():
    assert Complex(1000, 0).exp().real == math.inf
    assert ZERO.log().real == -math.inf
    assert math.isnan(Complex(0, math.inf).exp().real)
    assert math.isnan(Complex.polar(1, math.inf).real)
    ZERO.pow(2)


def test_operators():
    z, w = Complex(1, 2), Complex(3, 4)
    assert z + w == z.add(w)
    assert 1 + z == Complex(2, 2)
    assert z - 1 == Complex(0, 2)
    assert 1 - z == Complex(0, -2)
    assert z * w == z.mul(w)
    assert 2 * z == Complex(2, 4)
    assert z / w == z.div(w)
    assert_close(1 / z, z.recip)
    assert -z == z.neg
    assert_close(z ** 2, z.mul(z))
    assert Complex(2, 0) == 2
    assert hash(Complex(2, 0)) == hash(2.0)
    assert list(z) == [1.0, 2.0]


@pytest.mark.parametrize("scale", [1e200, 1e-200])
def test_division_and_reciprocal_at_extreme_scale(scale):
    z = Complex(scale, scale)
    assert_close(z.div(z), ONE)
    assert_close(z.recip.mul(z), ONE)
    assert_close(Complex(scale, 0).div(Complex(0, scale)), Complex(0, -1))


def test_equality_is_numeric_only():
    z = Complex(1, 2)
    assert z == 1 + 2j
    assert hash(z) == hash(1 + 2j)
    assert z != "12"
    assert z != (1, 2)
    assert z != [1, 2]
