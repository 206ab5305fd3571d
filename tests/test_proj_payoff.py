import numpy as np
import pytest
from scipy.integrate import quad

from levy_options.proj.payoff import hat_exp_weight, payoff_coefficients, payoff_values, project_values

S0, W = 100.0, 100.0


def _hat_integral(G, x, dx, kinks):
    pts = sorted(t for t in ((k - x) / dx for k in kinks) if -1.0 < t < 1.0)
    val, _ = quad(lambda t: G(x + t * dx) * (1.0 - abs(t)), -1.0, 1.0, points=[0.0] + pts, epsabs=1e-13, epsrel=1e-13)
    return val


def test_hat_exp_weight_closed_form():
    for dx in (0.5, 1e-2, 1e-4):
        assert hat_exp_weight(dx) == pytest.approx(2.0 * (np.cosh(dx) - 1.0) / dx ** 2, rel=1e-6)
    assert hat_exp_weight(1e-4) == pytest.approx(1.0 + 1e-8 / 12.0, rel=1e-14)


def test_payoff_values_are_vanilla_payoffs():
    x = np.log(np.array([80.0, 100.0, 120.0]) / S0)
    np.testing.assert_allclose(payoff_values(x, S0, W, True), [0.0, 0.0, 20.0], atol=1e-12)
    np.testing.assert_allclose(payoff_values(x, S0, W, False), [20.0, 0.0, 0.0], atol=1e-12)


@pytest.mark.parametrize("is_call, down, H", [(True, True, 90.0), (False, False, 110.0), (True, False, 125.0)])
def test_barrier_payoff_coefficients_match_quadrature(is_call, down, H):
    dx, rebate = 0.013, 5.0
    x = -0.4 + dx * np.arange(64)
    h = np.log(H / S0)
    kw = np.log(W / S0)

    def G(xx):
        alive = xx >= h if down else xx <= h
        if not alive:
            return rebate
        return max(S0 * np.exp(xx) - W, 0.0) if is_call else max(W - S0 * np.exp(xx), 0.0)

    theta = payoff_coefficients(
        x, dx, S0, W, is_call,
        lower=h if down else None, upper=None if down else h, rebate=rebate,
    )
    ref = np.array([_hat_integral(G, xk, dx, [h, kw]) for xk in x])
    np.testing.assert_allclose(theta, ref, rtol=1e-10, atol=1e-10)


def test_vanilla_coefficients_deep_in_the_money():
    dx = 0.01
    x = 0.2 + dx * np.arange(10)
    theta = payoff_coefficients(x, dx, S0, W, True)
    np.testing.assert_allclose(theta, S0 * np.exp(x) * hat_exp_weight(dx) - W, rtol=1e-12)
    assert np.all(payoff_coefficients(-x, dx, S0, W, True) == 0.0)


def test_project_values_is_exact_for_quadratics():
    dx = 0.02
    x = dx * np.arange(-20, 21)
    theta = project_values(x ** 2)
    np.testing.assert_allclose(theta[1:-1], x[1:-1] ** 2 + dx ** 2 / 6.0, atol=1e-14)
    assert theta[0] == x[0] ** 2
    assert theta[-1] == x[-1] ** 2


@pytest.mark.parametrize("down", [True, False])
def test_project_values_half_cell_at_barrier(down):
    dx, rebate, n = 0.02, 3.0, 20
    x = dx * np.arange(-20, 21)
    v = 1.0 + x + x ** 2
    theta = project_values(v, n_barrier=n, down=down, rebate=rebate)

    a, b, c = v[n], (1.0 + 2.0 * x[n]) * dx, dx ** 2
    if down:
        assert np.all(theta[:n] == rebate)
        expected = 0.5 * rebate + a / 2.0 + b / 6.0 + c / 12.0
        np.testing.assert_allclose(theta[n + 1:-1], v[n + 1:-1] + dx ** 2 / 6.0, atol=1e-13)
    else:
        assert np.all(theta[n + 1:] == rebate)
        expected = 0.5 * rebate + a / 2.0 - b / 6.0 + c / 12.0
        np.testing.assert_allclose(theta[1:n], v[1:n] + dx ** 2 / 6.0, atol=1e-13)
    assert theta[n] == pytest.approx(expected, abs=1e-13)
