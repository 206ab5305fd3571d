import warnings

import numpy as np
import pytest
from scipy.integrate import quad
from scipy.stats import norm

from levy_options import (
    GBMCHF,
    BSMParams,
    CGMYParams,
    GridResolutionWarning,
    InvalidParameterError,
    KouParams,
    MJDParams,
    NIGParams,
    ProjBarrierPricer,
    ProjGridConfig,
)
from levy_options.cos.pricer import COSPricer
from levy_options.model_input import get_model_input, model_from_params
from levy_options.proj.barrier import price_barrier

S0, W, r, q, T = 100.0, 100.0, 0.05, 0.02, 1.0
SIGMA = 0.2

PARAMS = [
    BSMParams(0.2),
    CGMYParams(0.02, 5.0, 15.0, 1.2),
    NIGParams(15.0, -5.0, 0.5),
    MJDParams(0.12, 0.4, -0.12, 0.18),
    KouParams(0.15, 3.0, 0.2, 25.0, 10.0),
]


def _d1(K: float, t: float) -> float:
    return (np.log(S0 / K) + (r - q + 0.5 * SIGMA ** 2) * t) / (SIGMA * np.sqrt(t))


def _d2(K: float, t: float) -> float:
    return _d1(K, t) - SIGMA * np.sqrt(t)


def _bs_price(K: float, is_call: bool = True) -> float:
    if is_call:
        return float(S0 * np.exp(-q * T) * norm.cdf(_d1(K, T)) - K * np.exp(-r * T) * norm.cdf(_d2(K, T)))
    return float(K * np.exp(-r * T) * norm.cdf(-_d2(K, T)) - S0 * np.exp(-q * T) * norm.cdf(-_d1(K, T)))


def _bivariate_cdf(a: float, b: float, rho: float) -> float:
    s = np.sqrt(1.0 - rho * rho)
    val, _ = quad(lambda z: norm.pdf(z) * norm.cdf((a - rho * z) / s), -np.inf, b, epsabs=1e-13, epsrel=1e-12)
    return val


def _bsm_barrier(H, M, is_call=True, down=True, rebate=0.0, config=None):
    model = GBMCHF(S0, r, q, BSMParams(SIGMA))
    return ProjBarrierPricer(model, config=config).price(W, T, H, M, is_call=is_call, down=down, rebate=rebate)


@pytest.mark.parametrize("is_call", [True, False])
def test_zero_down_barrier_reproduces_black_scholes(is_call):
    assert _bsm_barrier(0.0, 1, is_call=is_call) == pytest.approx(_bs_price(W, is_call), abs=1e-4)
    assert _bsm_barrier(0.0, 12, is_call=is_call) == pytest.approx(_bs_price(W, is_call), abs=1e-3)


def test_infinite_up_barrier_reproduces_black_scholes():
    price = _bsm_barrier(np.inf, 4, is_call=False, down=False)
    assert price == pytest.approx(_bs_price(W, is_call=False), abs=1e-3)


def test_put_call_parity_without_barrier():
    call = _bsm_barrier(0.0, 4, is_call=True)
    put = _bsm_barrier(0.0, 4, is_call=False)
    assert call - put == pytest.approx(S0 * np.exp(-q * T) - W * np.exp(-r * T), abs=1e-4)


def test_single_monitoring_date_down_and_out_call_with_rebate():
    H, rebate = 90.0, 5.0
    expected = _bs_price(W) + rebate * np.exp(-r * T) * norm.cdf(-_d2(H, T))
    assert _bsm_barrier(H, 1, rebate=rebate) == pytest.approx(expected, abs=1e-4)


def test_single_monitoring_date_up_and_out_put_with_rebate():
    H, rebate = 110.0, 2.0
    expected = _bs_price(W, is_call=False) + rebate * np.exp(-r * T) * norm.cdf(_d2(H, T))
    assert _bsm_barrier(H, 1, is_call=False, down=False, rebate=rebate) == pytest.approx(expected, abs=1e-4)


def test_single_monitoring_date_barrier_above_spot():
    # Spot starts below a down barrier; only the maturity observation matters.
    H = 105.0
    expected = S0 * np.exp(-q * T) * norm.cdf(_d1(H, T)) - W * np.exp(-r * T) * norm.cdf(_d2(H, T))
    assert _bsm_barrier(H, 1) == pytest.approx(expected, abs=1e-4)


def test_two_monitoring_dates_match_bivariate_normal():
    H, t1 = 90.0, 0.5 * T
    rho = np.sqrt(t1 / T)
    expected = (S0 * np.exp(-q * T) * _bivariate_cdf(_d1(W, T), _d1(H, t1), rho)
                - W * np.exp(-r * T) * _bivariate_cdf(_d2(W, T), _d2(H, t1), rho))
    assert _bsm_barrier(H, 2) == pytest.approx(expected, abs=1e-4)


def test_down_and_out_call_decreases_as_barrier_approaches_spot():
    prices = [_bsm_barrier(H, 12) for H in (80.0, 85.0, 90.0, 95.0)]
    assert np.all(np.diff(prices) < 0.0)
    assert prices[0] < _bs_price(W)


def test_rebate_adds_value():
    no_rebate = _bsm_barrier(95.0, 12)
    with_rebate = _bsm_barrier(95.0, 12, rebate=5.0)
    assert no_rebate < with_rebate < no_rebate + 5.0


def test_reference_scenario_is_stable_under_grid_refinement():
    coarse = _bsm_barrier(90.0, 52, rebate=5.0, config=ProjGridConfig(log_n=12))
    fine = _bsm_barrier(90.0, 52, rebate=5.0, config=ProjGridConfig(log_n=14))
    manual = _bsm_barrier(90.0, 52, rebate=5.0, config=ProjGridConfig(use_cumulants=False, P=8, Pbar=3))

    assert coarse == pytest.approx(fine, abs=1e-3)
    assert manual == pytest.approx(fine, abs=5e-3)


def test_reference_scenario_pinned_value():
    price = _bsm_barrier(90.0, 52, rebate=5.0, config=ProjGridConfig(log_n=14, L1=12.0))
    assert price == pytest.approx(10.638011, abs=1e-4)


def test_heavy_tailed_put_call_parity_on_default_grid():
    model = model_from_params(CGMYParams(0.02, 5.0, 15.0, 1.2), S0, r, q)
    call = model.barrier_price(W, T, 0.0, 1, is_call=True)
    put = model.barrier_price(W, T, 0.0, 1, is_call=False)

    assert put == pytest.approx(2.2019547, abs=1e-4)
    assert call - put == pytest.approx(S0 * np.exp(-q * T) - W * np.exp(-r * T), abs=1e-4)


def test_up_and_out_put_is_stable_when_widening_the_grid():
    model = model_from_params(CGMYParams(0.02, 5.0, 15.0, 1.2), S0, r, q)
    default = model.barrier_price(W, T, 110.0, 12, is_call=False, down=False)
    wide = model.barrier_price(W, T, 110.0, 12, is_call=False, down=False,
                               config=ProjGridConfig(log_n=16, L1=24.0))
    assert default == pytest.approx(wide, abs=2e-4)
    assert default == pytest.approx(2.157919, abs=2e-4)


@pytest.mark.parametrize("params", PARAMS)
def test_vanilla_limit_matches_cos(params):
    model = model_from_params(params, S0, r, q)
    cos = COSPricer(model, N=4096, L=12.0)
    for is_call in (True, False):
        proj = model.barrier_price(W, T, 0.0, 1, is_call=is_call)
        ref = float(cos.european_price(np.array([W]), T, is_call=is_call)[0])
        assert proj == pytest.approx(ref, abs=2e-4)


@pytest.mark.parametrize("params", PARAMS)
def test_reference_scenario_all_models(params):
    model = model_from_params(params, S0, r, q)
    with warnings.catch_warnings():
        warnings.simplefilter("error", GridResolutionWarning)
        price = model.barrier_price(W, T, 90.0, 52, is_call=True, down=True, rebate=5.0)
    vanilla = float(model.european_price([W], T, N=2048)[0])

    assert np.isfinite(price)
    assert 0.0 < price < vanilla + 5.0


def test_price_barrier_matches_pricer_object():
    params = NIGParams(15.0, -5.0, 0.5)
    M, H = 12, 90.0
    config = ProjGridConfig(log_n=12)
    model_input = get_model_input(params, T / M, r, q)
    N, alpha = config.resolve(T, model_input)

    direct = price_barrier(N, alpha, True, True, S0, W, H, M, r, q, model_input, T, 5.0, config=config)
    wrapped = model_from_params(params, S0, r, q).barrier_price(W, T, H, M, rebate=5.0, config=config)
    assert direct == wrapped


def test_invalid_contracts_are_rejected():
    model_input = get_model_input(BSMParams(SIGMA), T / 4, r, q)
    args = dict(N=2 ** 12, alpha=2.4, call=True, down=True, S0=S0, W=W, H=90.0, M=4, r=r, q=q,
                model_input=model_input, T=T, rebate=0.0)

    for bad in ({"N": 1000}, {"H": 1.0}, {"H": -5.0}, {"M": 0}, {"M": 5}, {"W": 0.0},
                {"down": False, "H": 0.0}, {"down": True, "H": np.inf}, {"rebate": np.nan}, {"rebate": -1.0}):
        with pytest.raises(InvalidParameterError):
            price_barrier(**{**args, **bad})
