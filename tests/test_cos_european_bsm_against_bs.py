import numpy as np
import pytest
from scipy.stats import norm

from levy_options import GBMCHF, BSMParams, InvalidParameterError
from levy_options.engine import COSPricer


def _bs_price(S: float, K: float, r: float, q: float, vol: float, T: float, is_call: bool = True) -> float:
    sig_sqrt = vol * np.sqrt(T)
    d1 = (np.log(S / K) + (r - q + 0.5 * vol * vol) * T) / sig_sqrt
    d2 = d1 - sig_sqrt
    if is_call:
        return float(S * np.exp(-q * T) * norm.cdf(d1) - K * np.exp(-r * T) * norm.cdf(d2))
    return float(K * np.exp(-r * T) * norm.cdf(-d2) - S * np.exp(-q * T) * norm.cdf(-d1))


def test_cos_bsm_matches_cos_paper_table_2_reference():
    # Fang-Oosterlee (2008), Table 2
    S0, r, q, vol, T = 100.0, 0.1, 0.0, 0.25, 0.1
    K = np.array([80.0, 100.0, 120.0])
    refs = np.array([20.799226309, 3.659968453, 0.044577814])

    model = GBMCHF(S0, r, q, BSMParams(vol))
    pricer = COSPricer(model, N=256, L=10.0)
    prices = pricer.european_price(K, T)

    assert np.allclose(prices, refs, rtol=1e-8, atol=2e-9)


def test_cos_bsm_matches_black_scholes_across_strikes():
    S0, r, q, vol, T = 100.0, 0.02, 0.01, 0.25, 1.0
    K = np.array([60.0, 80.0, 90.0, 100.0, 110.0, 125.0, 150.0])

    model = GBMCHF(S0, r, q, BSMParams(vol))
    pricer = COSPricer(model, N=512, L=10.0)
    calls = pricer.european_price(K, T)
    puts = pricer.european_price(K, T, is_call=False)

    bs_calls = np.array([_bs_price(S0, float(k), r, q, vol, T) for k in K])
    bs_puts = np.array([_bs_price(S0, float(k), r, q, vol, T, is_call=False) for k in K])
    assert np.allclose(calls, bs_calls, rtol=1e-9, atol=1e-9)
    assert np.allclose(puts, bs_puts, rtol=1e-9, atol=1e-9)


def test_model_wrapper_matches_pricer():
    model = GBMCHF(100.0, 0.03, 0.0, BSMParams(0.3))
    direct = COSPricer(model, N=256, L=10.0).european_price(np.array([95.0, 105.0]), 0.5)
    wrapped = model.european_price([95.0, 105.0], 0.5, N=256, L=10.0)
    np.testing.assert_allclose(wrapped, direct, rtol=0.0, atol=0.0)


def test_cos_rejects_bad_inputs():
    model = GBMCHF(100.0, 0.03, 0.0, BSMParams(0.3))
    with pytest.raises(InvalidParameterError):
        COSPricer(model, N=1)
    with pytest.raises(InvalidParameterError):
        COSPricer(model).european_price(np.array([-1.0]), 1.0)
    with pytest.raises(InvalidParameterError):
        COSPricer(model).european_price(np.array([100.0]), 0.0)
