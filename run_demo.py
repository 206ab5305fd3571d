"""Small runnable demo: discretely monitored barrier by PROJ, NIG European by Mellin.

Run examples:
    python run_demo.py
    python run_demo.py --model cgmy
    python run_demo.py --model nig --manual-grid
"""

from __future__ import annotations

import argparse
import logging
import time

from levy_options import ProjGridConfig, mellin_nig_european_price
from levy_options.model_input import make_params, model_from_params

# Parameter sets per model
DEMO_PARAMS = {
    "bsm": {"sigma": 0.2},
    "cgmy": {"C": 0.02, "G": 5.0, "M": 15.0, "Y": 1.2},
    "nig": {"alpha": 15.0, "beta": -5.0, "delta": 0.5},
    "mjd": {"sigma": 0.12, "lam": 0.4, "muj": -0.12, "sigmaj": 0.18},
    "kou": {"sigma": 0.15, "lam": 3.0, "p_up": 0.2, "eta1": 25.0, "eta2": 10.0},
}


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--model", choices=sorted(DEMO_PARAMS), default="bsm")
    ap.add_argument("--manual-grid", action="store_true", help="Size the grid as 2**(P+Pbar) with width 2**Pbar")
    ap.add_argument("--log-n", type=int, default=14)
    ap.add_argument("--L1", type=float, default=12.0)
    ap.add_argument("--M", type=int, default=52, help="Number of monitoring dates")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    # Contract
    S0, W, r, q, T = 100.0, 100.0, 0.05, 0.02, 1.0
    H, rebate = 90.0, 5.0

    config = ProjGridConfig(use_cumulants=not args.manual_grid, log_n=args.log_n, L1=args.L1, P=8, Pbar=3)
    params = make_params(args.model, DEMO_PARAMS[args.model])
    model = model_from_params(params, S0, r, q)

    t0 = time.perf_counter()
    price = model.barrier_price(W, T, H, args.M, is_call=True, down=True, rebate=rebate, config=config)
    elapsed = time.perf_counter() - t0
    print(f"{args.model.upper()} down-and-out call (H={H:g}, M={args.M}, rebate={rebate:g}): "
          f"{price:.8f}  [{elapsed * 1e3:.1f} ms]")

    vanilla = model.barrier_price(W, T, 0.0, args.M, is_call=True, down=True, config=config)
    cos = float(model.european_price([W], T, is_call=True, N=1024)[0])
    print(f"{args.model.upper()} European call: PROJ {vanilla:.8f}  COS {cos:.8f}")

    # Mellin series for NIG
    nig = make_params("nig", DEMO_PARAMS["nig"])
    nig_model = model_from_params(nig, S0, r, q)
    for N1 in (10, 20, 40):
        mellin = mellin_nig_european_price(S0, W, T, r, q, True, nig.alpha, nig.beta, nig.delta, N1)
        print(f"NIG European call, Mellin N1={N1:>3d}: {mellin:.8f}")
    print(f"NIG European call, COS         : {float(nig_model.european_price([W], T, N=2048)[0]):.8f}")


if __name__ == "__main__":
    main()
