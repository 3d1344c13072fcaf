#!/usr/bin/env python

"""
Main entry point for the sunspot ARIMA vs LSTM forecasting project.

This script orchestrates the full pipeline:
    1. Download the monthly sunspot series
    2. Split into train/test by date
    3. Fit an automatic ARIMA model on the training split
    4. Rolling-origin 120-month ARIMA forecasts over the test split
    5. Train the LSTM and forecast the same origins
    6. Compare both models and save plots

Usage (from project root):

    python main.py                              # ARIMA (re-estimate only) + LSTM
    python main.py --mode recompute_model       # re-run auto_arima at every origin
    python main.py --n-jobs 4                   # parallelise over forecast origins
    python main.py --skip-lstm                  # ARIMA only
"""

from __future__ import annotations

import argparse
import os

from sunspot_forecast import config
from sunspot_forecast.backtest import RefitMode
from sunspot_forecast.pipeline import run_pipeline


def ensure_venv() -> None:
    """Warn if the user is not inside a virtual environment."""
    if "VIRTUAL_ENV" not in os.environ and "CONDA_PREFIX" not in os.environ:
        print("---- ENVIRONMENT WARNING ----")
        print("You are not running inside a virtual environment.")
        print("Recommended steps (from project root):")
        print("  python3 -m venv .venv")
        print("  source .venv/bin/activate")
        print("  pip install -e .")
        print()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Sunspot ARIMA vs LSTM rolling forecast comparison"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in RefitMode],
        default=config.REFIT_MODE,
        help="ARIMA refit policy at each forecast origin (default: %(default)s)",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=config.HORIZON,
        help="Forecast horizon in months (default: %(default)s)",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=1,
        help="Parallel workers across forecast origins (default: 1)",
    )
    parser.add_argument(
        "--skip-lstm",
        action="store_true",
        help="Only evaluate the ARIMA model",
    )
    parser.add_argument(
        "--force-download",
        action="store_true",
        help="Force re-download of raw data",
    )
    args = parser.parse_args()

    ensure_venv()
    run_pipeline(
        force_download=args.force_download,
        mode=args.mode,
        n_jobs=args.n_jobs,
        skip_lstm=args.skip_lstm,
        horizon=args.horizon,
    )


if __name__ == "__main__":
    main()
