"""
End-to-end pipeline orchestration for the sunspot forecasting project.

This module coordinates the main steps:

    1. Download the monthly sunspot series.
    2. Load it and split into train/test by date.
    3. Fit an automatic ARIMA model on the training split.
    4. Rolling-origin ARIMA evaluation over the test split.
    5. Preprocess, train the LSTM and forecast the same origins.
    6. Compare both models and save plots.

Typical usage (from the project root):

    from sunspot_forecast.pipeline import run_pipeline
    run_pipeline()

The root-level main.py script parses CLI flags and calls this function.
"""

from __future__ import annotations

import pathlib

import numpy as np
import pandas as pd

from . import config
from .backtest import (
    RefitMode,
    RollingForecast,
    count_origins,
    resolve_mode,
    rolling_forecast,
)
from .download_data import download_and_save_raw_data
from .evaluation import build_actuals_matrix, compare_models, errors_by_horizon
from .models.arima import ArimaBackend, describe_order
from .preprocessing import (
    load_sunspot_series,
    prepare_lstm_data,
    train_test_split_by_date,
)
from .visualization import (
    plot_errors_by_horizon,
    plot_origin_forecast,
    plot_series_split,
)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# src/sunspot_forecast/pipeline.py -> src -> project root
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]

DATA_DIR = PROJECT_ROOT / "data"
ARIMA_DIR = DATA_DIR / "arima"
LSTM_DIR = DATA_DIR / "lstm"
RESULTS_DIR = PROJECT_ROOT / "results"


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


def run_pipeline(
    force_download: bool = False,
    mode: RefitMode | str = config.REFIT_MODE,
    n_jobs: int = 1,
    skip_lstm: bool = False,
    horizon: int = config.HORIZON,
) -> pd.DataFrame:
    """Run the full end-to-end pipeline.

    Args:
        force_download:
            If True, re-download the raw CSV even if it already exists.
        mode:
            Refit policy for the rolling ARIMA evaluation
            ("reestimate_only" or "recompute_model").
        n_jobs:
            joblib workers used across forecast origins (1 = sequential).
        skip_lstm:
            If True, only the ARIMA model is evaluated.
        horizon:
            Forecast horizon in months.

    Returns:
        A pandas DataFrame with one row per model and the columns
        model, rmse, mae, coverage.
    """
    # Fail on a bad mode before downloading or fitting anything
    mode = resolve_mode(mode)

    print("\n=== STEP 1: Download raw data ===")
    raw_path = download_and_save_raw_data(force=force_download)

    print("\n=== STEP 2: Load & split series ===")
    series = load_sunspot_series(raw_path)
    train, test = train_test_split_by_date(series)
    # Reject a horizon longer than the test split before the order search
    n_origins = count_origins(len(test), horizon)
    print(f"Forecast origins: {n_origins} x {horizon} months")
    plot_series_split(train, test)

    print("\n=== STEP 3: Fit ARIMA on training split ===")
    backend = ArimaBackend()
    arima_model = backend.fit(train.values)
    print(f"Selected model: {describe_order(backend.order(arima_model))}")

    print(f"\n=== STEP 4: Rolling ARIMA forecasts ({mode.value}) ===")
    arima_result = rolling_forecast(
        backend,
        arima_model,
        horizon,
        train.values,
        test.values,
        mode=mode,
        n_jobs=n_jobs,
    )
    ARIMA_DIR.mkdir(parents=True, exist_ok=True)
    np.save(ARIMA_DIR / "y_pred_arima.npy", arima_result.predictions)
    np.save(ARIMA_DIR / "y_lower_arima.npy", arima_result.lower)
    np.save(ARIMA_DIR / "y_upper_arima.npy", arima_result.upper)
    print(f"Saved ARIMA rolling forecasts to: {ARIMA_DIR.resolve()}")

    forecasts = {"ARIMA": arima_result}

    if not skip_lstm:
        print("\n=== STEP 5: Train LSTM and forecast ===")
        # Imported lazily so ARIMA-only runs do not pay the TensorFlow import
        from .models.lstm import train_and_forecast_lstm

        prepare_lstm_data(series, horizon=horizon)
        lstm_predictions, _ = train_and_forecast_lstm()
        forecasts["LSTM"] = lstm_predictions

    print("\n=== STEP 6: Compare models ===")
    results_df = compare_models(test.values, forecasts)

    actuals = build_actuals_matrix(test.values, horizon)
    errors = {}
    for name, forecast in forecasts.items():
        if isinstance(forecast, RollingForecast):
            forecast = forecast.predictions
        errors[name] = errors_by_horizon(actuals, forecast)
    plot_errors_by_horizon(errors, metric="rmse")
    plot_errors_by_horizon(errors, metric="mae")

    plot_origin_forecast(
        test,
        arima_result.predictions,
        origin=0,
        model_name="ARIMA",
        lower=arima_result.lower,
        upper=arima_result.upper,
    )
    if "LSTM" in forecasts:
        plot_origin_forecast(test, forecasts["LSTM"], origin=0, model_name="LSTM")

    print("\n=== PIPELINE COMPLETED SUCCESSFULLY ===")
    print(f"  Raw CSV:       {raw_path}")
    print(f"  ARIMA dir:     {ARIMA_DIR}")
    print(f"  LSTM dir:      {LSTM_DIR}")
    print(f"  Results dir:   {RESULTS_DIR}")
    print(
        f"  Train period:  {config.START_DATE} -> {config.TRAIN_END} "
        f"| Test period: {config.TEST_START} -> {config.END_DATE}"
    )

    return results_df


def main() -> None:
    """Allow running this module directly:

    python -m sunspot_forecast.pipeline
    """
    run_pipeline()


if __name__ == "__main__":
    main()
