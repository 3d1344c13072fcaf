"""
Forecast scoring utilities for the sunspot project.

This module:
- Builds the (N, H) matrix of realised values matching a rolling forecast.
- Computes RMSE/MAE overall and per horizon step with scikit-learn.
- Computes empirical coverage of prediction intervals.
- Builds a comparison table (one row per model) and saves it under
  results/model_comparison.csv.

Typical usage (from the pipeline):

    from sunspot_forecast.evaluation import compare_models

    results_df = compare_models(test, {"ARIMA": arima_result, "LSTM": lstm_preds})
"""

from __future__ import annotations

import pathlib
from typing import Mapping, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error

from .backtest import RollingForecast, count_origins

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# project_root/src/sunspot_forecast/evaluation.py -> project_root
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
RESULTS_DIR = PROJECT_ROOT / "results"


# ---------------------------------------------------------------------------
# Actuals
# ---------------------------------------------------------------------------


def build_actuals_matrix(test, horizon: int) -> np.ndarray:
    """Realised values for every forecast origin.

    Row i holds test[i : i + horizon], the months forecast from origin i + 1.

    Args:
        test: Held-out series (1-D).
        horizon: Forecast horizon H.

    Returns:
        Array of shape (len(test) - horizon + 1, horizon).

    Raises:
        ConfigurationError: If horizon is invalid for the test length.
    """
    values = np.asarray(test, dtype=float).ravel()
    n_origins = count_origins(len(values), horizon)
    return np.lib.stride_tricks.sliding_window_view(values, horizon)[:n_origins].copy()


# ---------------------------------------------------------------------------
# Metrics helpers
# ---------------------------------------------------------------------------


def _check_shapes(actuals: np.ndarray, predictions: np.ndarray) -> None:
    if actuals.shape != predictions.shape:
        raise ValueError(
            f"Shape mismatch: actuals {actuals.shape} vs predictions {predictions.shape}"
        )


def forecast_errors(
    actuals: np.ndarray,
    predictions: np.ndarray,
) -> Tuple[float, float]:
    """Compute RMSE and MAE over every (origin, step) pair.

    Args:
        actuals: Realised values, shape (N, H).
        predictions: Point forecasts, shape (N, H).

    Returns:
        A tuple (rmse, mae).
    """
    actuals = np.asarray(actuals, dtype=float)
    predictions = np.asarray(predictions, dtype=float)
    _check_shapes(actuals, predictions)

    rmse = float(np.sqrt(mean_squared_error(actuals.ravel(), predictions.ravel())))
    mae = float(mean_absolute_error(actuals.ravel(), predictions.ravel()))
    return rmse, mae


def errors_by_horizon(
    actuals: np.ndarray,
    predictions: np.ndarray,
) -> pd.DataFrame:
    """RMSE and MAE per forecast step (1..H), averaged over origins."""
    actuals = np.asarray(actuals, dtype=float)
    predictions = np.asarray(predictions, dtype=float)
    _check_shapes(actuals, predictions)

    # multioutput="raw_values" scores each column (= horizon step) separately
    mse = mean_squared_error(actuals, predictions, multioutput="raw_values")
    mae = mean_absolute_error(actuals, predictions, multioutput="raw_values")

    return pd.DataFrame(
        {"rmse": np.sqrt(mse), "mae": mae},
        index=pd.RangeIndex(1, actuals.shape[1] + 1, name="step"),
    )


def interval_coverage(
    actuals: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
) -> float:
    """Fraction of realised values inside [lower, upper]."""
    actuals = np.asarray(actuals, dtype=float)
    _check_shapes(actuals, np.asarray(lower))
    _check_shapes(actuals, np.asarray(upper))

    inside = (actuals >= lower) & (actuals <= upper)
    return float(inside.mean())


# ---------------------------------------------------------------------------
# Comparison table
# ---------------------------------------------------------------------------


def compare_models(
    test,
    forecasts: Mapping[str, RollingForecast | np.ndarray],
    save: bool = True,
) -> pd.DataFrame:
    """Score every model's rolling forecasts on the same rows.

    Args:
        test: Held-out series.
        forecasts: Model name -> RollingForecast (point + interval) or a plain
            (N, H) prediction array (point forecasts only).
        save: If True, write results/model_comparison.csv.

    Returns:
        A DataFrame with columns model, rmse, mae, coverage, sorted by rmse.
        coverage is NaN for models without prediction intervals.
    """
    rows = []

    for name, forecast in forecasts.items():
        if isinstance(forecast, RollingForecast):
            predictions = forecast.predictions
            actuals = build_actuals_matrix(test, forecast.horizon)
            coverage = interval_coverage(actuals, forecast.lower, forecast.upper)
        else:
            predictions = np.asarray(forecast, dtype=float)
            actuals = build_actuals_matrix(test, predictions.shape[1])
            coverage = np.nan

        rmse, mae = forecast_errors(actuals, predictions)
        rows.append(
            {
                "model": name,
                "rmse": rmse,
                "mae": mae,
                "coverage": coverage,
            }
        )

    results_df = pd.DataFrame(rows, columns=["model", "rmse", "mae", "coverage"])
    results_df = results_df.sort_values(by="rmse").reset_index(drop=True)

    print("\n=== Model Comparison on Rolling Test Origins ===")
    print(results_df.to_string(index=False))

    if save:
        RESULTS_DIR.mkdir(parents=True, exist_ok=True)
        out_path = RESULTS_DIR / "model_comparison.csv"
        results_df.to_csv(out_path, index=False)
        print(f"\nSaved results table to: {out_path.resolve()}")

    return results_df
