"""
Visualization utilities for training and forecast evaluation.

This module provides functions to generate and save visualizations for:
- The sunspot series with the train/test split
- A single-origin forecast with its prediction interval
- Forecast error as a function of the horizon step, per model
- Learning curves (loss/MAE over epochs) for LSTM training

All plots are saved to the results/ directory.
"""

from __future__ import annotations

import pathlib
from typing import Any, Mapping

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend for server environments
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

# Project root detection
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
RESULTS_DIR = PROJECT_ROOT / "results"
RESULTS_DIR.mkdir(parents=True, exist_ok=True)


def plot_series_split(
    train: pd.Series,
    test: pd.Series,
    save_path: pathlib.Path | None = None,
) -> None:
    """
    Plot the monthly sunspot series, coloured by train/test split.

    Parameters
    ----------
    train, test : pd.Series
        Date-indexed splits as returned by `train_test_split_by_date`.
    save_path : pathlib.Path | None, optional
        Where to save the plot. Defaults to results/series_split.png.
    """
    if len(train) == 0 or len(test) == 0:
        raise ValueError("Both train and test must be non-empty")

    if save_path is None:
        save_path = RESULTS_DIR / "series_split.png"

    fig, ax = plt.subplots(figsize=(14, 5))
    ax.plot(train.index, train.values, color="steelblue", linewidth=1, label="Train")
    ax.plot(test.index, test.values, color="darkorange", linewidth=1, label="Test")
    ax.axvline(test.index[0], color="grey", linestyle="--", alpha=0.7)

    ax.set_title("Monthly Mean Sunspot Number", fontsize=14, fontweight="bold")
    ax.set_xlabel("Month", fontsize=12)
    ax.set_ylabel("Sunspots", fontsize=12)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches="tight")
    plt.close()

    print(f"Series plot saved to: {save_path.resolve()}")


def plot_origin_forecast(
    test: pd.Series | np.ndarray,
    predictions: np.ndarray,
    origin: int,
    model_name: str,
    lower: np.ndarray | None = None,
    upper: np.ndarray | None = None,
    save_path: pathlib.Path | None = None,
) -> None:
    """
    Plot the forecast launched from one origin against the realised values.

    Parameters
    ----------
    test : pd.Series | np.ndarray
        Held-out series. If it has a DatetimeIndex it is used for the x axis.
    predictions : np.ndarray
        Rolling forecast matrix of shape (N, H).
    origin : int
        Row of `predictions` to plot (0-based).
    model_name : str
        Name of the model (for title and filename).
    lower, upper : np.ndarray | None, optional
        Interval matrices of shape (N, H); a shaded band is drawn when given.
    save_path : pathlib.Path | None, optional
        Defaults to results/forecast_{model_name}_origin_{origin}.png.

    Raises
    ------
    ValueError
        If origin is out of range or interval shapes do not match.
    """
    predictions = np.asarray(predictions, dtype=float)
    n_origins, horizon = predictions.shape
    if not 0 <= origin < n_origins:
        raise ValueError(f"origin must be in [0, {n_origins}), got {origin}")
    if (lower is None) != (upper is None):
        raise ValueError("lower and upper must be given together")
    if lower is not None and (
        np.shape(lower) != predictions.shape or np.shape(upper) != predictions.shape
    ):
        raise ValueError("Interval shapes must match the predictions shape")

    if save_path is None:
        safe_name = model_name.lower().replace(" ", "_")
        save_path = RESULTS_DIR / f"forecast_{safe_name}_origin_{origin}.png"

    if isinstance(test, pd.Series):
        x = test.index[origin : origin + horizon]
        actual = test.values[origin : origin + horizon]
    else:
        x = np.arange(origin, origin + horizon)
        actual = np.asarray(test, dtype=float)[origin : origin + horizon]

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.plot(x, actual, "k-", label="Observed", linewidth=1.5)
    ax.plot(x, predictions[origin], "r-", label=f"{model_name} forecast", linewidth=2)
    if lower is not None:
        ax.fill_between(
            x,
            np.asarray(lower)[origin],
            np.asarray(upper)[origin],
            color="red",
            alpha=0.15,
            label="95% interval",
        )

    ax.set_title(
        f"{model_name}: {horizon}-month forecast from origin {origin + 1}",
        fontsize=14,
        fontweight="bold",
    )
    ax.set_ylabel("Sunspots", fontsize=12)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches="tight")
    plt.close()

    print(f"Forecast plot for {model_name} saved to: {save_path.resolve()}")


def plot_errors_by_horizon(
    errors: Mapping[str, pd.DataFrame],
    metric: str = "rmse",
    save_path: pathlib.Path | None = None,
) -> None:
    """
    Plot a per-step error curve for each model on one chart.

    Parameters
    ----------
    errors : Mapping[str, pd.DataFrame]
        Model name -> output of `evaluation.errors_by_horizon`.
    metric : str
        Column to plot, "rmse" or "mae".
    save_path : pathlib.Path | None, optional
        Defaults to results/{metric}_by_horizon.png.
    """
    if not errors:
        raise ValueError("No error tables to plot")
    for name, table in errors.items():
        if metric not in table.columns:
            raise ValueError(f"Error table for {name} has no column: {metric}")

    if save_path is None:
        save_path = RESULTS_DIR / f"{metric}_by_horizon.png"

    long_df = pd.concat(
        [
            table[[metric]].rename_axis("step").reset_index().assign(model=name)
            for name, table in errors.items()
        ],
        ignore_index=True,
    )

    fig, ax = plt.subplots(figsize=(12, 5))
    sns.lineplot(data=long_df, x="step", y=metric, hue="model", linewidth=2, ax=ax)

    ax.set_title(
        f"{metric.upper()} by Forecast Step", fontsize=14, fontweight="bold"
    )
    ax.set_xlabel("Months ahead", fontsize=12)
    ax.set_ylabel(metric.upper(), fontsize=12)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches="tight")
    plt.close()

    print(f"{metric.upper()} by horizon plot saved to: {save_path.resolve()}")


def plot_learning_curves(
    history: Any,
    save_path: pathlib.Path | None = None,
) -> None:
    """
    Plot LSTM training and validation loss/MAE over epochs.

    Parameters
    ----------
    history : Any
        Keras History object from model.fit() containing training metrics.
        Must have keys: 'loss', 'val_loss', 'mae', 'val_mae'.
    save_path : pathlib.Path | None, optional
        Where to save the plot. Defaults to results/learning_curves.png.

    Raises
    ------
    ValueError
        If history is None, missing required attributes, or has missing keys.
    """
    if history is None or not hasattr(history, "history"):
        raise ValueError("Invalid history object: must have 'history' attribute")

    required_keys = ["loss", "val_loss", "mae", "val_mae"]
    for key in required_keys:
        if key not in history.history:
            raise ValueError(f"History missing required key: {key}")

    if save_path is None:
        save_path = RESULTS_DIR / "learning_curves.png"

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

    epochs = range(1, len(history.history["loss"]) + 1)
    for ax, key, label in ((ax1, "loss", "MSE"), (ax2, "mae", "MAE")):
        ax.plot(
            epochs, history.history[key], "b-", label=f"Training {label}", linewidth=2
        )
        ax.plot(
            epochs,
            history.history[f"val_{key}"],
            "r-",
            label=f"Validation {label}",
            linewidth=2,
        )
        ax.set_title(f"Model {label} Over Epochs", fontsize=14, fontweight="bold")
        ax.set_xlabel("Epoch", fontsize=12)
        ax.set_ylabel(label, fontsize=12)
        ax.legend(fontsize=10)
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches="tight")
    plt.close()

    print(f"\nLearning curves saved to: {save_path.resolve()}")
