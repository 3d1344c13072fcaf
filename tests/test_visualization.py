"""
Tests for the visualization module.

Tests cover:
- Series / split plot generation
- Single-origin forecast plot generation (with and without intervals)
- Error-by-horizon plot generation
- Learning curve plot generation
- Error handling for invalid inputs
"""

import numpy as np
import pandas as pd
import pytest

from sunspot_forecast import visualization
from sunspot_forecast.visualization import (
    plot_errors_by_horizon,
    plot_learning_curves,
    plot_origin_forecast,
    plot_series_split,
)


class MockHistory:
    """Mock Keras History object for testing."""

    def __init__(self):
        self.history = {
            "loss": [0.5, 0.4, 0.3, 0.25, 0.2],
            "val_loss": [0.6, 0.5, 0.4, 0.35, 0.3],
            "mae": [0.3, 0.25, 0.2, 0.18, 0.15],
            "val_mae": [0.35, 0.3, 0.25, 0.22, 0.2],
        }


def _make_split():
    idx = pd.date_range("1749-01-01", periods=40, freq="MS")
    series = pd.Series(np.linspace(0.0, 100.0, 40), index=idx)
    return series.iloc[:30], series.iloc[30:]


def test_plot_series_split_creates_file(tmp_path):
    train, test = _make_split()
    save_path = tmp_path / "split.png"

    plot_series_split(train, test, save_path=save_path)

    assert save_path.exists()
    assert save_path.stat().st_size > 0


def test_plot_series_split_rejects_empty():
    train, _ = _make_split()
    with pytest.raises(ValueError):
        plot_series_split(train, train.iloc[:0])


def test_plot_origin_forecast_with_interval(tmp_path):
    _, test = _make_split()
    predictions = np.tile(np.arange(4.0), (7, 1))
    save_path = tmp_path / "fc.png"

    plot_origin_forecast(
        test,
        predictions,
        origin=2,
        model_name="ARIMA",
        lower=predictions - 1.0,
        upper=predictions + 1.0,
        save_path=save_path,
    )

    assert save_path.exists()


def test_plot_origin_forecast_default_filename(monkeypatch, tmp_path):
    monkeypatch.setattr(visualization, "RESULTS_DIR", tmp_path)
    test = np.arange(10.0)
    predictions = np.zeros((8, 3))

    plot_origin_forecast(test, predictions, origin=0, model_name="Stacked LSTM")

    assert (tmp_path / "forecast_stacked_lstm_origin_0.png").exists()


def test_plot_origin_forecast_out_of_range():
    with pytest.raises(ValueError, match="origin must be in"):
        plot_origin_forecast(np.arange(10.0), np.zeros((8, 3)), 8, "LSTM")


def test_plot_origin_forecast_requires_both_bounds():
    predictions = np.zeros((8, 3))
    with pytest.raises(ValueError, match="together"):
        plot_origin_forecast(
            np.arange(10.0), predictions, 0, "ARIMA", lower=predictions
        )


def test_plot_errors_by_horizon_creates_file(tmp_path):
    steps = pd.RangeIndex(1, 4, name="step")
    errors = {
        "ARIMA": pd.DataFrame({"rmse": [1.0, 2.0, 3.0], "mae": [1.0, 1.5, 2.0]}, index=steps),
        "LSTM": pd.DataFrame({"rmse": [1.5, 1.8, 2.0], "mae": [1.0, 1.2, 1.4]}, index=steps),
    }
    save_path = tmp_path / "rmse.png"

    plot_errors_by_horizon(errors, metric="rmse", save_path=save_path)

    assert save_path.exists()


def test_plot_errors_by_horizon_unknown_metric():
    errors = {"ARIMA": pd.DataFrame({"rmse": [1.0]})}
    with pytest.raises(ValueError, match="no column"):
        plot_errors_by_horizon(errors, metric="mape")


def test_plot_learning_curves_creates_file(tmp_path):
    save_path = tmp_path / "test_learning_curves.png"

    plot_learning_curves(MockHistory(), save_path=save_path)

    assert save_path.exists()
    assert save_path.stat().st_size > 0


def test_plot_learning_curves_with_invalid_history():
    with pytest.raises(ValueError, match="Invalid history object"):
        plot_learning_curves(None)


def test_plot_learning_curves_with_missing_keys(tmp_path):
    class IncompleteHistory:
        def __init__(self):
            self.history = {"loss": [0.5, 0.4]}

    with pytest.raises(ValueError, match="History missing required key"):
        plot_learning_curves(IncompleteHistory(), save_path=tmp_path / "test.png")
