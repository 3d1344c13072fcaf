"""
Top-level package for the sunspot ARIMA vs LSTM forecasting project.

This package provides:

- config: Central configuration (dates, horizon, ARIMA search space, LSTM hyperparameters).
- download_data: Utilities to download the monthly sunspot series.
- preprocessing: Train/test split, scaling and LSTM window construction.
- backtest: Rolling-origin multi-step forecast evaluator.
- models: Forecast backends (ARIMA) and the LSTM model.
- evaluation: Forecast error metrics and the model comparison table.
- visualization: Plots saved under results/.
- pipeline: End-to-end orchestration of the full workflow.

Typical entry points:

    from sunspot_forecast import config
    from sunspot_forecast.pipeline import run_pipeline

"""

from __future__ import annotations

from . import config

__version__ = "0.1.0"

__all__ = ["config"]
