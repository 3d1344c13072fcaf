"""
Models subpackage for the sunspot forecasting project.

This subpackage contains:

- base:  ForecastBackend, the fit / refit / forecast interface used by the
         rolling evaluator.
- arima: ArimaBackend, automatic ARIMA order selection via pmdarima.
- lstm:  Stacked LSTM predicting the next `horizon` months in one shot.

Typical usage:

    from sunspot_forecast.models import ArimaBackend, ForecastBackend

The LSTM module is not imported here so that the ARIMA path works without
loading TensorFlow:

    from sunspot_forecast.models.lstm import train_and_forecast_lstm
"""

from __future__ import annotations

from .arima import ArimaBackend, describe_order
from .base import ForecastBackend

__all__ = [
    "ArimaBackend",
    "ForecastBackend",
    "describe_order",
]
