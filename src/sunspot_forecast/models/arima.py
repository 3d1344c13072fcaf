"""
ARIMA backend built on pmdarima.

- `fit` runs `pmdarima.auto_arima` with the search space in config.ARIMA_CONFIG.
- `refit` keeps (p, d, q)(P, D, Q, m) and re-estimates the coefficients on a
  new window. The handle is cloned first, so the original stays untouched.
- Both raise RuntimeError when the likelihood optimiser does not converge.
- `forecast` returns point forecasts plus the (1 - alpha) prediction interval
  computed by statsmodels under the hood.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pmdarima as pm
from sklearn.base import clone

from .. import config
from .base import ForecastBackend, Order


class ArimaBackend(ForecastBackend):
    """Automatic ARIMA order selection + interval forecasts."""

    def __init__(self, **auto_arima_kwargs):
        # Merge with defaults
        self.auto_arima_kwargs = config.ARIMA_CONFIG.copy()
        self.auto_arima_kwargs.update(auto_arima_kwargs)

    def fit(self, series: np.ndarray) -> pm.ARIMA:
        model = pm.auto_arima(np.asarray(series, dtype=float), **self.auto_arima_kwargs)
        _check_converged(model)
        return model

    def refit(self, handle: pm.ARIMA, series: np.ndarray) -> pm.ARIMA:
        model = clone(handle)
        model.fit(np.asarray(series, dtype=float))
        _check_converged(model)
        return model

    def forecast(
        self,
        handle: pm.ARIMA,
        horizon: int,
        alpha: float = config.ALPHA,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        mean, conf_int = handle.predict(
            n_periods=horizon,
            return_conf_int=True,
            alpha=alpha,
        )
        conf_int = np.asarray(conf_int, dtype=float)
        return np.asarray(mean, dtype=float), conf_int[:, 0], conf_int[:, 1]

    def order(self, handle: pm.ARIMA) -> Order:
        return tuple(handle.order), tuple(handle.seasonal_order)


def _check_converged(model: pm.ARIMA) -> None:
    # suppress_warnings=True also hides statsmodels' ConvergenceWarning
    retvals = getattr(model.arima_res_, "mle_retvals", None) or {}
    if not retvals.get("converged", True):
        raise RuntimeError(
            f"Maximum likelihood estimation did not converge for "
            f"{describe_order((tuple(model.order), tuple(model.seasonal_order)))}"
        )


def describe_order(order: Order) -> str:
    """Format an order as e.g. 'ARIMA(2, 1, 2)(0, 0, 0)[0]'."""
    (p, d, q), seasonal = order
    if len(seasonal) == 4:
        P, D, Q, m = seasonal
        return f"ARIMA({p}, {d}, {q})({P}, {D}, {Q})[{m}]"
    return f"ARIMA({p}, {d}, {q})"
