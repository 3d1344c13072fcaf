"""
Forecast backend interface used by the rolling-origin evaluator.

A backend wraps one statistical library. It fits a model handle on a
series, refits a handle on a new series while keeping its structure, and
produces multi-step forecasts with a prediction interval. The evaluator in
`sunspot_forecast.backtest` only talks to this interface, so a different
library can be plugged in without touching the evaluation loop.
"""

from __future__ import annotations

import abc
from typing import Any, Tuple

import numpy as np

Order = Tuple[Tuple[int, ...], Tuple[int, ...]]


class ForecastBackend(abc.ABC):
    """Capability interface: fit / refit / forecast / order."""

    @property
    def supports_refit(self) -> bool:
        """Whether `refit` can re-estimate coefficients with a fixed order."""
        return True

    @abc.abstractmethod
    def fit(self, series: np.ndarray) -> Any:
        """Select and fit a model on `series`, returning a model handle."""

    @abc.abstractmethod
    def refit(self, handle: Any, series: np.ndarray) -> Any:
        """
        Re-estimate the coefficients of `handle` on `series`.

        The returned handle has the same order as `handle`; `handle` itself
        must not be modified.
        """

    @abc.abstractmethod
    def forecast(
        self,
        handle: Any,
        horizon: int,
        alpha: float = 0.05,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (mean, lower, upper), each of length `horizon`."""

    @abc.abstractmethod
    def order(self, handle: Any) -> Order:
        """Return ((p, d, q), (P, D, Q, m)) for a fitted handle."""
