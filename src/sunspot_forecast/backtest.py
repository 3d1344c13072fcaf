"""
Rolling-origin multi-step forecast evaluation.

Given a fitted model, a training series and a held-out test series, this
module produces one `horizon`-step forecast per valid origin in the test
series. The fitting window grows by one observation between consecutive
origins:

    origin 1 -> fit on train                     -> forecast test[0 : H]
    origin 2 -> fit on train + test[:1]          -> forecast test[1 : H + 1]
    ...
    origin N -> fit on train + test[:N - 1]      -> forecast test[N - 1 :]

with N = len(test) - H + 1. Each row therefore only ever sees data that
precedes the first month it forecasts.

Typical usage (from the pipeline):

    from sunspot_forecast.backtest import rolling_forecast, RefitMode
    from sunspot_forecast.models.arima import ArimaBackend

    backend = ArimaBackend()
    model = backend.fit(train)
    result = rolling_forecast(backend, model, 120, train, test,
                              RefitMode.REESTIMATE_ONLY)
    predictions, lower, upper = result
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterator, Tuple

import numpy as np
from joblib import Parallel, delayed

from . import config


class ConfigurationError(ValueError):
    """Invalid horizon / series length / refit mode combination."""


class ModelFitError(RuntimeError):
    """The underlying model failed to refit or forecast at some origin."""


class RefitMode(str, enum.Enum):
    """How the model is refitted at each forecast origin."""

    # Keep the structural order, re-estimate the coefficients only.
    REESTIMATE_ONLY = "reestimate_only"
    # Run the full order search again on every window.
    RECOMPUTE_MODEL = "recompute_model"


@dataclass(frozen=True, eq=False)
class RollingForecast:
    """Forecast matrices of shape (n_origins, horizon), one row per origin.

    Compared and hashed by identity; compare the arrays to compare values.
    """

    predictions: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    horizon: int
    mode: RefitMode

    @property
    def n_origins(self) -> int:
        return int(self.predictions.shape[0])

    def __iter__(self) -> Iterator[np.ndarray]:
        # Allows `predictions, lower, upper = rolling_forecast(...)`
        return iter((self.predictions, self.lower, self.upper))


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def resolve_mode(mode: RefitMode | str) -> RefitMode:
    """Convert a mode name to a RefitMode, rejecting unknown values."""
    if isinstance(mode, RefitMode):
        return mode
    try:
        return RefitMode(mode)
    except ValueError:
        valid = ", ".join(m.value for m in RefitMode)
        raise ConfigurationError(
            f"Unknown refit mode {mode!r}; expected one of: {valid}"
        ) from None


def count_origins(test_length: int, horizon: int) -> int:
    """
    Number of forecast origins for a test series of `test_length` observations.

    Raises:
        ConfigurationError: If horizon < 1 or horizon > test_length.
    """
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)):
        raise ConfigurationError(f"horizon must be an integer, got {horizon!r}")
    if horizon < 1:
        raise ConfigurationError(f"horizon must be >= 1, got {horizon}")
    if horizon > test_length:
        raise ConfigurationError(
            f"horizon ({horizon}) exceeds the test series length ({test_length}); "
            "no complete forecast origin exists."
        )
    return test_length - horizon + 1


def _as_series_array(values: Any, name: str) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise ConfigurationError(
            f"{name} must be one-dimensional, got shape {array.shape}"
        )
    return array


# ---------------------------------------------------------------------------
# Per-origin work
# ---------------------------------------------------------------------------


def _forecast_origin(
    backend,
    model,
    window: np.ndarray,
    horizon: int,
    mode: RefitMode,
    alpha: float,
    origin: int,
    reference_order,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Refit on `window` and forecast `horizon` steps for a single origin."""
    try:
        if mode is RefitMode.REESTIMATE_ONLY:
            handle = backend.refit(model, window)
        else:
            handle = backend.fit(window)
        mean, lower, upper = backend.forecast(handle, horizon, alpha=alpha)
    except Exception as exc:
        raise ModelFitError(
            f"Model fit failed at origin {origin} "
            f"(window length {len(window)}): {exc}"
        ) from exc

    if mode is RefitMode.REESTIMATE_ONLY:
        refit_order = backend.order(handle)
        if refit_order != reference_order:
            raise ModelFitError(
                f"Refit at origin {origin} changed the model order from "
                f"{reference_order} to {refit_order}."
            )

    rows = tuple(np.asarray(a, dtype=float).ravel() for a in (mean, lower, upper))
    for label, row in zip(("mean", "lower", "upper"), rows):
        if row.shape != (horizon,):
            raise ModelFitError(
                f"Forecast {label} at origin {origin} has shape {row.shape}, "
                f"expected ({horizon},)."
            )
    return rows


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def rolling_forecast(
    backend,
    model,
    horizon: int,
    train,
    test,
    mode: RefitMode | str = config.REFIT_MODE,
    n_jobs: int = 1,
    alpha: float = config.ALPHA,
) -> RollingForecast:
    """Run a rolling-origin evaluation with a growing fitting window.

    Args:
        backend: ForecastBackend used to refit and forecast.
        model: Previously fitted model handle (e.g. from `backend.fit(train)`).
        horizon: Number of steps forecast from every origin.
        train: Observations used for the initial fit (non-empty, 1-D).
        test: Held-out observations (1-D, at least `horizon` long).
        mode: RefitMode.REESTIMATE_ONLY or RefitMode.RECOMPUTE_MODEL
            (or their string values).
        n_jobs: Number of joblib workers. 1 runs sequentially, -1 uses all
            CPUs, 0 is rejected. Origins are independent, results are
            always returned in origin order.
        alpha: Significance level of the prediction interval (0.05 -> 95%).

    Returns:
        RollingForecast with three read-only (N, horizon) arrays,
        N = len(test) - horizon + 1.

    Raises:
        ConfigurationError: Before any fitting, for invalid inputs.
        ModelFitError: If any refit or forecast fails. The whole evaluation
            is aborted, no partial result is returned.
    """
    mode = resolve_mode(mode)
    train_values = _as_series_array(train, "train")
    test_values = _as_series_array(test, "test")

    if train_values.size == 0:
        raise ConfigurationError("train must contain at least one observation")
    if not 0.0 < alpha < 1.0:
        raise ConfigurationError(f"alpha must be in (0, 1), got {alpha}")
    if mode is RefitMode.REESTIMATE_ONLY and not getattr(
        backend, "supports_refit", True
    ):
        raise ConfigurationError(
            f"{type(backend).__name__} cannot refit with a fixed order; "
            f"use mode={RefitMode.RECOMPUTE_MODEL.value!r}."
        )
    if (
        isinstance(n_jobs, bool)
        or not isinstance(n_jobs, (int, np.integer))
        or n_jobs == 0
    ):
        raise ConfigurationError(
            f"n_jobs must be a non-zero integer (negative counts back from all "
            f"CPUs, as in joblib), got {n_jobs!r}"
        )

    n_origins = count_origins(len(test_values), horizon)
    reference_order = (
        backend.order(model) if mode is RefitMode.REESTIMATE_ONLY else None
    )

    print(
        f"Rolling forecast: {n_origins} origins x {horizon} steps "
        f"(mode={mode.value}, train={len(train_values)}, test={len(test_values)})"
    )

    def windows():
        # origin i (1-based) sees train + the first i - 1 test observations
        for origin in range(1, n_origins + 1):
            yield origin, np.concatenate([train_values, test_values[: origin - 1]])

    if n_jobs == 1:
        rows = []
        for origin, window in windows():
            rows.append(
                _forecast_origin(
                    backend, model, window, horizon, mode, alpha, origin,
                    reference_order,
                )
            )
            if origin % config.PROGRESS_EVERY == 0 or origin == n_origins:
                print(f"  origin {origin}/{n_origins} done")
    else:
        rows = Parallel(n_jobs=n_jobs)(
            delayed(_forecast_origin)(
                backend, model, window, horizon, mode, alpha, origin,
                reference_order,
            )
            for origin, window in windows()
        )

    predictions = np.vstack([r[0] for r in rows])
    lower = np.vstack([r[1] for r in rows])
    upper = np.vstack([r[2] for r in rows])

    for array in (predictions, lower, upper):
        array.setflags(write=False)

    return RollingForecast(
        predictions=predictions,
        lower=lower,
        upper=upper,
        horizon=int(horizon),
        mode=mode,
    )
