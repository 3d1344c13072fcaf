import numpy as np
import pandas as pd
import pytest

from sunspot_forecast.pipeline import run_pipeline


def test_run_pipeline_is_callable():
    """
    Smoke test: ensure the main orchestrator can be imported and is callable.

    We do NOT actually run the full pipeline here (it would download data,
    fit hundreds of ARIMA models, train the LSTM, etc.). This is just to
    validate the public API and packaging.
    """
    assert callable(run_pipeline)


def test_run_pipeline_rejects_long_horizon_before_fitting(monkeypatch, tmp_path):
    """A horizon longer than the test split fails before the ARIMA order search."""
    from sunspot_forecast import pipeline
    from sunspot_forecast.backtest import ConfigurationError
    from sunspot_forecast.models.arima import ArimaBackend

    series = pd.Series(
        np.arange(30, dtype=float),
        index=pd.date_range("1749-01-01", periods=30, freq="MS"),
    )
    monkeypatch.setattr(
        pipeline, "download_and_save_raw_data", lambda force=False: tmp_path / "raw.csv"
    )
    monkeypatch.setattr(pipeline, "load_sunspot_series", lambda path: series)
    monkeypatch.setattr(
        pipeline,
        "train_test_split_by_date",
        lambda s: (s.iloc[:20], s.iloc[20:]),
    )
    monkeypatch.setattr(pipeline, "plot_series_split", lambda train, test: None)

    fit_calls = []
    monkeypatch.setattr(
        ArimaBackend, "fit", lambda self, values: fit_calls.append(values)
    )

    with pytest.raises(ConfigurationError, match="exceeds the test series length"):
        pipeline.run_pipeline(horizon=11, skip_lstm=True)

    assert fit_calls == []
