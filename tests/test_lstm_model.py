import pathlib

import numpy as np
import pytest
from sklearn.preprocessing import MinMaxScaler

from sunspot_forecast.backtest import ConfigurationError
from sunspot_forecast.models import lstm


# --------------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------------

TINY_CONFIG = {
    "units1": 2,
    "units2": 2,
    "dropout": 0.0,
    "batch_size": 4,
    "epochs": 1,
    "learning_rate": 1e-3,
}


class LastValueModel:
    """Predicts the last input value for every horizon step."""

    def __init__(self, horizon):
        self.horizon = horizon
        self.inputs = None

    def predict(self, X, verbose=0):
        self.inputs = X
        return np.repeat(X[:, -1, :], self.horizon, axis=1)


# --------------------------------------------------------------------------------------
# build_lstm_model
# --------------------------------------------------------------------------------------


def test_build_lstm_model_shapes_and_units():
    model = lstm.build_lstm_model(lookback=7, horizon=5, config={"units1": 4, "units2": 2})

    assert model.input_shape == (None, 7, 1)
    assert model.output_shape == (None, 5)

    from tensorflow.keras.layers import LSTM as LSTMLayer, Dense as DenseLayer

    lstm_layers = [layer for layer in model.layers if isinstance(layer, LSTMLayer)]
    assert [layer.units for layer in lstm_layers] == [4, 2]

    dense_layers = [layer for layer in model.layers if isinstance(layer, DenseLayer)]
    assert dense_layers[-1].units == 5


# --------------------------------------------------------------------------------------
# train_lstm_model (run only 1 epoch on tiny data)
# --------------------------------------------------------------------------------------


def test_train_lstm_model_runs_one_epoch(monkeypatch, tmp_path: pathlib.Path):
    monkeypatch.setattr(lstm, "LSTM_DIR", tmp_path)

    X_train = np.random.rand(8, 4, 1).astype("float32")
    y_train = np.random.rand(8, 3).astype("float32")

    model = lstm.build_lstm_model(lookback=4, horizon=3, config=TINY_CONFIG)
    history = lstm.train_lstm_model(
        model, X_train, y_train, val_split=0.25, config=TINY_CONFIG
    )

    assert (tmp_path / "lstm_model_best.keras").exists()
    assert len(history.history["loss"]) == 1


# --------------------------------------------------------------------------------------
# build_origin_windows / lstm_rolling_forecast
# --------------------------------------------------------------------------------------


def test_build_origin_windows_follow_growing_window():
    train = np.arange(6, dtype=float)           # 0..5
    test = 100.0 + np.arange(5, dtype=float)    # 100..104

    X = lstm.build_origin_windows(train, test, lookback=3, horizon=2)

    # N = 5 - 2 + 1 = 4 origins
    assert X.shape == (4, 3, 1)
    np.testing.assert_array_equal(X[0, :, 0], [3.0, 4.0, 5.0])
    np.testing.assert_array_equal(X[1, :, 0], [4.0, 5.0, 100.0])
    np.testing.assert_array_equal(X[3, :, 0], [100.0, 101.0, 102.0])


def test_build_origin_windows_rejects_short_train():
    with pytest.raises(ConfigurationError, match="lookback"):
        lstm.build_origin_windows(np.arange(2.0), np.arange(5.0), lookback=3, horizon=2)


def test_build_origin_windows_rejects_long_horizon():
    with pytest.raises(ConfigurationError):
        lstm.build_origin_windows(np.arange(6.0), np.arange(3.0), lookback=3, horizon=4)


def test_lstm_rolling_forecast_has_no_lookahead():
    train = np.arange(6, dtype=float)
    test = 100.0 + np.arange(5, dtype=float)
    model = LastValueModel(horizon=2)

    preds = lstm.lstm_rolling_forecast(model, train, test, lookback=3, horizon=2)

    assert preds.shape == (4, 2)
    # Row i only sees values before test[i]
    np.testing.assert_array_equal(preds[:, 0], [5.0, 100.0, 101.0, 102.0])


def test_lstm_rolling_forecast_inverse_scales():
    raw_train = np.array([0.0, 50.0, 100.0, 100.0])
    raw_test = np.array([50.0, 0.0, 100.0])
    scaler = MinMaxScaler().fit(raw_train.reshape(-1, 1))
    train = scaler.transform(raw_train.reshape(-1, 1)).ravel()
    test = scaler.transform(raw_test.reshape(-1, 1)).ravel()

    preds = lstm.lstm_rolling_forecast(
        LastValueModel(horizon=2), train, test, lookback=2, horizon=2, scaler=scaler
    )

    np.testing.assert_allclose(preds[:, 0], [100.0, 50.0])


def test_lstm_rolling_forecast_checks_output_shape():
    class WrongModel:
        def predict(self, X, verbose=0):
            return np.zeros((X.shape[0], 1))

    with pytest.raises(ValueError, match="Model output has shape"):
        lstm.lstm_rolling_forecast(
            WrongModel(), np.arange(6.0), np.arange(5.0), lookback=3, horizon=2
        )


# --------------------------------------------------------------------------------------
# train_and_forecast_lstm (orchestration)
# --------------------------------------------------------------------------------------


def test_train_and_forecast_lstm_orchestrates(monkeypatch, tmp_path: pathlib.Path):
    """
    train_and_forecast_lstm should:
      - call load_lstm_data
      - build the model from the window shapes
      - train, plot, save the final model
      - forecast every test origin in original units and save the predictions
    """
    monkeypatch.setattr(lstm, "LSTM_DIR", tmp_path)

    lookback, horizon = 3, 2
    raw_train = np.linspace(0.0, 100.0, 10)
    raw_test = np.linspace(100.0, 60.0, 5)
    scaler = MinMaxScaler().fit(raw_train.reshape(-1, 1))
    train_scaled = scaler.transform(raw_train.reshape(-1, 1)).ravel()
    test_scaled = scaler.transform(raw_test.reshape(-1, 1)).ravel()
    X_train = np.zeros((5, lookback, 1), dtype="float32")
    y_train = np.zeros((5, horizon), dtype="float32")

    monkeypatch.setattr(
        lstm,
        "load_lstm_data",
        lambda: (X_train, y_train, train_scaled, test_scaled, scaler),
    )

    class DummyModel(LastValueModel):
        def __init__(self):
            super().__init__(horizon)
            self.saved_paths = []

        def save(self, path: str):
            self.saved_paths.append(path)

    dummy_model = DummyModel()
    build_args = {}

    def fake_build(lookback, horizon, config=None):
        build_args["args"] = (lookback, horizon)
        return dummy_model

    monkeypatch.setattr(lstm, "build_lstm_model", fake_build)

    class MockHistory:
        history = {"loss": [0.1], "val_loss": [0.2], "mae": [0.1], "val_mae": [0.2]}

    monkeypatch.setattr(
        lstm, "train_lstm_model", lambda model, X, y, config=None: MockHistory()
    )
    plotted = {}
    monkeypatch.setattr(
        lstm, "plot_learning_curves", lambda history: plotted.setdefault("h", history)
    )

    y_pred, history = lstm.train_and_forecast_lstm()

    assert build_args["args"] == (lookback, horizon)
    assert isinstance(history, MockHistory)
    assert "h" in plotted
    assert str(tmp_path / "lstm_model_final.keras") in dummy_model.saved_paths

    # 5 - 2 + 1 origins, first step = last observed value in original units
    assert y_pred.shape == (4, 2)
    np.testing.assert_allclose(y_pred[0], [100.0, 100.0])
    np.testing.assert_allclose(y_pred[1, 0], raw_test[0])

    saved = np.load(tmp_path / "y_pred_lstm.npy")
    np.testing.assert_allclose(saved, y_pred)
