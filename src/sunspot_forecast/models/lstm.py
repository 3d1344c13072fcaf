"""
LSTM model: build, train, and produce rolling multi-step forecasts.

- Uses the windows in `data/lstm/` created by `preprocessing.py`.
- Predicts the next `horizon` months in one shot (Dense(horizon) output).
- Forecasts every origin of the test split with the same growing-window
  rule as the ARIMA evaluation, so both models are scored on identical rows.

Public helper:
    - train_and_forecast_lstm()
"""

from __future__ import annotations

import pathlib
import random
from typing import Tuple

import joblib
import numpy as np
import tensorflow as tf
from tensorflow.keras import Input, Sequential
from tensorflow.keras.layers import LSTM, Dense, Dropout
from tensorflow.keras.callbacks import (
    EarlyStopping,
    ModelCheckpoint,
    ReduceLROnPlateau,
)

from ..backtest import ConfigurationError, count_origins
from ..config import HORIZON, LOOKBACK, LSTM_CONFIG, RANDOM_SEED
from ..visualization import plot_learning_curves

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# src/sunspot_forecast/models/lstm.py -> src -> project root
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[3]
DATA_DIR = PROJECT_ROOT / "data"
LSTM_DIR = DATA_DIR / "lstm"
LSTM_DIR.mkdir(parents=True, exist_ok=True)


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------


def load_lstm_data() -> Tuple[np.ndarray, ...]:
    """
    Load preprocessed LSTM arrays and the fitted scaler.

    Expected files in `data/lstm/`:
        - X_train_seq.npy
        - y_train_seq.npy
        - train_scaled.npy
        - test_scaled.npy
        - series_scaler.joblib
    """
    X_train = np.load(LSTM_DIR / "X_train_seq.npy").astype("float32")
    y_train = np.load(LSTM_DIR / "y_train_seq.npy").astype("float32")
    train_scaled = np.load(LSTM_DIR / "train_scaled.npy")
    test_scaled = np.load(LSTM_DIR / "test_scaled.npy")
    scaler = joblib.load(LSTM_DIR / "series_scaler.joblib")

    print("Loaded LSTM data:")
    print("X_train:", X_train.shape)
    print("y_train:", y_train.shape)
    print("train_scaled:", train_scaled.shape)
    print("test_scaled:", test_scaled.shape)

    return X_train, y_train, train_scaled, test_scaled, scaler


# ---------------------------------------------------------------------------
# Model definition & training
# ---------------------------------------------------------------------------


def build_lstm_model(
    lookback: int,
    horizon: int,
    config: dict | None = None,
) -> tf.keras.Model:
    """
    Build a Sequential model with stacked LSTM layers and a linear
    Dense(horizon) output, one unit per forecast month.

    Architecture (configurable via config or LSTM_CONFIG):
      - Input(shape=(lookback, 1))
      - LSTM(units1, return_sequences=True)
      - Dropout(dropout)
      - LSTM(units2)
      - Dropout(dropout)
      - Dense(horizon, activation='linear')
    """
    cfg = LSTM_CONFIG.copy()
    if config:
        cfg.update(config)

    model = Sequential(
        [
            Input(shape=(lookback, 1)),
            LSTM(cfg["units1"], return_sequences=True),
            Dropout(cfg["dropout"]),
            LSTM(cfg["units2"]),
            Dropout(cfg["dropout"]),
            Dense(horizon, activation="linear"),
        ]
    )

    model.compile(
        optimizer=tf.keras.optimizers.Adam(learning_rate=cfg["learning_rate"]),
        loss="mse",
        metrics=["mae"],
    )

    model.summary()
    return model


def train_lstm_model(
    model: tf.keras.Model,
    X_train: np.ndarray,
    y_train: np.ndarray,
    val_split: float = 0.2,
    config: dict | None = None,
):
    """
    Train the LSTM model with early stopping and learning rate reduction.
    """
    cfg = LSTM_CONFIG.copy()
    if config:
        cfg.update(config)

    callbacks = [
        EarlyStopping(
            monitor="val_loss",
            patience=10,
            restore_best_weights=True,
            verbose=1,
        ),
        ReduceLROnPlateau(
            monitor="val_loss",
            factor=0.5,
            patience=5,
            verbose=1,
        ),
        ModelCheckpoint(
            filepath=str(LSTM_DIR / "lstm_model_best.keras"),
            monitor="val_loss",
            save_best_only=True,
            verbose=1,
        ),
    ]

    history = model.fit(
        X_train,
        y_train,
        validation_split=val_split,
        epochs=cfg["epochs"],
        batch_size=cfg["batch_size"],
        callbacks=callbacks,
        verbose=1,
        shuffle=False,  # respect temporal order
    )

    return history


# ---------------------------------------------------------------------------
# Rolling forecasts
# ---------------------------------------------------------------------------


def build_origin_windows(
    train: np.ndarray,
    test: np.ndarray,
    lookback: int,
    horizon: int,
) -> np.ndarray:
    """
    Input windows for every forecast origin, shape (N, lookback, 1).

    Origin i (1-based) ends right before test[i - 1], i.e. it holds the last
    `lookback` values of train + test[:i - 1].
    """
    train = np.asarray(train, dtype=float).ravel()
    test = np.asarray(test, dtype=float).ravel()

    n_origins = count_origins(len(test), horizon)
    if len(train) < lookback:
        raise ConfigurationError(
            f"train has {len(train)} observations, fewer than lookback={lookback}"
        )

    full = np.concatenate([train, test])
    ends = len(train) + np.arange(n_origins)
    windows = np.stack([full[end - lookback : end] for end in ends])
    return windows[..., np.newaxis]


def lstm_rolling_forecast(
    model,
    train: np.ndarray,
    test: np.ndarray,
    lookback: int = LOOKBACK,
    horizon: int = HORIZON,
    scaler=None,
) -> np.ndarray:
    """
    Forecast `horizon` steps from every origin of `test`.

    `train` and `test` must be in the model's input space (scaled). If a
    scaler is given, the predictions are mapped back to the original units.

    Returns:
        Array of shape (len(test) - horizon + 1, horizon).
    """
    X = build_origin_windows(train, test, lookback, horizon).astype("float32")
    preds = np.asarray(model.predict(X, verbose=0), dtype=float)

    if preds.shape != (X.shape[0], horizon):
        raise ValueError(
            f"Model output has shape {preds.shape}, expected {(X.shape[0], horizon)}"
        )

    if scaler is not None:
        preds = scaler.inverse_transform(preds.reshape(-1, 1)).reshape(preds.shape)

    return preds


# ---------------------------------------------------------------------------
# Public entry point for pipeline
# ---------------------------------------------------------------------------


def train_and_forecast_lstm(
    config: dict | None = None,
) -> tuple[np.ndarray, tf.keras.callbacks.History]:
    """
    Full LSTM workflow:

      - Set random seeds for reproducibility
      - Load preprocessed windows and the scaler from `data/lstm/`
      - Build model based on config + data shape
      - Train model
      - Generate and save learning curve visualizations
      - Save final model
      - Rolling forecast over the test split, inverse-scaled and saved

    Returns
    -------
    tuple[np.ndarray, tf.keras.callbacks.History]
        - Predictions of shape (n_origins, horizon) in sunspot units
        - Training history object
    """
    random.seed(RANDOM_SEED)
    np.random.seed(RANDOM_SEED)
    tf.random.set_seed(RANDOM_SEED)

    X_train, y_train, train_scaled, test_scaled, scaler = load_lstm_data()

    lookback = X_train.shape[1]
    horizon = y_train.shape[1]
    model = build_lstm_model(lookback=lookback, horizon=horizon, config=config)

    history = train_lstm_model(model, X_train, y_train, config=config)

    plot_learning_curves(history)

    # Best weights already stored via ModelCheckpoint
    final_path = LSTM_DIR / "lstm_model_final.keras"
    model.save(str(final_path))
    print(f"\nSaved final LSTM model to: {final_path.resolve()}")

    y_pred = lstm_rolling_forecast(
        model, train_scaled, test_scaled, lookback, horizon, scaler=scaler
    )
    np.save(LSTM_DIR / "y_pred_lstm.npy", y_pred)
    print(f"Saved LSTM rolling forecasts {y_pred.shape} to: {LSTM_DIR.resolve()}")

    return y_pred, history


def main() -> None:
    """
    Manual entry point:

        python -m sunspot_forecast.models.lstm
    """
    train_and_forecast_lstm()


if __name__ == "__main__":
    main()
