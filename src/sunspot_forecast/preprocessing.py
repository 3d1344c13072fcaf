"""
Preprocessing of the monthly sunspot series.

- Reads the raw CSV into a monthly pd.Series.
- Splits into train/test by date (config).
- Scales values with MinMaxScaler (fit on train only).
- Builds supervised windows of shape (samples, lookback, 1) -> (samples, horizon).
- Saves numpy arrays + scaler in `data/lstm/`.

Public helpers:
    - load_sunspot_series()
    - train_test_split_by_date()
    - prepare_lstm_data()
"""

from __future__ import annotations

import pathlib
from typing import Tuple

import joblib
import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from . import config
from .download_data import VALUE_COLUMN, get_default_raw_csv_path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# src/sunspot_forecast/preprocessing.py -> src -> project root
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
DATA_DIR = PROJECT_ROOT / "data"
LSTM_DIR = DATA_DIR / "lstm"
LSTM_DIR.mkdir(parents=True, exist_ok=True)

LOOKBACK = config.LOOKBACK
HORIZON = config.HORIZON


def load_sunspot_series(csv_path: pathlib.Path | None = None) -> pd.Series:
    """Load the raw sunspot CSV as a monthly float series.

    Args:
        csv_path: Path to the raw CSV. If None, uses the default raw path.

    Returns:
        pd.Series named `sunspots`, indexed by month start and sorted by date.

    Raises:
        FileNotFoundError: If the CSV does not exist.
        ValueError: If the series is empty.
    """
    path = csv_path or get_default_raw_csv_path()
    if not path.exists():
        raise FileNotFoundError(f"Raw sunspot CSV not found at: {path}")

    df = pd.read_csv(path, index_col=0, parse_dates=True).sort_index()
    if df.empty:
        raise ValueError(f"Raw sunspot CSV at {path} is empty.")

    series = df.iloc[:, 0].astype(float)
    series.name = VALUE_COLUMN
    series = series[(series.index >= config.START_DATE)]

    print("Loaded sunspot series:")
    print("Length:", len(series))
    print("Date range:", series.index.min(), "->", series.index.max())

    return series


def train_test_split_by_date(
    series: pd.Series,
    train_end: str = config.TRAIN_END,
    test_start: str = config.TEST_START,
    test_end: str | None = config.END_DATE,
) -> Tuple[pd.Series, pd.Series]:
    """
    Time-based split:
      - Train: all months with date <= train_end (inclusive)
      - Test:  all months with test_start <= date <= test_end (inclusive)
    """
    train = series[series.index <= train_end].copy()
    test = series[series.index >= test_start].copy()
    if test_end is not None:
        test = test[test.index <= test_end]

    print(
        "\nTrain set:",
        train.index.min(),
        "->",
        train.index.max(),
        "rows:",
        len(train),
    )
    print(
        "Test  set:",
        test.index.min(),
        "->",
        test.index.max(),
        "rows:",
        len(test),
    )

    if train.empty or test.empty:
        raise RuntimeError(
            "Train or test set is empty; check TRAIN_END / TEST_START in config.py."
        )

    return train, test


def scale_series(
    train: pd.Series | np.ndarray,
    test: pd.Series | np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, MinMaxScaler]:
    """
    Fit MinMaxScaler on the train values only, then transform both splits.

    Returns 1-D arrays.
    """
    scaler = MinMaxScaler()

    train_values = np.asarray(train, dtype=float).reshape(-1, 1)
    test_values = np.asarray(test, dtype=float).reshape(-1, 1)

    train_scaled = scaler.fit_transform(train_values).ravel()
    test_scaled = scaler.transform(test_values).ravel()

    return train_scaled, test_scaled, scaler


def create_sequences(
    values: np.ndarray,
    lookback: int = LOOKBACK,
    horizon: int = HORIZON,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build supervised windows for a multi-step LSTM.

    For each index i in [lookback, len(values) - horizon]:
      X_seq[k] = values[i - lookback : i]       (the past `lookback` months)
      y_seq[k] = values[i : i + horizon]        (the next `horizon` months)

    X is returned with a trailing feature axis, shape (n, lookback, 1).
    """
    values = np.asarray(values, dtype=float)
    n_samples = len(values) - lookback - horizon + 1
    if n_samples < 1:
        raise ValueError(
            f"Series of length {len(values)} is too short for "
            f"lookback={lookback} and horizon={horizon}."
        )

    X_seqs = []
    y_seqs = []

    for i in range(lookback, lookback + n_samples):
        X_seqs.append(values[i - lookback : i])
        y_seqs.append(values[i : i + horizon])

    X = np.array(X_seqs)[..., np.newaxis]
    y = np.array(y_seqs)
    return X, y


def prepare_lstm_data(
    series: pd.Series | None = None,
    lookback: int = LOOKBACK,
    horizon: int = HORIZON,
) -> None:
    """
    Main preprocessing function used by the pipeline.

    It:
      - loads the sunspot series (unless one is passed in)
      - splits into train/test by date
      - scales values
      - creates LSTM windows from the training split
      - saves numpy arrays and the scaler under `data/lstm/`
    """
    if series is None:
        series = load_sunspot_series()

    # 1) Split into train/test
    train, test = train_test_split_by_date(series)

    # 2) Scale
    train_scaled, test_scaled, scaler = scale_series(train, test)

    # 3) Supervised windows (training split only)
    X_train_seq, y_train_seq = create_sequences(train_scaled, lookback, horizon)

    print("\nLSTM sequence shapes:")
    print("X_train_seq:", X_train_seq.shape)
    print("y_train_seq:", y_train_seq.shape)

    # 4) Save arrays & scaler
    np.save(LSTM_DIR / "X_train_seq.npy", X_train_seq)
    np.save(LSTM_DIR / "y_train_seq.npy", y_train_seq)
    np.save(LSTM_DIR / "train_scaled.npy", train_scaled)
    np.save(LSTM_DIR / "test_scaled.npy", test_scaled)

    joblib.dump(scaler, LSTM_DIR / "series_scaler.joblib")

    print(f"\nSaved LSTM-ready arrays and scaler in: {LSTM_DIR.resolve()}")


def main() -> None:
    """
    Manual entry point:

        python -m sunspot_forecast.preprocessing
    """
    prepare_lstm_data()


if __name__ == "__main__":
    main()
