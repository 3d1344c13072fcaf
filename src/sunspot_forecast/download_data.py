"""
Raw data download utilities.

This module:
- Defines a canonical location for the raw sunspot CSV under `data/raw/`.
- Downloads the monthly sunspot series from `config.DATA_URL` with pandas.
- Exposes `download_and_save_raw_data()` used by the pipeline.
"""

from __future__ import annotations

import pathlib

import pandas as pd

from . import config

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# src/sunspot_forecast/download_data.py -> src -> project root
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
DATA_DIR = PROJECT_ROOT / "data"
RAW_DIR = DATA_DIR / "raw"
RAW_DIR.mkdir(parents=True, exist_ok=True)

VALUE_COLUMN = "sunspots"


def get_default_raw_csv_path() -> pathlib.Path:
    """
    Default path for the raw sunspot CSV.

    Example: data/raw/monthly_sunspots.csv
    """
    return RAW_DIR / "monthly_sunspots.csv"


# ---------------------------------------------------------------------------
# Core download logic
# ---------------------------------------------------------------------------


def download_sunspot_data(url: str = config.DATA_URL) -> pd.DataFrame:
    """
    Download the monthly sunspot series.

    The source CSV has two columns, `Month` (YYYY-MM) and `Sunspots`.

    Returns:
        DataFrame with a monthly DatetimeIndex and a single `sunspots` column.
    """
    print(f"Calling pandas.read_csv({url})...")
    df = pd.read_csv(url)

    if df.empty:
        raise RuntimeError(
            "Downloaded DataFrame is empty. Check DATA_URL in config.py."
        )

    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = {"month", VALUE_COLUMN} - set(df.columns)
    if missing:
        raise RuntimeError(
            f"Missing required columns: {missing}. Got columns: {list(df.columns)}"
        )

    df.index = pd.to_datetime(df.pop("month"))
    df.index.name = "month"
    df = df.sort_index()
    df = df[[VALUE_COLUMN]].astype(float)

    print(f"Downloaded {len(df)} monthly observations.")
    return df


# ---------------------------------------------------------------------------
# Public helper for pipeline
# ---------------------------------------------------------------------------


def download_and_save_raw_data(force: bool = False) -> pathlib.Path:
    """
    Download raw data (if needed) and return the CSV path.

    Args:
        force:
            If True, always re-download and overwrite the CSV.
            If False, reuse existing CSV when available.

    Returns:
        Path to the raw CSV file.
    """
    csv_path = get_default_raw_csv_path()

    if csv_path.exists() and not force:
        print(f"Raw CSV already exists at {csv_path}, reusing it.")
        return csv_path

    print(f"Downloading monthly sunspot numbers from {config.DATA_URL}...")
    df = download_sunspot_data(config.DATA_URL)

    csv_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(csv_path, index=True)
    print(f"Saved raw data to: {csv_path.resolve()}")

    return csv_path


def main() -> None:
    """
    Manual entry point:

        python -m sunspot_forecast.download_data

    This will force a fresh download/overwrite of the raw CSV.
    """
    download_and_save_raw_data(force=True)


if __name__ == "__main__":
    main()
