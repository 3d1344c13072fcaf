# Monthly mean sunspot numbers (Zurich / SILSO series, 1749-1983)
DATA_URL = (
    "https://raw.githubusercontent.com/jbrownlee/Datasets/master/monthly-sunspots.csv"
)

# Raw series date range
START_DATE = "1749-01-01"
END_DATE = "1898-12-31"

# Train / test split boundaries (1200 train months, 600 test months)
TRAIN_END = "1848-12-31"
TEST_START = "1849-01-01"

# Forecast horizon in months (roughly one solar cycle)
HORIZON = 120

# Width of the 1 - ALPHA prediction interval
ALPHA = 0.05

# Refit policy for the rolling ARIMA evaluation: "reestimate_only" | "recompute_model"
REFIT_MODE = "reestimate_only"

# Print a progress line every N forecast origins
PROGRESS_EVERY = 50

RANDOM_SEED = 42

# auto_arima search space (non-seasonal; an 11-year seasonal period is too
# long for a seasonal ARIMA to be practical)
ARIMA_CONFIG = {
    "start_p": 1,
    "start_q": 1,
    "max_p": 5,
    "max_q": 5,
    "max_d": 2,
    "seasonal": False,
    "stepwise": True,
    "information_criterion": "aic",
    "error_action": "ignore",
    "suppress_warnings": True,
    "trace": False,
}

# LSTM lookback window (number of past months)
LOOKBACK = 240

# LSTM hyperparameters
LSTM_CONFIG = {
    "units1": 64,
    "units2": 32,
    "dropout": 0.2,
    "batch_size": 32,
    "epochs": 100,
    "learning_rate": 1e-3,
}
