import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", 8000))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# Log-distance path loss model, power is the measured RSSI at 1 meter
BEACON_TX_POWER_DBM = float(os.getenv("BEACON_TX_POWER_DBM", -59))
PATH_LOSS_EXPONENT = float(os.getenv("PATH_LOSS_EXPONENT", 2.0))
REFERENCE_DISTANCE = 1.0
MIN_SIGNAL_DISTANCE = 0.1

# Max offset (either axis) added to single-beacon fixes
POSITION_JITTER = float(os.getenv("POSITION_JITTER", 5.0))

# Returned when no reading maps to a known node
DEFAULT_POSITION_X = float(os.getenv("DEFAULT_POSITION_X", 150))
DEFAULT_POSITION_Y = float(os.getenv("DEFAULT_POSITION_Y", 300))
DEFAULT_POSITION_FLOOR = int(os.getenv("DEFAULT_POSITION_FLOOR", 1))
DEFAULT_POSITION_ACCURACY = float(os.getenv("DEFAULT_POSITION_ACCURACY", 5))

# Weight of the synthetic stairs/elevator edge between two floors
CONNECTOR_DISTANCE = float(os.getenv("CONNECTOR_DISTANCE", 0.0))

DEFAULT_WALKING_SPEED = float(os.getenv("DEFAULT_WALKING_SPEED", 1.4))  # meters per second
