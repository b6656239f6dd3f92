"""Environment-driven configuration."""

import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("GARAGE_DATA_DIR", Path.home() / ".garage"))

STORAGE_KEY = os.environ.get("GARAGE_STORAGE_KEY", "garageData_v2")

LOG_LEVEL = os.environ.get("GARAGE_LOG_LEVEL", "WARNING").upper()

# Multiplier for the per-vehicle shutdown step interval; 0 disables sleeping
STEP_DELAY = float(os.environ.get("GARAGE_STEP_DELAY", "1"))

# Seed data used when the garage starts empty
DEFAULTS_FILE = Path(__file__).parent.parent / "vehicles" / "defaults.yaml"
