from pathlib import Path


# Repository root
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

LOG_DIR = BASE_DIR / 'logs'
