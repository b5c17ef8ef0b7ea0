"""Settings read from the environment."""

import os
from pathlib import Path

DEFAULT_BASE_URL = "https://api.s360web.com"
DEFAULT_STORE_PATH = Path.home() / ".samplelog" / "store.yaml"


def store_path() -> Path:
    """Path of the YAML file holding the log and saved credentials."""
    return Path(os.environ.get("SAMPLELOG_STORE", DEFAULT_STORE_PATH)).expanduser()


def base_url() -> str:
    return os.environ.get("S360_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def timeout() -> float:
    return float(os.environ.get("S360_TIMEOUT", "30"))


def env_credentials():
    """(username, password) from S360_USERNAME / S360_PASSWORD, if set."""
    return os.environ.get("S360_USERNAME"), os.environ.get("S360_PASSWORD")
