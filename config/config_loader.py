import json
import os
from datetime import datetime

DEFAULT_CONFIG = {
    "max_steps": None,
    "trace_window": 10,
    "log_runs": False,
    "output_directory": "logs/",
    "log_file_prefix": "tm_runs_",
    "batch_size": 256,
    "results_directory": "results/"
}

# Expected types for validation
CONFIG_SCHEMA = {
    "max_steps": (int, type(None)),
    "trace_window": int,
    "log_runs": bool,
    "output_directory": str,
    "log_file_prefix": str,
    "batch_size": int,
    "results_directory": str
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        value = config[key]
        # bool is an int subclass; only accept it where bool is expected
        if isinstance(value, bool) and expected_type is not bool:
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")
        if not isinstance(value, expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")

    if config["max_steps"] is not None and config["max_steps"] < 0:
        raise ValueError("max_steps must be non-negative or null.")
    if config["trace_window"] < 0:
        raise ValueError("trace_window must be non-negative.")
    if config["batch_size"] < 1:
        raise ValueError("batch_size must be at least 1.")

def load_config(path=None, verbose=False):
    """
    Merge a JSON config file over DEFAULT_CONFIG and validate the result.
    With no path the defaults are returned.
    """
    config = DEFAULT_CONFIG.copy()

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")
        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
        if not isinstance(user_config, dict):
            raise TypeError(f"Configuration file {path} must contain a JSON object.")
        config.update(user_config)

    validate_config(config)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config
