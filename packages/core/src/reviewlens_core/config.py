from pathlib import Path
from typing import Optional

import yaml

from reviewlens_core.models import Category, Severity

DEFAULT_CONFIG: dict = {
    "dedupe": False,  # drop issues repeated under the same (file, line, title)
    "min_severity": "info",  # lowest severity shown by the CLI
    "categories": [],  # category names to show; empty = all
    "fail_on": None,  # severity that makes `reviewlens parse` exit non-zero
}


def load_config(config_path: str = ".reviewlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewlens.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "categories": list(DEFAULT_CONFIG["categories"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def validate_config(config: dict) -> None:
    """Raise ValueError if a severity or category name is not recognised."""
    severities = [s.value for s in Severity]
    for key in ("min_severity", "fail_on"):
        value = config.get(key)
        if value is not None and str(value).lower() not in severities:
            raise ValueError(f"Unknown severity for {key}: {value!r}. Choose one of: {', '.join(severities)}.")

    categories = [c.value for c in Category]
    for name in config.get("categories") or []:
        if str(name).lower() not in categories:
            raise ValueError(f"Unknown category: {name!r}. Choose one of: {', '.join(categories)}.")
