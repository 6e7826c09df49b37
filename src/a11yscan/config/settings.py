import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

import yaml
from dotenv import load_dotenv

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

WCAG_LEVELS = ("a", "aa", "aaa")

ENV_PREFIX = "A11YSCAN_"


@dataclass
class ComplianceOptions:
    """Compliance profile selecting which checks run for a batch"""

    wcag_level: str = "aa"
    section508: bool = False
    best_practices: bool = True
    experimental: bool = False
    capture_screenshots: bool = True

    def __post_init__(self):
        self.wcag_level = str(self.wcag_level).strip().lower()
        if self.wcag_level not in WCAG_LEVELS:
            raise ValueError(f"Unsupported WCAG level: {self.wcag_level!r} (expected one of {WCAG_LEVELS})")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ComplianceOptions':
        """Create options from a loose mapping (camelCase keys accepted)"""
        aliases = {
            "wcagLevel": "wcag_level",
            "bestPractices": "best_practices",
            "captureScreenshots": "capture_screenshots",
        }
        normalized = {aliases.get(key, key): value for key, value in (data or {}).items()}
        known = {name: normalized[name] for name in cls.__dataclass_fields__ if name in normalized}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScannerSettings:
    """Runtime settings for fetching, rendering and concurrency"""

    # Timing configuration
    fetch_timeout_s: float = 30.0
    navigation_timeout_ms: int = 30000
    script_timeout_s: float = 30.0

    # Concurrency
    max_concurrency: int = 4

    # Browser configuration
    headless: bool = True
    browser_args: List[str] = field(default_factory=lambda: [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage"
    ])
    viewport: Dict[str, int] = field(default_factory=lambda: {"width": 1280, "height": 720})
    axe_script_url: str = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.8.2/axe.min.js"

    # HTTP
    user_agent: str = "a11yscan/0.1"

    # Output
    log_dir: Optional[str] = None
    output_dir: str = "output/results"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(value: str, current: Any) -> Any:
    """Convert an environment string to the type of the current value"""
    if isinstance(current, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return value


def load_settings(config_path: Optional[Union[str, Path]] = None,
                  env_file: Optional[Union[str, Path]] = None) -> ScannerSettings:
    """
    Load scanner settings from YAML defaults, an optional override file and
    A11YSCAN_* environment variables (in that order of precedence)

    Args:
        config_path: Optional YAML file overriding the packaged defaults
        env_file: Optional .env file; the default lookup is used when omitted

    Returns:
        Populated ScannerSettings
    """
    load_dotenv(dotenv_path=env_file)

    values: Dict[str, Any] = {}
    for path in (DEFAULTS_PATH, config_path):
        if not path:
            continue
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        values.update(data.get("scanner", data))

    known = {name: values[name] for name in ScannerSettings.__dataclass_fields__ if name in values}
    settings = ScannerSettings(**known)

    for name in ScannerSettings.__dataclass_fields__:
        env_value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if env_value is None:
            continue
        current = getattr(settings, name)
        if isinstance(current, (list, dict)):
            continue
        setattr(settings, name, _coerce(env_value, current))

    return settings


def load_compliance_defaults(config_path: Optional[Union[str, Path]] = None) -> ComplianceOptions:
    """Read the default compliance profile from the YAML configuration"""
    values: Dict[str, Any] = {}
    for path in (DEFAULTS_PATH, config_path):
        if not path:
            continue
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        values.update(data.get("compliance", {}))
    return ComplianceOptions.from_dict(values)
