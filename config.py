import json
from pathlib import Path

from internal.logging import get_logger

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"


class GeneratorConfig:
    __slots__ = ("strategy", "entropy", "drift_tolerance")

    def __init__(self, strategy="plain", entropy="secure", drift_tolerance=10):
        self.strategy = strategy
        self.entropy = entropy
        self.drift_tolerance = drift_tolerance


class LoggingConfig:
    __slots__ = ("level",)

    def __init__(self, level="INFO"):
        self.level = level


class Config:
    __slots__ = ("generator", "logging")

    def __init__(self, generator=None, logging=None):
        self.generator = generator or GeneratorConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        return cls(
            GeneratorConfig(**d.get("generator", {})),
            LoggingConfig(**d.get("logging", {})),
        )


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        get_logger().debug("config file missing, using defaults", path=str(config_path))
        return Config()

    with open(config_path) as file:
        return Config.from_dict(json.load(file))
