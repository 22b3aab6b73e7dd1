"""Build a KSUID factory from configuration.

Callers create one factory at startup and pass it to whatever needs IDs.
There is no process-wide default factory.
"""

from config import load_config
from core.errors import ConfigError
from generation.entropy import get_entropy
from generation.factory import KsuidFactory, Strategy
from internal.logging import LogLevel, StructuredLogger, get_logger


def parse_strategy(name):
    try:
        return Strategy(str(name).lower())
    except ValueError:
        raise ConfigError(f"Unknown strategy: {name!r}", key="strategy") from None


def configure_logging(logging_config):
    try:
        level = LogLevel.parse(logging_config.level)
    except KeyError:
        raise ConfigError(f"Unknown log level: {logging_config.level!r}", key="level") from None
    StructuredLogger.configure(level)


def create_factory(config=None, entropy=None, clock=None):
    """New KsuidFactory for config (config.json when omitted).

    entropy and clock override the configured sources, mostly for tests.
    """
    if config is None:
        config = load_config()

    configure_logging(config.logging)

    generator = config.generator
    strategy = parse_strategy(generator.strategy)
    if entropy is None:
        entropy = get_entropy(generator.entropy)

    factory = KsuidFactory(strategy, entropy=entropy, clock=clock, drift_tolerance=generator.drift_tolerance)
    get_logger().info("ksuid factory created", strategy=factory.strategy.value, entropy=generator.entropy)
    return factory
