import logging
import sys
from pathlib import Path

from .config import load_config
from .errors import ConfigError
from .models import ProducerConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(config: ProducerConfig) -> None:
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {config.log_level}", path="LOG_LEVEL")

    log_path = Path(config.log_file_path)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot open log file: {exc}", path=str(log_path)) from exc

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(), file_handler],
        force=True,
    )


def run() -> ProducerConfig:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        config = load_config()
        configure_logging(config)
    except ConfigError as exc:
        logger.error(f"Invalid producer configuration: {exc}")
        sys.exit(1)

    logger.info(
        f"Configuration loaded: env={config.app_env}, "
        f"brokers={config.bootstrap_servers}, "
        f"topic={config.topic_name}, "
        f"message_limit={config.message_limit}, "
        f"sleep={config.sleep_seconds}s"
    )
    return config


def main() -> None:
    run()


if __name__ == "__main__":
    main()
