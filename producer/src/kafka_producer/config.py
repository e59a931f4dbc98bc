"""Producer configuration loading.

Two sources are supported:

- a local ``.env`` file, used when it can be read from the working directory
- the secrets file mounted by Docker swarm, used otherwise

Both hold one ``KEY=VALUE`` pair per line. Every field of the resulting
``ProducerConfig`` is required; a missing or zero value is an error.
"""
import io
import logging
import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values, load_dotenv
from dotenv.parser import parse_stream
from pydantic_settings import BaseSettings

from .errors import (
    FileUnreadableError,
    MalformedLineError,
    MissingFieldError,
)
from .models import ProducerConfig

logger = logging.getLogger(__name__)

LOCAL_BROKERS_KEY = "LOCAL_BROKER_ADDRESSES"
DOCKER_BROKERS_KEY = "DOCKER_BROKER_ADDRESSES"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class LoaderSettings(BaseSettings):
    env_file: str = ".env"
    secrets_path: str = "/run/secrets/kafka-producer-secrets"

    class Config:
        env_prefix = "PRODUCER_CONFIG_"


def parse_key_value_text(text: str, *, path: str | None = None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines into a dict.

    Empty lines are skipped, values may contain ``=`` and later duplicates win.
    Any other line without ``=``, whitespace-only included, aborts parsing with
    ``MalformedLineError``.
    """
    values: dict[str, str] = {}
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line:
            continue

        key, sep, value = line.partition("=")
        if not sep:
            raise MalformedLineError(line_number, line, path=path)

        values[key.strip()] = value.strip()

    return values


def parse_int(value: str | None) -> int:
    """Signed 64-bit base-10 integer, or 0 when absent, not a number or out of range."""
    if value is None:
        return 0
    value = value.strip()
    if not _INT_PATTERN.fullmatch(value):
        return 0
    number = int(value)
    if not _INT64_MIN <= number <= _INT64_MAX:
        return 0
    return number


def split_addresses(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def build_config(values: Mapping[str, str | None], brokers_key: str) -> ProducerConfig:
    missing = [
        key
        for key in (
            "APP_ENV",
            brokers_key,
            "LOG_LEVEL",
            "LOG_FILE_PATH",
            "MESSAGE_LIMIT",
            "SLEEP_TIMEOUT",
            "TOPIC_NAME",
        )
        if key not in values
    ]
    if missing:
        logger.debug(f"Keys not set in config source: {', '.join(missing)}")

    try:
        sleep_timeout = timedelta(milliseconds=parse_int(values.get("SLEEP_TIMEOUT")))
    except OverflowError as exc:
        raise MissingFieldError("sleep_timeout", key="SLEEP_TIMEOUT") from exc

    return ProducerConfig(
        app_env=values.get("APP_ENV") or "",
        broker_addresses=split_addresses(values.get(brokers_key)),
        log_level=values.get("LOG_LEVEL") or "",
        log_file_path=values.get("LOG_FILE_PATH") or "",
        message_limit=parse_int(values.get("MESSAGE_LIMIT")),
        sleep_timeout=sleep_timeout,
        topic_name=values.get("TOPIC_NAME") or "",
    )


def validate_config(config: ProducerConfig, *, brokers_key: str | None = None) -> None:
    """Raise MissingFieldError for the first field left at its zero value.

    ``brokers_key`` names the address variable of the source the config came
    from, so the error can point at it.
    """
    checks = (
        ("app_env", "APP_ENV", config.app_env),
        ("broker_addresses", brokers_key, config.broker_addresses),
        ("log_file_path", "LOG_FILE_PATH", config.log_file_path),
        ("log_level", "LOG_LEVEL", config.log_level),
        ("message_limit", "MESSAGE_LIMIT", config.message_limit),
        ("sleep_timeout", "SLEEP_TIMEOUT", config.sleep_timeout),
        ("topic_name", "TOPIC_NAME", config.topic_name),
    )
    for field, key, value in checks:
        if not value:
            raise MissingFieldError(field, key=key)


def _read_env_file(path: Path) -> bytes | None:
    # Any failure to read means "not running locally".
    try:
        return path.read_bytes()
    except OSError as exc:
        logger.debug(f"No local env file at {path}: {exc}")
        return None


def _load_local_config(
    path: Path,
    data: bytes,
    environ: Mapping[str, str],
    export_env: bool,
) -> ProducerConfig:
    logger.info(f"Loading local env file {path}")

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileUnreadableError(f"Not valid UTF-8: {exc}", path=str(path)) from exc

    for binding in parse_stream(io.StringIO(text)):
        if binding.error:
            raise MalformedLineError(
                binding.original.line,
                binding.original.string.strip(),
                path=str(path),
            )

    if export_env:
        load_dotenv(stream=io.StringIO(text), override=False)

    file_values = {
        key: value
        for key, value in dotenv_values(stream=io.StringIO(text)).items()
        if value is not None
    }
    # Variables already in the environment take precedence over the file.
    return build_config({**file_values, **environ}, LOCAL_BROKERS_KEY)


def _load_docker_config(path: Path) -> ProducerConfig:
    logger.info(f"Loading docker swarm secrets from {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileUnreadableError(
            f"Cannot read secrets file, is the stack deployed? {exc}", path=str(path)
        ) from exc

    secrets = parse_key_value_text(text, path=str(path))
    return build_config(secrets, DOCKER_BROKERS_KEY)


def load_config(
    *,
    env_file: str | Path | None = None,
    secrets_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    export_env: bool = False,
) -> ProducerConfig:
    """Load and validate the producer configuration.

    Args:
        env_file: Local env file. Its presence selects local mode.
        secrets_path: Docker swarm secrets file, read when env_file is unreadable.
        environ: Process environment used in local mode. Defaults to os.environ.
        export_env: Also load the env file into os.environ (local mode only).

    Raises:
        ConfigError: If a source cannot be read or parsed, or a field is missing.
    """
    if env_file is None or secrets_path is None:
        settings = LoaderSettings()
        env_file = env_file if env_file is not None else settings.env_file
        secrets_path = secrets_path if secrets_path is not None else settings.secrets_path

    env_path = Path(env_file)
    data = _read_env_file(env_path)
    if data is not None:
        config = _load_local_config(
            env_path,
            data,
            os.environ if environ is None else environ,
            export_env,
        )
        brokers_key = LOCAL_BROKERS_KEY
    else:
        config = _load_docker_config(Path(secrets_path))
        brokers_key = DOCKER_BROKERS_KEY

    validate_config(config, brokers_key=brokers_key)
    return config


__all__ = [
    "LoaderSettings",
    "build_config",
    "load_config",
    "parse_int",
    "parse_key_value_text",
    "split_addresses",
    "validate_config",
]
