import sys
from pathlib import Path

import pytest

producer_src = Path(__file__).parent.parent / "producer" / "src"
if producer_src.exists():
    sys.path.insert(0, str(producer_src))

CONFIG_KEYS = [
    "APP_ENV",
    "LOCAL_BROKER_ADDRESSES",
    "DOCKER_BROKER_ADDRESSES",
    "LOG_LEVEL",
    "LOG_FILE_PATH",
    "MESSAGE_LIMIT",
    "SLEEP_TIMEOUT",
    "TOPIC_NAME",
    "PRODUCER_CONFIG_ENV_FILE",
    "PRODUCER_CONFIG_SECRETS_PATH",
]

LOCAL_ENV = (
    "APP_ENV=prod\n"
    "LOCAL_BROKER_ADDRESSES=host1:9092,host2:9092\n"
    "LOG_LEVEL=info\n"
    "LOG_FILE_PATH=/var/log/app.log\n"
    "MESSAGE_LIMIT=100\n"
    "SLEEP_TIMEOUT=500\n"
    "TOPIC_NAME=events\n"
)

DOCKER_SECRETS = (
    "APP_ENV=production\n"
    "DOCKER_BROKER_ADDRESSES=kafka1:29092,kafka2:29092,kafka3:29092\n"
    "LOG_LEVEL=debug\n"
    "LOG_FILE_PATH=/logs/producer.log\n"
    "MESSAGE_LIMIT=2500\n"
    "SLEEP_TIMEOUT=1500\n"
    "TOPIC_NAME=transactions\n"
)


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch):
    """Keep config keys set on the host out of the tests."""
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text(LOCAL_ENV)
    return path


@pytest.fixture
def secrets_file(tmp_path):
    path = tmp_path / "kafka-producer-secrets"
    path.write_text(DOCKER_SECRETS)
    return path


@pytest.fixture
def missing_env_file(tmp_path):
    return tmp_path / "absent.env"
