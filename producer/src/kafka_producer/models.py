from datetime import timedelta

from pydantic import BaseModel, ConfigDict


class ProducerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    app_env: str
    broker_addresses: tuple[str, ...]
    log_file_path: str
    log_level: str
    message_limit: int
    sleep_timeout: timedelta
    topic_name: str

    @property
    def bootstrap_servers(self) -> str:
        return ",".join(self.broker_addresses)

    @property
    def sleep_seconds(self) -> float:
        return self.sleep_timeout.total_seconds()
