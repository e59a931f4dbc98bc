from .config import LoaderSettings, load_config
from .errors import (
    ConfigError,
    FileUnreadableError,
    MalformedLineError,
    MissingFieldError,
    ProducerError,
)
from .models import ProducerConfig

__all__ = [
    "ConfigError",
    "FileUnreadableError",
    "LoaderSettings",
    "MalformedLineError",
    "MissingFieldError",
    "ProducerConfig",
    "ProducerError",
    "load_config",
]
