class ProducerError(Exception):
    """Base exception for the producer service."""


class ConfigError(ProducerError):
    """Raised when the producer configuration cannot be loaded."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class FileUnreadableError(ConfigError):
    pass


class MalformedLineError(ConfigError):
    def __init__(self, line_number: int, line: str, *, path: str | None = None):
        super().__init__(f"Malformed line {line_number}: {line!r}", path=path)
        self.line_number = line_number
        self.line = line


class MissingFieldError(ConfigError):
    def __init__(self, field: str, *, key: str | None = None):
        super().__init__(f"Invalid value: {field} ({key})" if key else f"Invalid value: {field}")
        self.field = field
        self.key = key
