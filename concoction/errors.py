from typing import Any


class ConcoctionError(Exception):
    """Base class for everything the build raises."""


class ConfigError(ConcoctionError):
    """Descriptor, content file or pipeline configuration is unusable."""


class ContextNotFound(ConcoctionError):
    def __init__(self, key: str, reason: str = "global context not found") -> None:
        self.key = key
        super().__init__(f"{reason}: {key}")


class InvalidDate(ConcoctionError):
    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(f"invalid date in {key}: {value!r}")
