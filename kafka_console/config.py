"""
Configuration module for the Kafka console tool.

Kafka client settings come from a Java-style properties file, the operation
from the command line, and logging/timeouts from environment variables.
"""

import os
import string
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

CONSUME = "consume"
PRODUCE = "produce"
MODES = (CONSUME, PRODUCE)

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SECRET_MARKERS = ("password", "secret", "sasl.jaas.config")


class ConfigError(ValueError):
    """Raised when the configuration is missing or invalid."""


def _is_continued(line: str) -> bool:
    """Return True if the line ends with an odd number of backslashes."""
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str):
    """Join continuation lines and drop comments and blank lines."""
    pending = None

    for raw in text.splitlines():
        line = raw.lstrip()

        if pending is None:
            if not line or line[0] in "#!":
                continue
            pending = ""

        if _is_continued(line):
            pending += line[:-1]
            continue

        yield pending + line
        pending = None

    if pending:
        yield pending


def _unescape(text: str) -> str:
    result = []
    i = 0

    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            result.append(char)
            i += 1
            continue

        nxt = text[i + 1]
        if nxt == "u":
            digits = text[i + 2 : i + 6]
            if len(digits) != 4 or not all(c in string.hexdigits for c in digits):
                raise ConfigError(f"Malformed \\uXXXX escape: {text[i:i + 6]}")
            result.append(chr(int(digits, 16)))
            i += 6
            continue

        result.append(_ESCAPES.get(nxt, nxt))
        i += 2

    return "".join(result)


def _split_entry(line: str):
    """Split a logical line into its raw key and value."""
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in "=: \t\f":
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")

    return key, rest


def parse_properties(text: str) -> Dict[str, str]:
    """Parse the content of a Java-style properties file.

    Args:
        text: Properties file content

    Returns:
        Mapping of property names to values
    """
    properties: Dict[str, str] = {}

    for line in _logical_lines(text):
        key, value = _split_entry(line)
        properties[_unescape(key)] = _unescape(value)

    return properties


def load_properties(path: str) -> Dict[str, str]:
    """Load a Java-style properties file.

    Args:
        path: Path to the properties file

    Returns:
        Mapping of property names to values

    Raises:
        ConfigError: If the file cannot be read
    """
    config_path = Path(path)

    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    return parse_properties(text)


@dataclass
class ConsoleConfig:
    """Configuration for one console consume or produce run.

    Logging and timeout values can be set via environment variables.
    """

    mode: str
    topic: str
    config_file: Optional[str] = None
    key_field: str = "_id"

    # Kafka client properties, loaded from config_file when not given
    kafka_properties: Dict[str, str] = field(default_factory=dict)

    poll_timeout: float = field(
        default_factory=lambda: float(os.getenv("POLL_TIMEOUT", "1.0"))
    )
    flush_timeout: float = field(
        default_factory=lambda: float(os.getenv("FLUSH_TIMEOUT", "30"))
    )

    # Logging settings
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "text"))  # json, text

    def __post_init__(self):
        if self.config_file and not self.kafka_properties:
            self.kafka_properties = load_properties(self.config_file)

    def get_kafka_consumer_config(self) -> dict:
        """Get Kafka consumer configuration dictionary.

        The group id is always a fresh UUID so every run reads the topic as
        an independent consumer group.
        """
        config = dict(self.kafka_properties)
        config["group.id"] = str(uuid.uuid4())
        config.setdefault("auto.offset.reset", "earliest")

        return config

    def get_kafka_producer_config(self) -> dict:
        """Get Kafka producer configuration dictionary."""
        config = dict(self.kafka_properties)
        config.setdefault("acks", "all")  # Wait for all replicas
        config.setdefault("enable.idempotence", "true")

        return config

    def validate(self) -> None:
        """Validate configuration and raise ConfigError if invalid."""
        if self.mode not in MODES:
            raise ConfigError(f"Invalid mode: {self.mode}")

        if not self.topic:
            raise ConfigError("A topic is required")

        if not self.key_field:
            raise ConfigError("The key field can't be empty")

        if self.poll_timeout <= 0:
            raise ConfigError(f"Invalid poll_timeout: {self.poll_timeout}")

        if self.flush_timeout <= 0:
            raise ConfigError(f"Invalid flush_timeout: {self.flush_timeout}")

        if self.log_format not in ("json", "text"):
            raise ConfigError(f"Invalid log_format: {self.log_format}")

        if "bootstrap.servers" not in self.kafka_properties:
            raise ConfigError("bootstrap.servers is missing from the Kafka configuration")

    def masked_properties(self) -> Dict[str, str]:
        return {
            k: "****" if any(marker in k.lower() for marker in _SECRET_MARKERS) else v
            for k, v in self.kafka_properties.items()
        }

    def __str__(self) -> str:
        """Return a string representation with sensitive fields masked."""
        return (
            f"ConsoleConfig(\n"
            f"  mode={self.mode},\n"
            f"  topic={self.topic},\n"
            f"  config_file={self.config_file},\n"
            f"  key_field={self.key_field},\n"
            f"  kafka_properties={self.masked_properties()}\n"
            f")"
        )
