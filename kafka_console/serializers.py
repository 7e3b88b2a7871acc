"""
Serialization/deserialization module for Kafka record keys and values.

Values are JSON documents, keys are UTF-8 strings.
"""

import json
from typing import Any, Optional


class JsonSerializer:
    """JSON serializer/deserializer for record values."""

    def serialize(self, data: Any) -> bytes:
        """Serialize a Python value to compact UTF-8 JSON bytes.

        Args:
            data: JSON-compatible Python value

        Returns:
            UTF-8 encoded JSON bytes
        """
        return json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    def deserialize(self, data: Optional[bytes]) -> Any:
        """Deserialize UTF-8 JSON bytes.

        Args:
            data: UTF-8 encoded JSON bytes, None for tombstones

        Returns:
            Deserialized Python value, None for tombstones
        """
        if data is None:
            return None

        return json.loads(data.decode("utf-8"))

    def to_line(self, data: Any) -> str:
        """Render a value as a single line of JSON."""
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


class KeySerializer:
    """Serializer for record keys."""

    def serialize(self, key: Any) -> Optional[bytes]:
        if key is None:
            return None
        if isinstance(key, bytes):
            return key
        if not isinstance(key, str):
            if isinstance(key, (dict, list, bool)):
                key = json.dumps(key, ensure_ascii=False, separators=(",", ":"))
            else:
                key = str(key)

        return key.encode("utf-8")
