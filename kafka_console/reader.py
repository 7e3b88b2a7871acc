"""
JSON input parsing for produce mode.

Accepts a single object, an array of objects, JSON Lines or any whitespace
separated sequence of such documents. Input is read line by line and every
object is yielded as soon as it is complete.
"""

import json
import re
from typing import Any, Iterator, Optional, TextIO

from kafka_console.logger import ConsoleLogger

_WHITESPACE = re.compile(r"[ \t\n\r\ufeff]*")


def _objects(value: Any, logger: Optional[ConsoleLogger]) -> Iterator[dict]:
    """Yield the objects of a top-level value, flattening one array level."""
    items = value if isinstance(value, list) else [value]

    for item in items:
        if isinstance(item, dict):
            yield item
        elif logger:
            logger.debug("Skipping non-object JSON value", type=type(item).__name__)
            logger.record_skipped()


def _drain(
    buffer: str,
    decoder: json.JSONDecoder,
    eof: bool,
    logger: Optional[ConsoleLogger],
):
    """Yield the complete documents of the buffer and return the remainder."""
    pos = 0

    while True:
        pos = _WHITESPACE.match(buffer, pos).end()
        if pos >= len(buffer):
            return ""

        try:
            value, pos = decoder.raw_decode(buffer, pos)
        except json.JSONDecodeError as e:
            # Lines are read whole, so only an error at the end of the
            # buffer can be a document that continues on the next line.
            if not eof and e.pos >= len(buffer.rstrip()):
                return buffer[pos:]

            if logger:
                logger.warning(
                    "Invalid JSON ignored",
                    line=e.lineno,
                    column=e.colno,
                    error=e.msg,
                    fragment=buffer[pos : pos + 50],
                )
                logger.record_parse_error()

            # Resume on the line after the error
            next_line = buffer.find("\n", max(e.pos, pos))
            if next_line < 0:
                return ""
            pos = next_line + 1
            continue

        yield from _objects(value, logger)


def iter_json_objects(
    stream: TextIO, logger: Optional[ConsoleLogger] = None
) -> Iterator[dict]:
    """Read JSON documents from a text stream.

    Args:
        stream: Input text stream
        logger: Optional logger for warnings and counters

    Yields:
        dict: Each JSON object in input order
    """
    decoder = json.JSONDecoder()
    buffer = ""
    eof = False

    while not eof:
        line = stream.readline()
        if line:
            buffer += line
        else:
            eof = True

        buffer = yield from _drain(buffer, decoder, eof, logger)
