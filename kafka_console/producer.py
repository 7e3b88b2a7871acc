"""
Kafka producer module for produce mode.

Reads JSON objects from an input stream and produces them keyed by a field.
"""

import time
from typing import Callable, List, Optional, TextIO

from confluent_kafka import Producer

from kafka_console.config import ConsoleConfig
from kafka_console.logger import ConsoleLogger
from kafka_console.reader import iter_json_objects
from kafka_console.serializers import JsonSerializer, KeySerializer

RecordFilter = Callable[[dict], bool]


class ConsoleProducer:
    """Wrapper around confluent-kafka Producer with delivery tracking."""

    def __init__(
        self,
        config: ConsoleConfig,
        serializer: JsonSerializer,
        logger: ConsoleLogger,
        record_filter: Optional[RecordFilter] = None,
    ):
        """Initialize the console producer.

        Args:
            config: Console configuration
            serializer: Serializer for record values
            logger: Logger instance
            record_filter: Optional predicate, records it rejects are not sent
        """
        self.config = config
        self.serializer = serializer
        self.key_serializer = KeySerializer()
        self.logger = logger
        self.record_filter = record_filter
        self.producer: Optional[Producer] = None
        self._delivery_failures: List[str] = []

    def connect(self) -> None:
        """Connect to Kafka."""
        kafka_config = self.config.get_kafka_producer_config()
        self.producer = Producer(kafka_config)

        self.logger.info(
            "Producer connected to Kafka",
            bootstrap_servers=kafka_config.get("bootstrap.servers"),
            topic=self.config.topic,
        )

    def _delivery_callback(self, err, msg) -> None:
        """Handle message delivery confirmation callback."""
        if err:
            self._delivery_failures.append(f"Delivery failed: {err}")
            self.logger.record_delivery_error()
            self.logger.error(
                "Message delivery failed",
                error=str(err),
                topic=msg.topic() if msg else "unknown",
                key=msg.key().decode("utf-8", "replace") if msg and msg.key() else None,
            )
        else:
            self.logger.record_produced()
            self.logger.debug(
                "Message delivered",
                topic=msg.topic(),
                partition=msg.partition(),
                offset=msg.offset(),
            )

    def send(self, data: dict) -> bool:
        """Queue one record keyed by the configured field.

        Args:
            data: JSON object

        Returns:
            True if queued, False if the record was skipped
        """
        if not self.producer:
            raise RuntimeError("Producer not connected")

        key_field = self.config.key_field
        if key_field not in data:
            self.logger.warning("Skipping record without key field", key_field=key_field)
            self.logger.record_skipped()
            return False

        key = self.key_serializer.serialize(data[key_field])
        value = self.serializer.serialize(data)
        deadline = time.monotonic() + self.config.flush_timeout

        while True:
            try:
                self.producer.produce(
                    topic=self.config.topic,
                    key=key,
                    value=value,
                    callback=self._delivery_callback,
                )
                break
            except BufferError:
                # Local queue full: serve delivery reports to make room
                if time.monotonic() >= deadline:
                    raise
                self.logger.debug("Local producer queue full, waiting")
                self.producer.poll(1)

        # Trigger delivery callbacks without blocking
        self.producer.poll(0)

        return True

    def flush(self) -> int:
        """Flush all pending messages.

        Returns:
            Number of messages still in queue (0 if all delivered)
        """
        if not self.producer:
            return 0

        remaining = self.producer.flush(timeout=self.config.flush_timeout)

        if remaining > 0:
            self.logger.warning(
                "Flush timeout with pending messages",
                remaining=remaining,
            )

        return remaining

    def produce(self, stream: TextIO) -> bool:
        """Produce every JSON object of the input stream on the topic.

        Args:
            stream: Text stream holding a JSON object, an array of objects or
                a sequence of them

        Returns:
            True if all records were parsed and delivered, False otherwise
        """
        parse_errors = self.logger.metrics["parse_errors"]
        queued = 0
        ok = False

        try:
            if not self.producer:
                self.connect()

            for data in iter_json_objects(stream, self.logger):
                if self.record_filter and not self.record_filter(data):
                    self.logger.record_skipped()
                    continue

                if self.send(data):
                    queued += 1

            ok = True

        except Exception as e:
            self.logger.exception("Failed to produce messages", error=str(e))

        finally:
            remaining = self.flush()

            self.logger.info(
                "Producer finished",
                queued=queued,
                failed=len(self._delivery_failures),
                undelivered=remaining,
            )

        if self.logger.metrics["parse_errors"] > parse_errors:
            self.logger.error("Input contained malformed JSON")
            ok = False

        return ok and remaining == 0 and not self._delivery_failures
