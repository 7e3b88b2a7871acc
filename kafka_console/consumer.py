"""
Kafka consumer module for consume mode.

Polls the topic and writes every JSON record as one line to an output stream.
"""

import sys
from typing import Callable, Optional, TextIO

from confluent_kafka import Consumer, KafkaError, KafkaException, Message

from kafka_console.config import ConsoleConfig
from kafka_console.logger import ConsoleLogger
from kafka_console.serializers import JsonSerializer

RecordFilter = Callable[[dict], bool]


class ConsoleConsumer:
    """Wrapper around confluent-kafka Consumer that prints records."""

    def __init__(
        self,
        config: ConsoleConfig,
        serializer: JsonSerializer,
        logger: ConsoleLogger,
        out: Optional[TextIO] = None,
        record_filter: Optional[RecordFilter] = None,
    ):
        """Initialize the console consumer.

        Args:
            config: Console configuration
            serializer: Serializer for record values
            logger: Logger instance
            out: Output stream (default: sys.stdout)
            record_filter: Optional predicate, records it rejects are not printed
        """
        self.config = config
        self.serializer = serializer
        self.logger = logger
        self.out = out
        self.record_filter = record_filter
        self.consumer: Optional[Consumer] = None
        self.output_closed = False
        self._running = False

    def connect(self) -> None:
        """Connect to Kafka and subscribe to the topic."""
        kafka_config = self.config.get_kafka_consumer_config()
        self.consumer = Consumer(kafka_config)
        self.consumer.subscribe([self.config.topic])

        self.logger.info(
            "Connected to Kafka",
            bootstrap_servers=kafka_config.get("bootstrap.servers"),
            topic=self.config.topic,
            group_id=kafka_config["group.id"],
        )

    def close(self) -> None:
        """Close the consumer connection."""
        self._running = False
        if self.consumer:
            self.consumer.close()
            self.consumer = None
            self.logger.info("Consumer closed")

    def _poll_single(self) -> Optional[Message]:
        """Poll for a single message.

        Returns:
            Message if available, None otherwise
        """
        if not self.consumer:
            raise RuntimeError("Consumer not connected")

        msg = self.consumer.poll(self.config.poll_timeout)

        if msg is None:
            return None

        if msg.error():
            if msg.error().code() == KafkaError._PARTITION_EOF:
                return None
            if msg.error().fatal():
                raise KafkaException(msg.error())

            self.logger.warning("Kafka error", error=str(msg.error()), topic=self.config.topic)
            return None

        return msg

    def _decode(self, msg: Message) -> Optional[dict]:
        """Deserialize a message value, None when it can't be printed."""
        try:
            data = self.serializer.deserialize(msg.value())
        except (ValueError, UnicodeDecodeError) as e:
            self.logger.record_deserialization_error()
            self.logger.error(
                "Failed to deserialize message",
                error=str(e),
                topic=msg.topic(),
                partition=msg.partition(),
                offset=msg.offset(),
            )
            return None

        if not isinstance(data, dict):
            self.logger.debug(
                "Skipping record that is not a JSON object",
                partition=msg.partition(),
                offset=msg.offset(),
            )
            self.logger.record_skipped()
            return None

        return data

    def print_record(self, data: dict) -> None:
        """Write one record as a UTF-8 line and flush."""
        out = self.out or sys.stdout
        line = self.serializer.to_line(data) + "\n"
        binary = getattr(out, "buffer", None)

        if binary is None:
            out.write(line)
            out.flush()
        else:
            out.flush()
            binary.write(line.encode("utf-8"))
            binary.flush()

    def consume(self, max_records: Optional[int] = None) -> bool:
        """Print records from the topic until stopped.

        Args:
            max_records: Stop after printing this many records (default: run forever)

        Returns:
            True once the loop has been stopped
        """
        if not self.consumer:
            self.connect()

        self._running = True
        printed = 0

        try:
            while self._running:
                msg = self._poll_single()
                if msg is None:
                    continue

                data = self._decode(msg)
                if data is None:
                    continue

                if self.record_filter and not self.record_filter(data):
                    self.logger.record_skipped()
                    continue

                try:
                    self.print_record(data)
                except BrokenPipeError:
                    self.logger.info("Output closed, stopping")
                    self.output_closed = True
                    break

                self.logger.record_consumed()
                printed += 1

                if max_records is not None and printed >= max_records:
                    break
        finally:
            self.close()

        return True

    def stop(self) -> None:
        """Signal the consumer to stop polling."""
        self._running = False
