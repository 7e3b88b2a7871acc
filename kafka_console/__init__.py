"""
Kafka Console - stdin/stdout bridge for Kafka topics.

This module provides a console consumer and producer for JSON records:
- consume: print the JSON records of a topic to stdout, one per line
- produce: read JSON objects (or arrays of them) from stdin and produce them
  on a topic, keyed by a designated field

Typical usage:
    kafka-console consume -c kafka.properties -t my-topic
    kafka-console produce -c kafka.properties -t my-topic < records.json
"""

from kafka_console.config import ConfigError, ConsoleConfig
from kafka_console.consumer import ConsoleConsumer
from kafka_console.producer import ConsoleProducer

__version__ = "1.0.0"
__all__ = ["ConsoleConfig", "ConfigError", "ConsoleConsumer", "ConsoleProducer"]
