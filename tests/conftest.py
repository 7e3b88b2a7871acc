#!/usr/bin/env python3
# Copyright 2025 AstroLab Software
# Author: Farid MAMAN and improved by IA
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest
from confluent_kafka import KafkaError

from kafka_console.config import ConsoleConfig
from kafka_console.logger import ConsoleLogger
from kafka_console.serializers import JsonSerializer


class FakeMessage:
    """Stand-in for confluent_kafka.Message."""

    def __init__(self, value=None, key=None, error=None, topic="events", partition=0, offset=0):
        self._value = value
        self._key = key
        self._error = error
        self._topic = topic
        self._partition = partition
        self._offset = offset

    def value(self):
        return self._value

    def key(self):
        return self._key

    def error(self):
        return self._error

    def topic(self):
        return self._topic

    def partition(self):
        return self._partition

    def offset(self):
        return self._offset


def kafka_error(code, fatal=False):
    """Build a message error object with the given code."""
    error = MagicMock()
    error.code.return_value = code
    error.fatal.return_value = fatal
    return error


@pytest.fixture
def properties_file(tmp_path):
    """A minimal Kafka properties file."""
    path = tmp_path / "kafka.properties"
    path.write_text(
        "# test cluster\n"
        "bootstrap.servers=localhost:9092\n"
        "group.id=ignored\n"
        "sasl.password=s3cret\n"
    )
    return path


@pytest.fixture
def make_config(properties_file):
    """Factory for console configurations."""

    def _make(mode="consume", topic="events", **kwargs):
        kwargs.setdefault("config_file", str(properties_file))
        kwargs.setdefault("log_format", "text")
        kwargs.setdefault("log_level", "DEBUG")
        return ConsoleConfig(mode=mode, topic=topic, **kwargs)

    return _make


@pytest.fixture
def consume_config(make_config):
    return make_config("consume")


@pytest.fixture
def produce_config(make_config):
    return make_config("produce")


@pytest.fixture
def serializer():
    return JsonSerializer()


@pytest.fixture
def make_message():
    return FakeMessage


@pytest.fixture
def eof_error():
    return kafka_error(KafkaError._PARTITION_EOF)


@pytest.fixture
def consume_logger(consume_config):
    return ConsoleLogger(consume_config)


@pytest.fixture
def produce_logger(produce_config):
    return ConsoleLogger(produce_config)


@pytest.fixture
def make_error():
    return kafka_error
