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

"""
Command line for the Kafka console consumer and producer.

    kafka-console (consume | produce) (-c | --config-file) FILE (-t | --topic) TOPIC

The consumer writes JSON records to stdout, one per line. The producer reads
a JSON object or an array of JSON objects from stdin.
"""

import argparse
import os
import signal
import sys
from typing import List, Optional

from kafka_console.config import CONSUME, MODES, ConsoleConfig
from kafka_console.consumer import ConsoleConsumer
from kafka_console.logger import ConsoleLogger
from kafka_console.producer import ConsoleProducer
from kafka_console.serializers import JsonSerializer


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="kafka-console",
        description="Consume JSON records from a Kafka topic to stdout, "
        "or produce JSON objects from stdin to a Kafka topic.",
    )
    parser.add_argument("mode", choices=MODES, help="consume to stdout or produce from stdin")
    parser.add_argument(
        "-c",
        "--config-file",
        required=True,
        help="Kafka client configuration in Java properties format",
    )
    parser.add_argument("-t", "--topic", required=True, help="Topic to consume or produce")
    parser.add_argument(
        "-k",
        "--key-field",
        default="_id",
        help="Field used as the message key when producing (default: _id)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Log format (default: LOG_FORMAT or text)",
    )

    return parser


def _setup_signal_handlers(consumer: ConsoleConsumer, logger: ConsoleLogger) -> None:
    """Stop consuming gracefully on SIGTERM/SIGINT."""

    def signal_handler(signum, frame):
        logger.info("Received shutdown signal", signal=signal.Signals(signum).name)
        consumer.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def run(config: ConsoleConfig, logger: ConsoleLogger) -> bool:
    """Run the configured operation on the standard streams."""
    serializer = JsonSerializer()

    if config.mode == CONSUME:
        consumer = ConsoleConsumer(config, serializer, logger, out=sys.stdout)
        _setup_signal_handlers(consumer, logger)
        ok = consumer.consume()

        if consumer.output_closed:
            # The pipe reader is gone, keep the flush at exit from failing again
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())

        return ok

    producer = ConsoleProducer(config, serializer, logger)
    return producer.produce(sys.stdin)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format

    try:
        config = ConsoleConfig(
            mode=args.mode,
            topic=args.topic,
            config_file=args.config_file,
            key_field=args.key_field,
            **overrides,
        )
        config.validate()
    except ValueError as e:
        print(f"kafka-console: {e}", file=sys.stderr)
        return 1

    logger = ConsoleLogger(config)
    logger.debug("Starting", config=str(config))

    try:
        ok = run(config, logger)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        # Records read but not acknowledged may be lost when producing
        ok = config.mode == CONSUME
    except Exception as e:
        logger.exception("Fatal error", error=str(e))
        ok = False

    logger.log_metrics()

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
