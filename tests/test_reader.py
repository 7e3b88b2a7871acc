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

"""Tests for the JSON input reader."""

import io

from kafka_console.reader import iter_json_objects


def read(text, logger=None):
    return list(iter_json_objects(io.StringIO(text), logger))


class CountingStream:
    """Text stream that counts the lines read from it."""

    def __init__(self, text):
        self._stream = io.StringIO(text)
        self.reads = 0

    def readline(self):
        self.reads += 1
        return self._stream.readline()


class TestIterJsonObjects:
    """Tests for iter_json_objects function."""

    def test_single_object(self):
        assert read('{"_id": "1", "a": 1}') == [{"_id": "1", "a": 1}]

    def test_array_of_objects(self):
        assert read('[{"_id": "1"}, {"_id": "2"}]') == [{"_id": "1"}, {"_id": "2"}]

    def test_json_lines(self):
        assert read('{"_id": "1"}\n{"_id": "2"}\n') == [{"_id": "1"}, {"_id": "2"}]

    def test_concatenated_documents(self):
        """Test pretty-printed documents and arrays one after the other."""
        text = '{\n  "_id": "1"\n}\n[{"_id": "2"}]{"_id": "3"}'
        assert read(text) == [{"_id": "1"}, {"_id": "2"}, {"_id": "3"}]

    def test_empty_input(self):
        assert read("") == []
        assert read("  \n\t\n") == []

    def test_byte_order_mark(self):
        assert read('\ufeff{"_id": "1"}') == [{"_id": "1"}]

    def test_non_objects_skipped(self, produce_logger):
        text = '1\n"text"\n[{"_id": "1"}, 2, [3]]\nnull\n'
        assert read(text, produce_logger) == [{"_id": "1"}]
        assert produce_logger.metrics["records_skipped"] == 5

    def test_invalid_line_skipped(self, produce_logger):
        text = '{"_id": "1"}\n{"_id": oops}\n{"_id": "2"}\n'
        assert read(text, produce_logger) == [{"_id": "1"}, {"_id": "2"}]
        assert produce_logger.metrics["parse_errors"] == 1

    def test_invalid_trailing_content(self, produce_logger):
        assert read('{"_id": "1"}\n{"_id": ', produce_logger) == [{"_id": "1"}]
        assert produce_logger.metrics["parse_errors"] == 1

    def test_without_logger(self):
        assert read('garbage\n{"_id": "1"}') == [{"_id": "1"}]

    def test_yields_before_end_of_input(self):
        """Test that an object is available once its line has been read."""
        stream = CountingStream('{"_id": "1"}\n{"_id": "2"}\n')

        objects = iter_json_objects(stream)

        assert next(objects) == {"_id": "1"}
        assert stream.reads == 1
        assert list(objects) == [{"_id": "2"}]

    def test_document_spanning_lines_waits_for_the_rest(self):
        stream = io.StringIO('[\n  {"_id": "1"},\n  {"_id": "2"}\n]\n')
        assert list(iter_json_objects(stream)) == [{"_id": "1"}, {"_id": "2"}]
