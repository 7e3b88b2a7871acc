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

"""Tests for serializers module."""

from kafka_console.serializers import JsonSerializer, KeySerializer


class TestJsonSerializer:
    """Tests for JsonSerializer."""

    def test_serialize_is_compact_utf8(self):
        assert JsonSerializer().serialize({"a": "é", "b": [1, 2]}) == '{"a":"é","b":[1,2]}'.encode()

    def test_deserialize_tombstone(self):
        assert JsonSerializer().deserialize(None) is None

    def test_to_line_has_no_newlines(self):
        line = JsonSerializer().to_line({"text": "two\nlines"})
        assert "\n" not in line


class TestKeySerializer:
    """Tests for KeySerializer."""

    def test_keys(self):
        serializer = KeySerializer()
        assert serializer.serialize("abc") == b"abc"
        assert serializer.serialize(42) == b"42"
        assert serializer.serialize(True) == b"true"
        assert serializer.serialize({"a": 1, "b": [1, 2]}) == b'{"a":1,"b":[1,2]}'
        assert serializer.serialize(None) is None
