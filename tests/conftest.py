#!/usr/bin/env python
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: Apache-2.0
# Copyright 2020-2024 Barcelona Supercomputing Center (BSC), Spain
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

import io
import pathlib
import struct
import zlib

import pytest

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import (
        Optional,
    )

    from py.path.local import LocalPath  # type: ignore[import]


def _png_chunk(kind: "bytes", data: "bytes") -> "bytes":
    return (
        struct.pack(">I", len(data))
        + kind
        + data
        + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)
    )


# A valid 1x1 8 bit grayscale picture
PNG_CONTENT = (
    b"\x89PNG\r\n\x1a\n"
    + _png_chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0))
    + _png_chunk(b"IDAT", zlib.compress(b"\x00\x00"))
    + _png_chunk(b"IEND", b"")
)

GIF_CONTENT = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff"
    b"!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
)

PDF_CONTENT = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"

TEXT_CONTENT = b"Hello, world!\nThis is plain text content.\n"


class OneShotStream(io.RawIOBase):
    """
    Non seekable stream, which can only be read once
    """

    def __init__(self, content: "bytes"):
        self._inner = io.BytesIO(content)

    def readable(self) -> "bool":
        return True

    def seekable(self) -> "bool":
        return False

    def readinto(self, buf: "bytearray") -> "int":  # type: ignore[override]
        return self._inner.readinto(buf)


class TrickleStream:
    """
    Object only providing read, returning at most chunk_size bytes on each call
    """

    def __init__(self, content: "bytes", chunk_size: "int" = 7):
        self._inner = io.BytesIO(content)
        self.chunk_size = chunk_size

    def read(self, size: "Optional[int]" = -1) -> "bytes":
        if size is None or size < 0 or size > self.chunk_size:
            size = self.chunk_size
        return self._inner.read(size)


class FailingStream(io.RawIOBase):
    def readable(self) -> "bool":
        return True

    def readinto(self, buf: "bytearray") -> "int":  # type: ignore[override]
        raise OSError("Device not ready")


@pytest.fixture
def tmppath(tmpdir: "LocalPath") -> "pathlib.Path":
    return pathlib.Path(tmpdir)


@pytest.fixture
def png_content() -> "bytes":
    return PNG_CONTENT


@pytest.fixture
def gif_content() -> "bytes":
    return GIF_CONTENT


@pytest.fixture
def pdf_content() -> "bytes":
    return PDF_CONTENT


@pytest.fixture
def text_content() -> "bytes":
    return TEXT_CONTENT


@pytest.fixture
def one_shot_stream() -> "type":
    return OneShotStream


@pytest.fixture
def trickle_stream() -> "type":
    return TrickleStream


@pytest.fixture
def failing_stream() -> "FailingStream":
    return FailingStream()
