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
import logging

from typing import (
    TYPE_CHECKING,
)

from .misc import (
    lazy_import,
)

magic = lazy_import("magic")
# import magic

if TYPE_CHECKING:
    from typing import (
        IO,
        Optional,
        Union,
    )

    from typing_extensions import (
        Buffer,
        Final,
    )

from ..common import (
    DEFAULT_MIME_TYPE,
    PayloadTooLargeError,
)

# Bytes handed to libmagic. It is enough for the usual signatures
DEFAULT_SNIFF_WINDOW: "Final[int]" = 4096

logger = logging.getLogger(__name__)


class AbstractProxyIOWrapper(io.RawIOBase):
    """
    Read-only proxy over a byte stream. The proxied stream is neither
    owned nor closed by the proxy.
    """

    def __init__(
        self,
        stream: "Union[IO[bytes], io.RawIOBase]",
    ):
        self.stream = stream
        if hasattr(stream, "readinto") and callable(stream.readinto):
            self.shim_readinto = stream.readinto
        else:
            self.shim_readinto = self._fake_readinto

    def _fake_readinto(self, buf: "Buffer") -> "Optional[int]":
        mbuf = memoryview(buf)
        rbuf = self.stream.read(len(mbuf))
        if rbuf is None:
            return None

        len_rbuf = len(rbuf)
        mbuf[:len_rbuf] = rbuf
        return len_rbuf

    def readable(self) -> "bool":
        return True

    def writable(self) -> "bool":
        return False


class MIMETypeIOWrapper(AbstractProxyIOWrapper):
    """
    This class is used to compute the MIME type of a stream on the fly.
    The bytes prefetched for the detection are replayed on later reads,
    so no content is lost even on non seekable streams.
    """

    def __init__(
        self,
        stream: "Union[IO[bytes], io.RawIOBase]",
        sniff_window: "int" = DEFAULT_SNIFF_WINDOW,
        fallback_mime: "str" = DEFAULT_MIME_TYPE,
    ):
        super().__init__(stream)
        self.sniff_window = sniff_window
        self.fallback_mime = fallback_mime
        self.found_mime: "Optional[str]" = None
        self.prefetched: "Optional[bytes]" = None
        self.pos_prefetched = 0

    def readinto(self, buf: "Buffer") -> "Optional[int]":
        mbuf = memoryview(buf)
        if self.prefetched is not None and self.pos_prefetched < len(self.prefetched):
            chunksize = len(self.prefetched) - self.pos_prefetched
            limitread = len(mbuf) < chunksize
            if limitread:
                chunksize = len(mbuf)

            mbuf[:chunksize] = self.prefetched[
                self.pos_prefetched : self.pos_prefetched + chunksize
            ]
            self.pos_prefetched += chunksize

            if not limitread:
                otherpart = self.stream.read(len(mbuf) - chunksize)
                if otherpart is not None:
                    mbuf[chunksize : chunksize + len(otherpart)] = otherpart
                    chunksize += len(otherpart)

            return chunksize

        return self.shim_readinto(buf)

    def _prefetch(self) -> "bytes":
        # Short reads are possible on pipes and sockets, so the
        # window is filled until it is complete or the stream ends
        chunks = []
        remaining = self.sniff_window
        while remaining > 0:
            chunk = self.stream.read(remaining)
            if chunk is None:
                continue
            if len(chunk) == 0:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

        return b"".join(chunks)

    def _compute_mime(self) -> "None":
        if self.prefetched is None:
            self.prefetched = self._prefetch()
            self.pos_prefetched = 0
            self.found_mime = magic.from_buffer(self.prefetched, mime=True)
            logger.debug(
                f"Detected MIME type {self.found_mime} from {len(self.prefetched)} bytes"
            )

    def mime(self) -> "str":
        self._compute_mime()

        return self.fallback_mime if not self.found_mime else self.found_mime


class LimitedStreamIOWrapper(AbstractProxyIOWrapper):
    """
    This class is used to refuse streams providing more than
    maxreadsize bytes
    """

    def __init__(
        self,
        stream: "Union[IO[bytes], io.RawIOBase]",
        maxreadsize: "int",
    ):
        super().__init__(stream)
        self.maxreadsize = maxreadsize
        self.readbytes: "int" = 0

    def readinto(self, buf: "Buffer") -> "int":
        u_numread: "Optional[int]" = None
        while u_numread is None:
            u_numread = self.shim_readinto(buf)

        self.readbytes += u_numread
        if self.readbytes > self.maxreadsize:
            raise PayloadTooLargeError(
                f"Stream content is larger than the allowed {self.maxreadsize} bytes"
            )

        return u_numread
