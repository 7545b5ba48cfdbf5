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

import base64
import io
import logging

from typing import (
    cast,
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from typing import (
        Any,
        IO,
        Optional,
        Tuple,
        Union,
    )

    from ..common import (
        MIMEType,
        URIType,
    )

    from ..utils.uri import (
        AnyParsedURI,
    )

import urllib.parse

import data_url

from ..common import (
    BASE64_MARKER,
    DATA_PREFIX,
    DataValidationError,
    DecodingError,
    StreamReadError,
)
from ..config import (
    DataURIConfig,
)
from ..utils.io_wrappers import (
    LimitedStreamIOWrapper,
    MIMETypeIOWrapper,
    magic,
)
from ..utils import uri as uri_syntax

logger = logging.getLogger(__name__)


class DataURI:
    """
    A URI of the form data:[<mediatype>];base64,<data>

    Instances are immutable. Equality, hashing and the string
    representation only depend on the textual form of the URI.
    """

    __slots__ = ("_uri_text", "_parsed", "_marker_idx")

    DATA = DATA_PREFIX
    BASE64 = BASE64_MARKER

    def __init__(self, data_uri: "Union[str, AnyParsedURI, IO[bytes]]"):
        """
        :param data_uri: Either the textual form of a data URI, an already
        parsed one (urllib.parse.SplitResult or ParseResult) or a readable
        binary stream, whose contents are going to be embedded
        :raises DataValidationError: when the input is not a data URI
        :raises StreamReadError: when the stream cannot be read
        """
        if not isinstance(data_uri, (str, tuple)) and hasattr(data_uri, "read"):
            data_uri = self._convert_stream_to_text(data_uri, DataURIConfig())

        uri_text: "str"
        parsed: "AnyParsedURI"
        if isinstance(data_uri, str):
            self._check_grammar(data_uri, "string")
            try:
                uri_syntax.validate(data_uri)
            except uri_syntax.URISyntaxError as use:
                raise DataValidationError(str(use)) from use
            # The text is kept verbatim, as geturl() does not always rebuild it
            uri_text = data_uri
            parsed = urllib.parse.urlsplit(data_uri)
        elif isinstance(data_uri, (urllib.parse.SplitResult, urllib.parse.ParseResult)):
            uri_text = uri_syntax.to_text(data_uri)
            self._check_grammar(uri_text, "URI")
            parsed = data_uri
        else:
            raise TypeError(
                f"Unable to build a data URI from an instance of {type(data_uri).__name__}"
            )

        self._init_fields(uri_text, parsed)

    def _init_fields(self, uri_text: "str", parsed: "AnyParsedURI") -> "None":
        object.__setattr__(self, "_uri_text", uri_text)
        object.__setattr__(self, "_parsed", parsed)
        object.__setattr__(self, "_marker_idx", uri_text.index(BASE64_MARKER))

    @classmethod
    def _from_state(cls, uri_text: "str", parsed: "AnyParsedURI") -> "DataURI":
        data_uri = cls.__new__(cls)
        data_uri._init_fields(uri_text, parsed)
        return data_uri

    def __reduce__(self) -> "Tuple[Any, ...]":
        return (self._from_state, (self._uri_text, self._parsed))

    @classmethod
    def _check_grammar(cls, uri_text: "str", kind: "str") -> "None":
        if not uri_text.startswith(DATA_PREFIX) or BASE64_MARKER not in uri_text:
            raise DataValidationError(
                f"The given {kind} '{uri_text}' is not a data URI."
            )

    @classmethod
    def from_string(cls, data_uri: "str") -> "DataURI":
        return cls(data_uri)

    @classmethod
    def from_uri(cls, data_uri: "AnyParsedURI") -> "DataURI":
        return cls(data_uri)

    @classmethod
    def from_stream(
        cls,
        stream: "IO[bytes]",
        max_size: "Optional[int]" = None,
        config: "Optional[DataURIConfig]" = None,
    ) -> "DataURI":
        """
        Builds a data URI embedding the whole content of a stream.
        The MIME type is guessed from the content itself.
        The stream is read until its end, so it cannot be reused later.

        :param stream: a readable binary stream. It does not need to be seekable
        :param max_size: maximum number of accepted bytes. It overrides
        the one from the configuration
        :param config: data URI handling configuration
        :raises StreamReadError: when the stream cannot be read
        :raises PayloadTooLargeError: when the stream provides more than max_size bytes
        :raises DataValidationError: when the assembled string is not a valid URI
        """
        if config is None:
            config = DataURIConfig()
        if max_size is not None:
            config = config._replace(max_size=max_size)

        return cls(cls._convert_stream_to_text(stream, config))

    @classmethod
    def from_bytes(
        cls,
        content: "bytes",
        config: "Optional[DataURIConfig]" = None,
    ) -> "DataURI":
        return cls.from_stream(io.BytesIO(content), config=config)

    @classmethod
    def _convert_stream_to_text(
        cls, stream: "IO[bytes]", config: "DataURIConfig"
    ) -> "str":
        mime_stream = MIMETypeIOWrapper(
            stream,
            sniff_window=config.sniff_window,
            fallback_mime=config.fallback_mime_type,
        )
        read_stream: "io.RawIOBase" = mime_stream
        if config.max_size is not None:
            read_stream = LimitedStreamIOWrapper(mime_stream, config.max_size)

        try:
            mime_type = mime_stream.mime()
            content = read_stream.readall()
        except (OSError, ValueError) as e:
            raise StreamReadError(f"Unable to read the stream: {e}") from e
        except magic.MagicException as me:
            raise StreamReadError(
                f"Unable to guess the MIME type of the stream: {me}"
            ) from me

        logger.debug(f"Embedding {len(content)} bytes as {mime_type}")

        return cast("str", data_url.construct_data_url(mime_type, True, content))

    def get_as_uri(self) -> "AnyParsedURI":
        """
        Gets the data URI as a parsed URI. It is the very object given to
        the constructor, or the urlsplit of the text otherwise
        """
        return self._parsed

    @property
    def url(self) -> "URIType":
        return cast("URIType", self._uri_text)

    def get_as_bytes(self) -> "bytes":
        """
        Gets the decoded content of the data URI

        :raises DecodingError: when the payload is not valid base64
        """
        payload = self._uri_text[self._marker_idx + len(BASE64_MARKER) :]
        try:
            return base64.b64decode(payload, validate=True)
        except ValueError as ve:
            raise DecodingError(
                f"The payload of the data URI is not valid base64: {ve}"
            ) from ve

    def get_as_stream(self) -> "io.BytesIO":
        """
        Gets the decoded content of the data URI as a new stream on each call

        :raises DecodingError: when the payload is not valid base64
        """
        return io.BytesIO(self.get_as_bytes())

    @property
    def mime_type(self) -> "MIMEType":
        """
        The MIME type of the data URI, e.g. image/png. It can be empty
        """
        return cast("MIMEType", self._uri_text[len(DATA_PREFIX) : self._marker_idx])

    def __setattr__(self, name: "str", value: "Any") -> "None":
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __delattr__(self, name: "str") -> "None":
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __eq__(self, other: "object") -> "bool":
        if self is other:
            return True
        if not isinstance(other, DataURI):
            return NotImplemented
        return self._uri_text == other._uri_text

    def __hash__(self) -> "int":
        return hash(self._uri_text)

    def __str__(self) -> "str":
        return self._uri_text

    def __repr__(self) -> "str":
        return f"{type(self).__name__}({self._uri_text!r})"
