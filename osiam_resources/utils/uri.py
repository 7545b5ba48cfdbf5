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

import re
import urllib.parse

from typing import (
    cast,
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from typing import (
        Pattern,
        Union,
    )

    from ..common import (
        URIType,
    )

    AnyParsedURI = Union[urllib.parse.SplitResult, urllib.parse.ParseResult]


class URISyntaxError(ValueError):
    pass


# RFC 3986, section 3.1
SCHEME_RE: "Pattern[str]" = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

# unreserved / sub-delims / ":" / "@" / "/" / "?" plus percent escapes.
# Brackets are only meaningful inside an authority, so they are rejected
URI_CHAR_RE: "Pattern[str]" = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:@/?]")
HEXDIG_RE: "Pattern[str]" = re.compile(r"[0-9A-Fa-f]{2}")


def _check_part(part: "str", offset: "int", text: "str") -> "None":
    idx = 0
    while idx < len(part):
        c = part[idx]
        if c == "%":
            if HEXDIG_RE.fullmatch(part, idx + 1, idx + 3) is None:
                raise URISyntaxError(
                    f"Malformed escape pair at index {offset + idx}: {text}"
                )
            idx += 3
        elif URI_CHAR_RE.fullmatch(c) is None:
            raise URISyntaxError(
                f"Illegal character in URI at index {offset + idx}: {text}"
            )
        else:
            idx += 1


def validate(text: "str") -> "None":
    """
    Checks the syntax of an absolute URI, raising URISyntaxError
    when it is not valid
    """
    scheme_match = SCHEME_RE.match(text)
    if scheme_match is None:
        raise URISyntaxError(f"Expected scheme name at index 0: {text}")

    offset = scheme_match.end()
    body, sharp, fragment = text[offset:].partition("#")
    if len(body) == 0:
        raise URISyntaxError(f"Expected scheme-specific part at index {offset}: {text}")

    _check_part(body, offset, text)
    if sharp:
        _check_part(fragment, offset + len(body) + 1, text)


def parse(text: "str") -> "urllib.parse.SplitResult":
    """
    Validates and parses a URI
    """
    validate(text)

    return urllib.parse.urlsplit(text)


def to_text(parsed: "AnyParsedURI") -> "URIType":
    return cast("URIType", parsed.geturl())
