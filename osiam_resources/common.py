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

from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from typing import (
        NewType,
    )

    from typing_extensions import (
        Final,
    )

    # A full URI, in its textual form
    URIType = NewType("URIType", str)

    # A MIME type, as it is embedded in a data URI (it can be empty)
    MIMEType = NewType("MIMEType", str)

DATA_SCHEME: "Final[str]" = "data"
DATA_PREFIX: "Final[str]" = DATA_SCHEME + ":"
BASE64_MARKER: "Final[str]" = ";base64,"

DEFAULT_MIME_TYPE: "Final[str]" = "application/octet-stream"


class AbstractOsiamResourcesException(Exception):
    pass


class DataValidationError(AbstractOsiamResourcesException):
    """
    The input does not follow the data URI grammar, or it is not
    a syntactically valid URI
    """

    pass


class PayloadTooLargeError(DataValidationError):
    pass


class StreamReadError(AbstractOsiamResourcesException):
    """
    The stream providing the binary content could not be read
    """

    pass


class DecodingError(AbstractOsiamResourcesException):
    """
    The payload of a data URI is not valid base64
    """

    pass
