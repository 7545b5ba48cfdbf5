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

import logging
import pathlib

from typing import (
    NamedTuple,
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from typing import (
        Any,
        Mapping,
        Optional,
        Union,
    )

    from typing_extensions import (
        Final,
    )

import yaml

from .common import (
    DEFAULT_MIME_TYPE,
)
from .utils.io_wrappers import (
    DEFAULT_SNIFF_WINDOW,
)
from .utils.misc import (
    ConfigValidationException,
    config_validate,
)

CONFIG_SCHEMA: "Final[str]" = "datauri-config.json"

logger = logging.getLogger(__name__)


class DataURIConfig(NamedTuple):
    """
    max_size: Maximum number of bytes read from a stream. None means no limit
    fallback_mime_type: MIME type used when the sniffer does not guess one
    sniff_window: Number of leading bytes used to guess the MIME type
    """

    max_size: "Optional[int]" = None
    fallback_mime_type: "str" = DEFAULT_MIME_TYPE
    sniff_window: "int" = DEFAULT_SNIFF_WINDOW

    @classmethod
    def from_mapping(cls, config: "Mapping[str, Any]") -> "DataURIConfig":
        errors = config_validate(config, CONFIG_SCHEMA)
        if len(errors) > 0:
            for error in errors:
                logger.error(
                    f"Path: {'/'.join(map(str, error.path))} . Message: {error.message}"
                )
            raise ConfigValidationException(
                f"Configuration is not valid ({len(errors)} errors found)"
            )

        return cls(
            max_size=config.get("maxSize"),
            fallback_mime_type=config.get("fallbackMimeType", DEFAULT_MIME_TYPE),
            sniff_window=config.get("sniffWindow", DEFAULT_SNIFF_WINDOW),
        )

    @classmethod
    def from_file(cls, config_file: "Union[str, pathlib.Path]") -> "DataURIConfig":
        config_path = pathlib.Path(config_file)
        with config_path.open(mode="r", encoding="utf-8") as cf:
            config = yaml.safe_load(cf)

        # An empty file is an empty configuration
        if config is None:
            config = {}

        return cls.from_mapping(config)
