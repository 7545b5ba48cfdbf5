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

import importlib.util
import json
import os
import sys

from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from types import (
        ModuleType,
    )

    from typing import (
        Any,
        Mapping,
        Sequence,
        Union,
    )

    from jsonschema.exceptions import ValidationError

import jsonschema.validators
import referencing

from ..common import AbstractOsiamResourcesException


class ConfigValidationException(AbstractOsiamResourcesException):
    pass


SCHEMAS_REL_DIR = "schemas"


def config_validate(
    configToValidate: "Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]",
    relSchemaFile: "str",
) -> "Sequence[ValidationError]":
    # Locating the schemas directory, where all the schemas should be placed
    schemaFile = os.path.join(
        os.path.dirname(__file__), "..", SCHEMAS_REL_DIR, relSchemaFile
    )

    try:
        with open(schemaFile, mode="r", encoding="utf-8") as sF:
            schema = json.load(sF)

        jv = jsonschema.validators.validator_for(schema)(
            schema, registry=referencing.Registry()
        )

        return list(jv.iter_errors(instance=configToValidate))
    except Exception as e:
        raise ConfigValidationException(
            f"FATAL ERROR: corrupted schema {relSchemaFile}. Reason: {e}"
        ) from e


def lazy_import(name: "str") -> "ModuleType":
    """
    Inspired in https://docs.python.org/3/library/importlib.html#implementing-lazy-imports
    """
    module = sys.modules.get(name)
    if module is None:
        spec = importlib.util.find_spec(name)
        if spec is not None and spec.loader is not None:
            loader = importlib.util.LazyLoader(spec.loader)
            spec.loader = loader

            module = importlib.util.module_from_spec(spec)
            sys.modules[name] = module

            loader.exec_module(module)

    if module is None:
        raise ModuleNotFoundError(f"No module named '{name}'")

    return module
