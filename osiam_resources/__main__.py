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

import argparse
import logging
import os
import pathlib
import sys

from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from typing import (
        Optional,
        Sequence,
    )

    from typing_extensions import (
        NotRequired,
        TypedDict,
    )

    class BasicLoggingConfigDict(TypedDict):
        filename: NotRequired[str]
        format: str
        level: int


import yaml

from . import get_osiam_resources_version_str
from .common import (
    AbstractOsiamResourcesException,
)
from .config import (
    CONFIG_SCHEMA,
    DataURIConfig,
)
from .data import DataURI
from .utils.misc import (
    config_validate,
)

LOGGING_FORMAT = "%(asctime)-15s - [%(levelname)s] %(message)s"
DEBUG_LOGGING_FORMAT = (
    "%(asctime)-15s - [%(name)s %(funcName)s %(lineno)d][%(levelname)s] %(message)s"
)

CONFIG_ENV_VAR = "OSIAM_DATAURI_CONFIG"

STDIO_MARK = "-"


def _read_uri_arg(uri_arg: "str") -> "str":
    if uri_arg == STDIO_MARK:
        return sys.stdin.read().strip()

    return uri_arg


def processEncodeCommand(args: "argparse.Namespace", config: "DataURIConfig") -> "int":
    if args.input_file == STDIO_MARK:
        data_uri = DataURI.from_stream(sys.stdin.buffer, config=config)
    else:
        with open(args.input_file, mode="rb") as iH:
            data_uri = DataURI.from_stream(iH, config=config)

    print(str(data_uri))
    return 0


def processDecodeCommand(args: "argparse.Namespace", config: "DataURIConfig") -> "int":
    data_uri = DataURI(_read_uri_arg(args.data_uri))
    content = data_uri.get_as_bytes()
    if args.output_file is None or args.output_file == STDIO_MARK:
        sys.stdout.buffer.write(content)
        sys.stdout.buffer.flush()
    else:
        with open(args.output_file, mode="wb") as oH:
            oH.write(content)
        logging.info(f"Written {len(content)} bytes to {args.output_file}")

    return 0


def processMimeCommand(args: "argparse.Namespace", config: "DataURIConfig") -> "int":
    data_uri = DataURI(_read_uri_arg(args.data_uri))
    print(data_uri.mime_type)
    return 0


def processConfigValidateCommand(
    args: "argparse.Namespace", config_file: "Optional[pathlib.Path]"
) -> "int":
    if config_file is None or not config_file.exists():
        logging.error("No configuration file to validate")
        return 1

    with config_file.open(mode="r", encoding="utf-8") as cf:
        local_config = yaml.safe_load(cf)

    valErrors = config_validate(
        {} if local_config is None else local_config, CONFIG_SCHEMA
    )
    if len(valErrors) > 0:
        logging.error(f"ERROR in configuration file {config_file}: {valErrors}")
        return 1

    logging.info(f"No validation errors in {config_file}")
    return 0


COMMANDS = {
    "encode": processEncodeCommand,
    "decode": processDecodeCommand,
    "mime": processMimeCommand,
}


def get_osiam_resources_argparse() -> "argparse.ArgumentParser":
    verstr = get_osiam_resources_version_str()

    ap = argparse.ArgumentParser(
        prog="osiam_resources",
        description="Data URI encoder and decoder " + verstr,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument(
        "--log-file",
        dest="logFilename",
        help="Store messages in a file instead of using standard error and standard output",
    )
    ap.add_argument(
        "-q",
        "--quiet",
        dest="logLevel",
        action="store_const",
        const=logging.WARNING,
        help="Only show warnings and errors",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        dest="logLevel",
        action="store_const",
        const=logging.INFO,
        help="Show verbose (informational) messages",
    )
    ap.add_argument(
        "-d",
        "--debug",
        dest="logLevel",
        action="store_const",
        const=logging.DEBUG,
        help="Show debug messages",
    )
    ap.add_argument(
        "-L",
        "--config",
        dest="configFilename",
        default=os.environ.get(CONFIG_ENV_VAR),
        help=f"Configuration file (can also be set up through {CONFIG_ENV_VAR} environment variable)",
    )
    ap.add_argument(
        "-V", "--version", action="version", version="%(prog)s version " + verstr
    )

    sp = ap.add_subparsers(
        dest="command",
        title="commands",
        description="Command to run",
        required=True,
    )

    ap_e = sp.add_parser(
        "encode",
        help="Embed the contents of a file in a data URI, guessing its MIME type",
    )
    ap_e.add_argument(
        "input_file",
        help=f"File to embed ('{STDIO_MARK}' for standard input)",
    )

    ap_d = sp.add_parser(
        "decode",
        help="Extract the contents embedded in a data URI",
    )
    ap_d.add_argument(
        "data_uri",
        help=f"Data URI ('{STDIO_MARK}' to read it from standard input)",
    )
    ap_d.add_argument(
        "-o",
        "--output",
        dest="output_file",
        help="Destination file (standard output when it is not set)",
    )

    ap_m = sp.add_parser(
        "mime",
        help="Show the MIME type embedded in a data URI",
    )
    ap_m.add_argument(
        "data_uri",
        help=f"Data URI ('{STDIO_MARK}' to read it from standard input)",
    )

    sp.add_parser(
        "config-validate",
        help="Validate the configuration file",
    )

    return ap


def main(argv: "Optional[Sequence[str]]" = None) -> "int":
    ap = get_osiam_resources_argparse()
    args = ap.parse_args(argv)

    # Setting up the log
    logLevel = logging.INFO
    if args.logLevel:
        logLevel = args.logLevel

    if logLevel < logging.INFO:
        logFormat = DEBUG_LOGGING_FORMAT
    else:
        logFormat = LOGGING_FORMAT

    loggingConf: "BasicLoggingConfigDict" = {"format": logFormat, "level": logLevel}

    if args.logFilename is not None:
        loggingConf["filename"] = args.logFilename

    logging.basicConfig(**loggingConf)

    config_file = (
        pathlib.Path(args.configFilename) if args.configFilename else None
    )

    if args.command == "config-validate":
        return processConfigValidateCommand(args, config_file)

    try:
        if config_file is not None and config_file.exists():
            config = DataURIConfig.from_file(config_file)
        else:
            if config_file is not None:
                logging.warning(f"Configuration file {config_file} does not exist")
            config = DataURIConfig()

        return COMMANDS[args.command](args, config)
    except (AbstractOsiamResourcesException, OSError) as e:
        logging.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
