#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Command line arguments shared by the build-vcs tools."""

import argparse
import logging
from typing import Tuple

from buildvcs.build_info import BuildConfiguration, BuildInfoClient, ServerDetails, create_build_info_client
from buildvcs.color_utils import Colors, should_use_color
from buildvcs.constants import DEFAULT_HTTP_TIMEOUT, ENV_ACCESS_TOKEN, ENV_BUILD_NAME, ENV_BUILD_PROJECT, ENV_SERVER_URL


def add_build_arguments(parser: argparse.ArgumentParser) -> None:
    """Add build identity, server connection, and output arguments."""
    build_group = parser.add_argument_group("build")
    build_group.add_argument("--build-name", default="", help=f"Build name (default: ${ENV_BUILD_NAME})")
    build_group.add_argument("--project", default="", help=f"Project key (default: ${ENV_BUILD_PROJECT})")

    server_group = parser.add_argument_group("server")
    server_group.add_argument("--url", default="", help=f"JFrog platform URL (default: ${ENV_SERVER_URL})")
    server_group.add_argument("--access-token", default="", help=f"Access token (default: ${ENV_ACCESS_TOKEN})")
    server_group.add_argument("--user", default="", help="User for basic authentication")
    server_group.add_argument("--password", default="", help="Password for basic authentication")
    server_group.add_argument("--timeout", type=int, default=DEFAULT_HTTP_TIMEOUT, help=f"HTTP timeout in seconds (default: {DEFAULT_HTTP_TIMEOUT})")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")


def setup_from_args(args: argparse.Namespace) -> Tuple[BuildInfoClient, BuildConfiguration]:
    """Configure logging and colors, then create the service client and build configuration.

    Raises:
        ArgumentError: If no server URL is configured
    """
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if not should_use_color(no_color=args.no_color):
        Colors.disable()

    server_details = ServerDetails.from_env(url=args.url, access_token=args.access_token, user=args.user, password=args.password)
    client = create_build_info_client(server_details, timeout=args.timeout)
    return client, BuildConfiguration(build_name=args.build_name, project=args.project)
