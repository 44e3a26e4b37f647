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
"""Print the platform UI link of the latest published build.

PURPOSE:
    Resolves the latest run of a build and converts its build-info API URI and
    start time into the UI evidence page link, e.g.
    https://acme.jfrog.io/ui/builds/my-build/17/1704067200000/Evidence

REQUIREMENTS:
    - Python 3.9+
    - requests, colorama

EXAMPLES:
    ./buildVcsLink.py --build-name my-build --url https://acme.jfrog.io
    ./buildVcsLink.py --build-name my-build --project proj
"""
import sys
import argparse
import logging

from buildvcs.cli_args import add_build_arguments, setup_from_args
from buildvcs.color_utils import print_warning
from buildvcs.constants import EXIT_SUCCESS
from buildvcs.vcs_log import get_last_build_link


def main() -> int:
    """Main entry point for the build link tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(description="Print the UI link of the latest published build.", formatter_class=argparse.RawDescriptionHelpFormatter)
    add_build_arguments(parser)
    args = parser.parse_args()

    client, build_configuration = setup_from_args(args)
    print(get_last_build_link(client, build_configuration))
    return EXIT_SUCCESS


if __name__ == "__main__":
    from buildvcs.constants import EXIT_KEYBOARD_INTERRUPT, EXIT_RUNTIME_ERROR, BuildVcsError

    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except BuildVcsError as e:
        logging.error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:
        logging.error("Unexpected error: %s", e)
        if logging.getLogger().level == logging.DEBUG:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_RUNTIME_ERROR)
