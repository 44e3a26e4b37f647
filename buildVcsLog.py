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
"""Show the git commits made since a previously published build.

PURPOSE:
    Answers "what changed since the last time this project was built?" by
    correlating the local git history with the VCS revision recorded in the
    build-info of a previously published build.

WHAT IT DOES:
    - Locates the repository root (--dot-git or search upward) and its origin URL
    - Fetches the reference revision recorded for that URL by a published build
    - Runs 'git log --pretty=<FORMAT> -<LIMIT> <REVISION>..' in the repository
    - Parsed mode (default): prints every line matching --pattern
    - Raw mode (--raw): prints the git log output as is

REFERENCE BUILD:
    - Parsed mode: the latest published build
    - Raw mode: the first previous build with a differing commit, or the build at
      position --previous N (0 is the latest build)

REVISION NOT FOUND:
    When the recorded revision no longer exists in the history (squash,
    force-push), parsed mode reports that nothing new can be listed and exits
    successfully; raw mode exits with code 3.

REQUIREMENTS:
    - Python 3.9+
    - git on PATH
    - GitPython, requests, colorama

EXAMPLES:
    # Commits since the latest build, "hash subject" per line
    ./buildVcsLog.py --build-name my-build --url https://acme.jfrog.io

    # Raw log since the previous build with a different commit
    ./buildVcsLog.py --build-name my-build --raw --format "%h %an %s"

    # Raw log since the build before the latest one
    ./buildVcsLog.py --build-name my-build --raw --previous 1
"""
import re
import sys
import argparse
import logging
from typing import Dict, List, Optional

from buildvcs.cli_args import add_build_arguments, setup_from_args
from buildvcs.color_utils import format_commit_fields, print_info, print_warning
from buildvcs.constants import DEFAULT_LOG_LIMIT, DEFAULT_PRETTY_FORMAT, EXIT_INVALID_ARGS, EXIT_SUCCESS, RevisionRangeError
from buildvcs.git_log import GitLogDetails, OutputPattern
from buildvcs.vcs_log import get_plain_git_log_from_previous_build, parse_git_log_from_last_build

# Matches the default "%H %s" format
DEFAULT_LINE_PATTERN = r"^(?P<revision>[0-9a-fA-F]{7,40}) (?P<subject>.*)$"


def make_printing_pattern(pattern: str, collected: List[Dict[str, Optional[str]]]) -> OutputPattern:
    """Create an output pattern that prints every matched line and collects its named groups."""

    def handle(match: "re.Match[str]") -> None:
        fields = match.groupdict()
        collected.append(fields)
        print(format_commit_fields(fields) if fields else match.group(0))

    return OutputPattern.compile(pattern, handle)


def main() -> int:
    """Main entry point for the build VCS log tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Show git commits made since a previously published build.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_build_arguments(parser)

    parser.add_argument("--limit", type=int, default=DEFAULT_LOG_LIMIT, help=f"Maximum number of commits (default: {DEFAULT_LOG_LIMIT})")
    parser.add_argument("--format", default=DEFAULT_PRETTY_FORMAT, help=f"git log --pretty format (default: '{DEFAULT_PRETTY_FORMAT}')")
    parser.add_argument("--dot-git", default=None, help="Repository root (default: search upward from the current directory)")
    parser.add_argument("--pattern", default=DEFAULT_LINE_PATTERN, help="Regular expression each printed line must match (parsed mode)")
    parser.add_argument("--raw", action="store_true", help="Print the git log output as is")
    parser.add_argument("--previous", type=int, default=None, help="Raw mode: use the build at this position (0 = latest)")

    args = parser.parse_args()

    if args.previous is not None and not args.raw:
        parser.error("--previous requires --raw")

    try:
        re.compile(args.pattern)
    except re.error as e:
        print_warning(f"Invalid --pattern: {e}")
        return EXIT_INVALID_ARGS

    client, build_configuration = setup_from_args(args)
    git_details = GitLogDetails(log_limit=args.limit, pretty_format=args.format, dot_git_path=args.dot_git)

    if args.raw:
        try:
            output = get_plain_git_log_from_previous_build(client, build_configuration, git_details, args.previous)
        except RevisionRangeError as e:
            print_warning(str(e))
            return e.exit_code
        sys.stdout.write(output)
        return EXIT_SUCCESS

    collected: List[Dict[str, Optional[str]]] = []
    result = parse_git_log_from_last_build(client, build_configuration, git_details, [make_printing_pattern(args.pattern, collected)])
    if result.revision_not_found:
        print_warning("The latest build's revision is no longer in the git history; no new commits can be listed")
    else:
        logging.debug("Matched %s commits", len(collected))
        print_info(f"{result.matched_lines} commit(s) since the latest build")
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
