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
"""External tool detection for build-vcs.

The only external tool build-vcs drives is git. Detection results are cached
within the Python process session to avoid repeated subprocess calls.

CLI Interface:
    python3 -m buildvcs.tool_detection --find-git    # Output git path, exit 0/1
    python3 -m buildvcs.tool_detection --verbose     # Enable debug logging
"""

import sys
import shutil
import logging
import argparse
import subprocess
from typing import Optional, Dict, List
from dataclasses import dataclass

from buildvcs.constants import GIT_COMMAND, GitNotFoundError

logger = logging.getLogger(__name__)

# Session-level cache for tool detection results (keyed by command name)
_tool_cache: Dict[str, "ToolInfo"] = {}


@dataclass
class ToolInfo:
    """Information about a detected external tool.

    Attributes:
        command: Absolute path of the executable as resolved on PATH
        version: Raw version string as reported by tool (e.g., "git version 2.43.0")
        error_message: Reason the tool was not found
    """

    command: Optional[str]
    version: Optional[str]
    error_message: Optional[str] = None

    def is_found(self) -> bool:
        """Check if tool was found."""
        return self.command is not None


def clear_cache() -> None:
    """Clear the tool detection cache.

    Useful for testing or when PATH changes during process lifetime.
    """
    _tool_cache.clear()
    logger.debug("Tool detection cache cleared")


def _try_command(cmd_parts: List[str], timeout: int = 5) -> Optional[str]:
    """Run a command with --version and return its first output line, or None on failure."""
    try:
        result = subprocess.run(cmd_parts + ["--version"], capture_output=True, text=True, check=True, timeout=timeout)
    except (subprocess.CalledProcessError, OSError, subprocess.TimeoutExpired):
        return None
    lines = result.stdout.strip().split("\n")
    return lines[0].strip()


def find_git(command: str = GIT_COMMAND) -> ToolInfo:
    """Find the git executable on PATH.

    Args:
        command: Command name to resolve (default: "git")

    Returns:
        ToolInfo with resolved path and version if found, or empty ToolInfo with error_message
    """
    if command in _tool_cache:
        return _tool_cache[command]

    path = shutil.which(command)
    if path is None:
        logger.debug("%s not found in PATH", command)
        tool_info = ToolInfo(command=None, version=None, error_message=f"{command} not in PATH")
    else:
        version = _try_command([path])
        logger.debug("Found %s at %s (%s)", command, path, version)
        tool_info = ToolInfo(command=path, version=version)

    _tool_cache[command] = tool_info
    return tool_info


def require_git(command: str = GIT_COMMAND) -> str:
    """Return the resolved git executable path.

    Raises:
        GitNotFoundError: If git cannot be resolved on PATH
    """
    tool_info = find_git(command)
    if not tool_info.is_found():
        raise GitNotFoundError(f"executable file not found in $PATH: {tool_info.error_message}")
    assert tool_info.command is not None  # For type checker
    return tool_info.command


def main() -> int:
    """Main entry point for CLI usage.

    Returns:
        Exit code: 0 if git found, 1 if not found
    """
    parser = argparse.ArgumentParser(description="Detect external tools for build-vcs", formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--find-git", action="store_true", help="Find git executable")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", stream=sys.stderr)
    else:
        logging.basicConfig(level=logging.WARNING)

    if args.find_git:
        tool_info = find_git()
        if tool_info.is_found():
            print(tool_info.command)
            return 0
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
