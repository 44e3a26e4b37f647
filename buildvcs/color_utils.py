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
"""Terminal colors for the build-vcs command line tools.

Status lines go to stderr so that log output on stdout stays pipeable; only
the commit listing and the build link are written to stdout.
"""

import os
import sys
from typing import Dict, Optional, TextIO, Tuple

from colorama import Fore, Style, init

# Keep escape codes when stdout is piped; should_use_color() decides per run
init(autoreset=False, strip=False)


class Colors:
    """Escape codes, cleared in place by disable()."""

    RED = Fore.RED
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    CYAN = Fore.CYAN
    MAGENTA = Fore.MAGENTA

    RESET = Style.RESET_ALL

    @staticmethod
    def disable() -> None:
        for attr in dir(Colors):
            if attr.isupper():
                setattr(Colors, attr, "")


# level -> (Colors attribute, label, writes to stderr)
_LEVELS: Dict[str, Tuple[str, str, bool]] = {
    "error": ("RED", "Error", True),
    "warning": ("YELLOW", "Warning", True),
    "success": ("GREEN", "Success", False),
    "info": ("CYAN", "", False),
}


def colored(text: str, color: str = "", style: str = "") -> str:
    """Wrap text in the given escape codes, or return it unchanged when both are empty."""
    if not color and not style:
        return text
    return f"{style}{color}{text}{Colors.RESET}"


def _emit(level: str, text: str, file: Optional[TextIO], prefix: bool) -> None:
    color_attr, label, to_stderr = _LEVELS[level]
    if file is None:
        file = sys.stderr if to_stderr else sys.stdout
    if prefix and label:
        text = f"{label}: {text}"
    print(colored(text, getattr(Colors, color_attr)), file=file)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    _emit("error", text, file, prefix)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    _emit("warning", text, file, prefix)


def print_success(text: str, file: Optional[TextIO] = None, prefix: bool = False) -> None:
    _emit("success", text, file, prefix)


def print_info(text: str, file: Optional[TextIO] = None) -> None:
    _emit("info", text, file, False)


def should_use_color(force_color: bool = False, no_color: bool = False) -> bool:
    """Decide whether escape codes are written.

    no_color beats force_color; otherwise color is used only on a terminal and
    only when NO_COLOR (https://no-color.org) is unset.
    """
    if no_color or force_color:
        return not no_color
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")


def format_commit_fields(fields: Dict[str, Optional[str]]) -> str:
    """Format the named groups of a matched log line as key=value pairs.

    The first group is highlighted, which for the usual "%H %s" style
    patterns is the commit hash. Unmatched groups (None) are left out.
    """
    rendered = []
    for index, (key, value) in enumerate(fields.items()):
        if value is None:
            continue
        pair = f"{key}={value}"
        rendered.append(colored(pair, Colors.MAGENTA) if index == 0 else pair)
    return " ".join(rendered)
