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
"""Revision-anchored git log execution.

Runs ``git log --pretty=<FORMAT> -<N> [<REVISION>..]`` inside a repository and
classifies the outcome:

- OK: git succeeded, output is available (raw mode) or was dispatched line by
  line to the caller's patterns (parsed mode).
- REVISION_NOT_FOUND: git reported ``fatal: Invalid revision range <rev>..``,
  meaning the lower bound of the range was rewritten out of the history
  (squash, rebase, force-push). This is an expected condition, not a fault.
- FAILED: any other failure (non-zero exit, git could not be started).

The repository root is passed to git as its working directory; the process
working directory is never changed.
"""

import re
import logging
import tempfile
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Union

from buildvcs.constants import (
    DEFAULT_LOG_LIMIT,
    DEFAULT_PRETTY_FORMAT,
    GIT_COMMAND,
    REVISION_RANGE_ERR_PATTERN,
    REVISION_RANGE_ERR_PREFIX,
    ArgumentError,
    GitLogError,
    RevisionRangeError,
)

logger = logging.getLogger(__name__)

GIT_LOG_FAILED_MESSAGE = "failed executing git log command"


@dataclass(frozen=True)
class GitLogDetails:
    """Caller supplied git log configuration.

    Attributes:
        log_limit: Maximum number of commits to return (must be positive)
        pretty_format: Value passed to ``git log --pretty=``
        dot_git_path: Optional repository root; searched upward from the current directory when unset
    """

    log_limit: int = DEFAULT_LOG_LIMIT
    pretty_format: str = DEFAULT_PRETTY_FORMAT
    dot_git_path: Optional[str] = None


class QueryStatus(Enum):
    """Outcome of a git log invocation."""

    OK = "ok"
    REVISION_NOT_FOUND = "revision_not_found"
    FAILED = "failed"


@dataclass
class GitLogResult:
    """Result of one git log invocation.

    Callers branch on ``status`` or call ``raise_for_status()`` to turn the
    failure variants into exceptions.
    """

    status: QueryStatus
    revision: str
    output: str = ""
    error_output: str = ""
    message: str = ""
    matched_lines: int = 0

    @property
    def ok(self) -> bool:
        return self.status is QueryStatus.OK

    @property
    def revision_not_found(self) -> bool:
        return self.status is QueryStatus.REVISION_NOT_FOUND

    def raise_for_status(self) -> None:
        """Raise RevisionRangeError or GitLogError unless the invocation succeeded."""
        if self.status is QueryStatus.REVISION_NOT_FOUND:
            raise RevisionRangeError(self.revision)
        if self.status is QueryStatus.FAILED:
            raise GitLogError(self.message or GIT_LOG_FAILED_MESSAGE)


@dataclass
class OutputPattern:
    """A line matcher and the handler called for every matching line."""

    regexp: re.Pattern[str]
    handler: Callable[[re.Match[str]], object]

    @classmethod
    def compile(cls, pattern: Union[str, re.Pattern[str]], handler: Callable[[re.Match[str]], object]) -> "OutputPattern":
        return cls(regexp=re.compile(pattern), handler=handler)


class LogCommand:
    """Builds the git log command line for a revision range."""

    def __init__(self, log_limit: int, pretty_format: str, last_vcs_revision: str = "", git_executable: str = GIT_COMMAND):
        validate_log_limit(log_limit)
        self.log_limit = log_limit
        self.pretty_format = pretty_format
        self.last_vcs_revision = last_vcs_revision
        self.git_executable = git_executable

    @classmethod
    def from_details(cls, git_details: GitLogDetails, last_vcs_revision: str, git_executable: str = GIT_COMMAND) -> "LogCommand":
        return cls(git_details.log_limit, git_details.pretty_format, last_vcs_revision, git_executable)

    def get_cmd(self) -> List[str]:
        """Return the argument vector; an empty revision queries the full history."""
        cmd = [self.git_executable, "log", f"--pretty={self.pretty_format}", f"-{self.log_limit}"]
        if self.last_vcs_revision:
            cmd.append(f"{self.last_vcs_revision}..")
        return cmd

    def __str__(self) -> str:
        return " ".join(self.get_cmd())


def validate_log_limit(log_limit: int) -> None:
    """Raise ArgumentError unless log_limit is a positive integer."""
    if isinstance(log_limit, bool) or not isinstance(log_limit, int) or log_limit <= 0:
        raise ArgumentError(f"invalid git log limit: {log_limit!r}. Limit must be a positive integer")


def create_revision_range_pattern() -> re.Pattern[str]:
    """Compile the pattern matching git's missing range diagnostic."""
    return re.compile(REVISION_RANGE_ERR_PATTERN)


def _iter_lines(stream: Iterable[str]) -> Iterator[str]:
    for raw_line in stream:
        yield raw_line.rstrip("\r\n")


def dispatch_lines(lines: Iterable[str], patterns: List[OutputPattern]) -> int:
    """Test each line against every pattern and call the handler of each match.

    Returns:
        Number of lines that matched at least one pattern
    """
    matched_lines = 0
    for line in lines:
        matched = False
        for pattern in patterns:
            match = pattern.regexp.search(line)
            if match:
                pattern.handler(match)
                matched = True
        if matched:
            matched_lines += 1
    return matched_lines


def _find_revision_range_error(error_output: str) -> Optional[re.Match[str]]:
    revision_range_exp = create_revision_range_pattern()
    for line in error_output.splitlines():
        match = revision_range_exp.search(line)
        if match:
            return match
    return None


def run_log_with_parser(
    repo_dir: str, git_details: GitLogDetails, last_vcs_revision: str, patterns: List[OutputPattern], git_executable: str = GIT_COMMAND
) -> GitLogResult:
    """Run git log and dispatch each output line to the matching patterns as it arrives.

    Args:
        repo_dir: Repository root git runs in
        git_details: Limit and format of the query
        last_vcs_revision: Exclusive lower bound of the range, "" for the full history
        patterns: Line patterns with their handlers
        git_executable: git command or path

    Returns:
        GitLogResult; output is not retained in this mode

    Raises:
        ArgumentError: If the log limit is invalid
        Exception: Whatever a pattern handler raises is propagated unchanged
    """
    log_cmd = LogCommand.from_details(git_details, last_vcs_revision, git_executable)
    logger.debug("Running '%s' in %s", log_cmd, repo_dir)

    try:
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as err_file:
            with subprocess.Popen(
                log_cmd.get_cmd(), cwd=repo_dir, stdout=subprocess.PIPE, stderr=err_file, text=True, encoding="utf-8", errors="replace"
            ) as proc:
                assert proc.stdout is not None  # For type checker
                matched_lines = dispatch_lines(_iter_lines(proc.stdout), patterns)
                return_code = proc.wait()
            err_file.seek(0)
            error_output = err_file.read()
    except OSError as e:
        return GitLogResult(QueryStatus.FAILED, last_vcs_revision, message=f"failed running git log in {repo_dir}: {e}")

    range_match = _find_revision_range_error(error_output)
    if range_match:
        revision = last_vcs_revision or range_match.group(1)
        return GitLogResult(QueryStatus.REVISION_NOT_FOUND, revision, error_output=error_output, message=range_match.group(0))
    if return_code != 0:
        logger.debug("git log exited with %s: %s", return_code, error_output.strip())
        return GitLogResult(
            QueryStatus.FAILED, last_vcs_revision, error_output=error_output, message=GIT_LOG_FAILED_MESSAGE, matched_lines=matched_lines
        )

    logger.debug("git log matched %s lines", matched_lines)
    return GitLogResult(QueryStatus.OK, last_vcs_revision, error_output=error_output, matched_lines=matched_lines)


def run_plain_log(repo_dir: str, git_details: GitLogDetails, last_vcs_revision: str, git_executable: str = GIT_COMMAND) -> GitLogResult:
    """Run git log and capture its output verbatim.

    Args:
        repo_dir: Repository root git runs in
        git_details: Limit and format of the query
        last_vcs_revision: Exclusive lower bound of the range, "" for the full history
        git_executable: git command or path

    Returns:
        GitLogResult with the raw stdout in ``output`` when successful

    Raises:
        ArgumentError: If the log limit is invalid
    """
    log_cmd = LogCommand.from_details(git_details, last_vcs_revision, git_executable)
    logger.debug("Running '%s' in %s", log_cmd, repo_dir)

    try:
        result = subprocess.run(log_cmd.get_cmd(), cwd=repo_dir, capture_output=True, text=True, encoding="utf-8", errors="replace", check=False)
    except OSError as e:
        return GitLogResult(QueryStatus.FAILED, last_vcs_revision, message=f"failed running git log in {repo_dir}: {e}")

    if result.returncode != 0:
        error_output = result.stderr
        if error_output.strip().startswith(REVISION_RANGE_ERR_PREFIX):
            return GitLogResult(QueryStatus.REVISION_NOT_FOUND, last_vcs_revision, error_output=error_output, message=error_output.strip())
        message = error_output.strip() or f"git log exited with code {result.returncode}"
        return GitLogResult(QueryStatus.FAILED, last_vcs_revision, output=result.stdout, error_output=error_output, message=message)

    return GitLogResult(QueryStatus.OK, last_vcs_revision, output=result.stdout, error_output=result.stderr)
