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
"""Reconcile the local git history with the revisions recorded by published builds.

Entry points:

- parse_git_log_from_last_build: parse the commits made since the latest
  build's revision, line by line, through caller supplied patterns. A revision
  that no longer exists in the history is logged and treated as "nothing new".
- get_plain_git_log_from_previous_build: return the raw git log since the
  previous build with a differing commit (or the build at a given position).
  A revision that no longer exists raises RevisionRangeError.
- get_last_build_link: UI link of the latest published build.
"""

import logging
from typing import List, Optional, Tuple

from buildvcs.build_history import get_latest_vcs_revision, get_previous_build, get_vcs_from_build_at, get_vcs_from_previous_build
from buildvcs.build_info import BuildConfiguration, BuildInfoClient
from buildvcs.build_link import convert_to_ui_link
from buildvcs.constants import GIT_COMMAND, BuildNotFoundError, RevisionRangeError
from buildvcs.git_log import GitLogDetails, GitLogResult, OutputPattern, run_log_with_parser, run_plain_log
from buildvcs.git_utils import get_dot_git, get_vcs_url
from buildvcs.tool_detection import require_git

logger = logging.getLogger(__name__)


def validate_git_and_get_vcs_url(git_details: GitLogDetails) -> Tuple[str, str, str]:
    """Check git is on PATH, locate the repository and read its origin URL.

    Returns:
        Tuple of (git executable, repository root, VCS URL)

    Raises:
        GitNotFoundError: If git is not on PATH
        GitRepositoryError: If the repository cannot be found or read
    """
    git_executable = require_git()
    repo_dir = get_dot_git(git_details.dot_git_path)
    return git_executable, repo_dir, get_vcs_url(repo_dir)


def parse_git_log_from_last_vcs_revision(
    git_details: GitLogDetails, patterns: List[OutputPattern], last_vcs_revision: str, git_executable: str = GIT_COMMAND
) -> GitLogResult:
    """Parse git log from last_vcs_revision to HEAD line by line with the given patterns.

    A missing revision is logged at INFO level and returned as a
    REVISION_NOT_FOUND result instead of raising.

    Raises:
        GitLogError: If git log fails for any other reason
    """
    repo_dir = get_dot_git(git_details.dot_git_path)
    result = run_log_with_parser(repo_dir, git_details, last_vcs_revision, patterns, git_executable)
    if result.revision_not_found:
        # Revision not found in range. Ignore and return.
        logger.info(str(RevisionRangeError(result.revision)))
        return result
    result.raise_for_status()
    return result


def parse_git_log_from_last_build(
    client: BuildInfoClient, build_configuration: BuildConfiguration, git_details: GitLogDetails, patterns: List[OutputPattern]
) -> GitLogResult:
    """Parse the commits made since the revision recorded by the latest build.

    When the latest build recorded no revision for this repository the full
    history (up to the log limit) is parsed.
    """
    git_executable, repo_dir, vcs_url = validate_git_and_get_vcs_url(git_details)

    last_vcs_revision = get_latest_vcs_revision(client, build_configuration, vcs_url)
    logger.debug("Latest build revision for %s: '%s'", vcs_url, last_vcs_revision)

    resolved_details = GitLogDetails(git_details.log_limit, git_details.pretty_format, repo_dir)
    return parse_git_log_from_last_vcs_revision(resolved_details, patterns, last_vcs_revision, git_executable)


def get_plain_git_log_from_previous_build(
    client: BuildInfoClient, build_configuration: BuildConfiguration, git_details: GitLogDetails, previous_build_pos: Optional[int] = None
) -> str:
    """Return git log output since a previous build's revision, as is.

    Args:
        client: Build-info service client
        build_configuration: Build whose history is walked
        git_details: Limit, format and optional repository root
        previous_build_pos: Position in the runs listing (0 is the latest build);
            None selects the first previous build with a differing commit

    Raises:
        RevisionRangeError: If the revision no longer exists in the git history
        GitLogError: If git log fails for any other reason
        ArgumentError: If previous_build_pos is negative
        NoDifferingBuildError: If no previous build with a differing commit exists
    """
    git_executable, repo_dir, vcs_url = validate_git_and_get_vcs_url(git_details)

    if previous_build_pos is None:
        last_vcs_revision = get_vcs_from_previous_build(client, build_configuration, vcs_url)
    else:
        last_vcs_revision = get_vcs_from_build_at(client, build_configuration, vcs_url, previous_build_pos)
    logger.debug("Previous build revision for %s: '%s'", vcs_url, last_vcs_revision)

    result = run_plain_log(repo_dir, git_details, last_vcs_revision, git_executable)
    result.raise_for_status()
    return result.output


def get_last_build_link(client: BuildInfoClient, build_configuration: BuildConfiguration) -> str:
    """Return the UI link of the latest published build.

    Raises:
        BuildNotFoundError: If the build has no published runs
        InvalidApiUrlError: If the build's API URI or start time is malformed
    """
    last_published_build_info = get_previous_build(client, build_configuration, 0)
    if last_published_build_info.is_empty():
        raise BuildNotFoundError(f"build '{build_configuration.get_build_name()}' was not found")
    return convert_to_ui_link(last_published_build_info)
