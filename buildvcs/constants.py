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
"""Shared constants for build-vcs tools.

This module provides centralized constants used across the build-vcs library
and command line tools, plus the exception hierarchy every tool maps to an
exit code at its main entry point.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_REVISION_NOT_FOUND = 3
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Git Log Constants
# =============================================================================

GIT_COMMAND = "git"  # History query tool looked up on PATH
DOT_GIT = ".git"  # Marker searched upward to find the repository root
DEFAULT_LOG_LIMIT = 100  # Maximum number of commits returned by git log
DEFAULT_PRETTY_FORMAT = "%H %s"  # Default --pretty format (hash + subject)
DEFAULT_REMOTE_NAME = "origin"  # Remote whose URL is matched against build-info VCS entries

# Diagnostic printed by git when the lower bound of a range no longer exists
REVISION_RANGE_ERR_PREFIX = "fatal: Invalid revision range"
REVISION_RANGE_ERR_PATTERN = REVISION_RANGE_ERR_PREFIX + r" ([a-fA-F0-9]+)\.\."

# =============================================================================
# Build-Info Service Constants
# =============================================================================

LATEST_BUILD_NUMBER_KEY = "LATEST"  # Pseudo build number resolved to the newest run
DEFAULT_HTTP_TIMEOUT = 30  # Seconds per build-info REST request
ARTIFACTORY_CONTEXT = "artifactory"  # Path segment of the Artifactory REST root

# Environment variables used when values are not given explicitly
ENV_BUILD_NAME = "JFROG_CLI_BUILD_NAME"
ENV_BUILD_NUMBER = "JFROG_CLI_BUILD_NUMBER"
ENV_BUILD_PROJECT = "JFROG_CLI_BUILD_PROJECT"
ENV_SERVER_URL = "JFROG_URL"
ENV_ACCESS_TOKEN = "JFROG_ACCESS_TOKEN"
ENV_USER = "JFROG_USER"
ENV_PASSWORD = "JFROG_PASSWORD"

# =============================================================================
# Exception Classes
# =============================================================================


class BuildVcsError(Exception):
    """Base exception for all build-vcs errors.

    All build-vcs exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(BuildVcsError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ArgumentError(ValidationError):
    """Raised when arguments or configuration values are invalid."""


class GitRepositoryError(ValidationError):
    """Raised when the local git repository cannot be found or read."""


# External tool errors
class ExternalToolError(BuildVcsError):
    """Raised when external tools (git) fail."""


class GitNotFoundError(ExternalToolError):
    """Raised when git is not available on PATH."""


class GitLogError(ExternalToolError):
    """Raised when git log fails for a reason other than a missing revision."""


class RevisionRangeError(BuildVcsError):
    """Raised when a build's recorded revision no longer exists in the git history.

    This usually means the history was rewritten (squash, rebase, force-push)
    after the build was published. Callers that only need "nothing new" semantics
    can catch this error and continue.
    """

    def __init__(self, revision: str):
        super().__init__(
            f"Revision: '{revision}' that was fetched from latest build info does not exist in the git revision range.",
            EXIT_REVISION_NOT_FOUND,
        )
        self.revision = revision


# Build-info service errors (EXIT_RUNTIME_ERROR)
class BuildInfoServiceError(BuildVcsError):
    """Raised when the build-info service request fails."""


class BuildNotFoundError(BuildInfoServiceError):
    """Raised when a build that must exist was not found."""


class NoDifferingBuildError(BuildInfoServiceError):
    """Raised when no previous build with a different commit exists."""


class InvalidApiUrlError(BuildVcsError):
    """Raised when a build API URL or timestamp cannot be turned into a UI link."""
