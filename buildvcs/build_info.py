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
"""Build-info data model and the Artifactory build REST client.

The client exposes the two calls the build history walker needs:

    get_build_runs(build_name, project_key)           -> (BuildRuns | None, found)
    get_build_info(build_name, build_number, project) -> (PublishedBuildInfo | None, found)

A 404 from the service is reported as ``found=False``; every other transport or
HTTP failure raises BuildInfoServiceError. Build runs are returned in the order
the service lists them (newest first) and are never re-sorted.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from buildvcs.constants import (
    ARTIFACTORY_CONTEXT,
    DEFAULT_HTTP_TIMEOUT,
    ENV_ACCESS_TOKEN,
    ENV_BUILD_NAME,
    ENV_BUILD_PROJECT,
    ENV_PASSWORD,
    ENV_SERVER_URL,
    ENV_USER,
    LATEST_BUILD_NUMBER_KEY,
    ArgumentError,
    BuildInfoServiceError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Data model
# =============================================================================


@dataclass
class Vcs:
    """One VCS binding recorded in a build."""

    url: str = ""
    revision: str = ""
    branch: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vcs":
        return cls(
            url=data.get("url", ""),
            revision=data.get("revision", ""),
            branch=data.get("branch", ""),
            message=data.get("message", ""),
        )


@dataclass
class BuildInfo:
    """Recorded metadata of one build run."""

    name: str = ""
    number: str = ""
    started: str = ""
    project: str = ""
    vcs_list: List[Vcs] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildInfo":
        return cls(
            name=data.get("name", ""),
            number=str(data.get("number", "")),
            started=data.get("started", ""),
            project=data.get("project", ""),
            vcs_list=[Vcs.from_dict(vcs) for vcs in data.get("vcs") or []],
        )

    def first_revision(self) -> str:
        """Revision of the first recorded VCS entry, "" when none is recorded."""
        return self.vcs_list[0].revision if self.vcs_list else ""

    def matching_revision(self, vcs_url: str) -> str:
        """Revision of the first VCS entry recorded for vcs_url, "" when none matches."""
        for vcs in self.vcs_list:
            if vcs.url == vcs_url:
                return vcs.revision
        return ""


@dataclass
class PublishedBuildInfo:
    """A build as returned by the service: its API URI plus the recorded build info."""

    uri: str = ""
    build_info: BuildInfo = field(default_factory=BuildInfo)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PublishedBuildInfo":
        return cls(uri=data.get("uri", ""), build_info=BuildInfo.from_dict(data.get("buildInfo") or {}))

    def is_empty(self) -> bool:
        return not self.uri and not self.build_info.name and not self.build_info.number


@dataclass
class BuildRun:
    """Entry of the build runs listing."""

    uri: str
    started: str = ""

    @property
    def build_number(self) -> str:
        """Build number encoded in the run URI ("/17" -> "17")."""
        return self.uri[1:] if self.uri.startswith("/") else self.uri


@dataclass
class BuildRuns:
    """Build runs of one build name, newest first as listed by the service."""

    uri: str = ""
    builds_numbers: List[BuildRun] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildRuns":
        runs = [BuildRun(uri=run.get("uri", ""), started=run.get("started", "")) for run in data.get("buildsNumbers") or []]
        return cls(uri=data.get("uri", ""), builds_numbers=runs)


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class BuildConfiguration:
    """Identity of the build whose history is walked."""

    build_name: str = ""
    project: str = ""

    def get_build_name(self) -> str:
        """Return the build name, falling back to the JFROG_CLI_BUILD_NAME environment variable.

        Raises:
            ArgumentError: If no build name is configured
        """
        build_name = self.build_name or os.environ.get(ENV_BUILD_NAME, "")
        if not build_name:
            raise ArgumentError(f"a build name must be provided in order to collect the project's git log (or set {ENV_BUILD_NAME})")
        return build_name

    def get_project(self) -> str:
        return self.project or os.environ.get(ENV_BUILD_PROJECT, "")


@dataclass
class ServerDetails:
    """Connection details of the build-info service."""

    url: str
    access_token: str = ""
    user: str = ""
    password: str = ""

    @classmethod
    def from_env(cls, url: str = "", access_token: str = "", user: str = "", password: str = "") -> "ServerDetails":
        """Build server details from explicit values, falling back to JFROG_* environment variables."""
        details = cls(
            url=url or os.environ.get(ENV_SERVER_URL, ""),
            access_token=access_token or os.environ.get(ENV_ACCESS_TOKEN, ""),
            user=user or os.environ.get(ENV_USER, ""),
            password=password or os.environ.get(ENV_PASSWORD, ""),
        )
        if not details.url:
            raise ArgumentError(f"a server URL must be provided (or set {ENV_SERVER_URL})")
        return details

    @property
    def artifactory_url(self) -> str:
        """REST root of Artifactory, e.g. https://x.jfrog.io/artifactory."""
        base = self.url.rstrip("/")
        if base.endswith("/" + ARTIFACTORY_CONTEXT):
            return base
        return f"{base}/{ARTIFACTORY_CONTEXT}"


# =============================================================================
# Client
# =============================================================================


class BuildInfoClient:
    """Minimal Artifactory build-info REST client."""

    def __init__(self, server_details: ServerDetails, timeout: int = DEFAULT_HTTP_TIMEOUT, session: Optional[requests.Session] = None):
        self.server_details = server_details
        self.timeout = timeout
        self.session = session or requests.Session()
        if server_details.access_token:
            self.session.headers["Authorization"] = f"Bearer {server_details.access_token}"
        elif server_details.user:
            self.session.auth = (server_details.user, server_details.password)

    def _build_api_url(self, *parts: str) -> str:
        quoted = "/".join(quote(part, safe="") for part in parts)
        return f"{self.server_details.artifactory_url}/api/build/{quoted}"

    def _get_json(self, url: str, project_key: str) -> Optional[Dict[str, Any]]:
        """GET url and decode the JSON body; None when the service answers 404."""
        params = {"project": project_key} if project_key else None
        logger.debug("GET %s (project=%s)", url, project_key or "-")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise BuildInfoServiceError(f"Failed to reach build-info service at {url}: {e}") from e

        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise BuildInfoServiceError(f"Build-info service request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise BuildInfoServiceError(f"Invalid JSON returned from {url}: {e}") from e
        if not isinstance(data, dict):
            raise BuildInfoServiceError(f"Unexpected response returned from {url}")
        return data

    def get_build_runs(self, build_name: str, project_key: str = "") -> Tuple[Optional[BuildRuns], bool]:
        """List the runs of a build, newest first."""
        data = self._get_json(self._build_api_url(build_name), project_key)
        if data is None:
            return None, False
        return BuildRuns.from_dict(data), True

    def get_build_info(self, build_name: str, build_number: str, project_key: str = "") -> Tuple[Optional[PublishedBuildInfo], bool]:
        """Fetch one published build; build_number may be LATEST."""
        if build_number == LATEST_BUILD_NUMBER_KEY:
            runs, found = self.get_build_runs(build_name, project_key)
            if not found or runs is None or not runs.builds_numbers:
                return None, False
            build_number = runs.builds_numbers[0].build_number
            logger.debug("Resolved %s build of %s to %s", LATEST_BUILD_NUMBER_KEY, build_name, build_number)

        data = self._get_json(self._build_api_url(build_name, build_number), project_key)
        if data is None:
            return None, False
        return PublishedBuildInfo.from_dict(data), True


def create_build_info_client(server_details: ServerDetails, timeout: int = DEFAULT_HTTP_TIMEOUT) -> BuildInfoClient:
    return BuildInfoClient(server_details, timeout=timeout)
