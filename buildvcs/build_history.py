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
"""Walk the published build history to find the reference revision of a repository.

Selection policies:

- Latest build: the most recent published build (``get_latest_build_info``).
- Nth previous build: the build at a position in the runs listing, 0 being the
  latest (``get_previous_build``).
- Previous differing build: the first build, scanning from newest to oldest,
  whose first recorded revision differs from the latest build's first recorded
  revision (``get_previous_builds_commit``).

A missing build or a missing VCS entry for the repository is an expected
absence and yields an empty build / empty revision, which callers treat as
"log the full history". The runs listing is scanned in service order.
"""

import logging

from buildvcs.build_info import BuildConfiguration, BuildInfo, BuildInfoClient, PublishedBuildInfo
from buildvcs.constants import LATEST_BUILD_NUMBER_KEY, ArgumentError, NoDifferingBuildError

logger = logging.getLogger(__name__)


def get_latest_build_info(client: BuildInfoClient, build_configuration: BuildConfiguration) -> BuildInfo:
    """Return the latest published build info, or an empty BuildInfo if the build does not exist."""
    build_name = build_configuration.get_build_name()
    published_build_info, found = client.get_build_info(build_name, LATEST_BUILD_NUMBER_KEY, build_configuration.get_project())
    if not found or published_build_info is None:
        logger.debug("No published build found for %s", build_name)
        return BuildInfo()
    return published_build_info.build_info


def get_previous_build(client: BuildInfoClient, build_configuration: BuildConfiguration, previous_build_pos: int) -> PublishedBuildInfo:
    """Return the build at previous_build_pos in the runs listing (0 is the latest build).

    If the build does not exist, fewer runs than requested were published, or the
    run was deleted between listing and fetching, an empty build is returned.

    Raises:
        ArgumentError: If previous_build_pos is negative (checked before any service call)
    """
    if previous_build_pos < 0:
        raise ArgumentError("invalid input for previous build position. Input must be a non negative number")

    build_name = build_configuration.get_build_name()
    project_key = build_configuration.get_project()

    runs, found = client.get_build_runs(build_name, project_key)
    if not found or runs is None or len(runs.builds_numbers) - 1 < previous_build_pos:
        logger.debug("Build %s has no run at position %s", build_name, previous_build_pos)
        return PublishedBuildInfo()

    run = runs.builds_numbers[previous_build_pos]
    published_build_info, found = client.get_build_info(build_name, run.build_number, project_key)
    if not found or published_build_info is None:
        logger.debug("Build %s/%s was deleted after listing", build_name, run.build_number)
        return PublishedBuildInfo()
    return published_build_info


def get_previous_builds_commit(client: BuildInfoClient, build_configuration: BuildConfiguration) -> PublishedBuildInfo:
    """Return the first previous build whose commit differs from the latest build's commit.

    Only the first recorded revision of each build is compared; the repository
    URL is not taken into account.

    Returns:
        The differing build, or an empty build when the build has no runs or a
        run was deleted while walking

    Raises:
        NoDifferingBuildError: If every listed run records the latest build's commit
    """
    build_name = build_configuration.get_build_name()
    project_key = build_configuration.get_project()

    runs, found = client.get_build_runs(build_name, project_key)
    if not found or runs is None or not runs.builds_numbers:
        logger.debug("No runs found for build %s", build_name)
        return PublishedBuildInfo()

    latest_run = runs.builds_numbers[0]
    latest_build_info, found = client.get_build_info(build_name, latest_run.build_number, project_key)
    if not found or latest_build_info is None:
        return PublishedBuildInfo()
    latest_revision = latest_build_info.build_info.first_revision()

    for run in runs.builds_numbers[1:]:
        published_build_info, found = client.get_build_info(build_name, run.build_number, project_key)
        if not found or published_build_info is None:
            logger.debug("Build %s/%s was deleted after listing", build_name, run.build_number)
            return PublishedBuildInfo()
        if published_build_info.build_info.first_revision() != latest_revision:
            logger.debug("Build %s/%s has a different commit than the latest build", build_name, run.build_number)
            return published_build_info

    raise NoDifferingBuildError(f"no previous build with differing commit found for build {build_name}")


def get_latest_vcs_revision(client: BuildInfoClient, build_configuration: BuildConfiguration, vcs_url: str) -> str:
    """Revision recorded for vcs_url by the latest build, "" if none."""
    return get_latest_build_info(client, build_configuration).matching_revision(vcs_url)


def get_vcs_from_build_at(client: BuildInfoClient, build_configuration: BuildConfiguration, vcs_url: str, previous_build_pos: int) -> str:
    """Revision recorded for vcs_url by the build at previous_build_pos, "" if none."""
    return get_previous_build(client, build_configuration, previous_build_pos).build_info.matching_revision(vcs_url)


def get_vcs_from_previous_build(client: BuildInfoClient, build_configuration: BuildConfiguration, vcs_url: str) -> str:
    """Revision recorded for vcs_url by the previous build with a differing commit, "" if none."""
    return get_previous_builds_commit(client, build_configuration).build_info.matching_revision(vcs_url)
