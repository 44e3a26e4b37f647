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
"""Turn a published build's API URI into its platform UI link."""

import re
import logging
from datetime import datetime, timedelta, timezone

from buildvcs.build_info import PublishedBuildInfo
from buildvcs.constants import InvalidApiUrlError

logger = logging.getLogger(__name__)

# https://<host>/artifactory/api/build/<name>/<number>[?query]
API_URL_RE = re.compile(r"(https://.+?)/artifactory/api/build/([^/]+)/([^?]+)(\?.+)?")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Artifactory records "2024-01-01T00:00:00.000+0000"; "Z" and "+00:00" are accepted too
_ISO_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


def parse_iso_timestamp(timestamp: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (naive input is taken as UTC).

    Raises:
        InvalidApiUrlError: If the timestamp cannot be parsed
    """
    value = timestamp.strip()
    for fmt in _ISO_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidApiUrlError(f"invalid build start timestamp: '{timestamp}'") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_epoch_millis(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def build_ui_link(api_url: str, started: str) -> str:
    """Build the UI evidence link for a build API URL and its start timestamp.

    Example:
        >>> build_ui_link("https://x.jfrog.io/artifactory/api/build/myBuild/17?project=p", "2024-01-01T00:00:00.000Z")
        'https://x.jfrog.io/ui/builds/myBuild/17/1704067200000/Evidence?project=p'

    Raises:
        InvalidApiUrlError: If the URL does not have the build API shape or the timestamp is invalid
    """
    epoch_millis = to_epoch_millis(parse_iso_timestamp(started))

    match = API_URL_RE.search(api_url)
    if not match:
        raise InvalidApiUrlError("invalid API URL format")

    base_url, build_name, build_number, query_params = match.groups()
    ui_url = "/".join([base_url, "ui/builds", build_name, build_number, str(epoch_millis), "Evidence" + (query_params or "")])
    logger.debug("UI link for %s: %s", api_url, ui_url)
    return ui_url


def convert_to_ui_link(published_build_info: PublishedBuildInfo) -> str:
    return build_ui_link(published_build_info.uri, published_build_info.build_info.started)
