#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Tests for buildvcs.build_info module"""
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock
import pytest
import requests

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from buildvcs.build_info import (
    BuildConfiguration,
    BuildInfo,
    BuildInfoClient,
    BuildRun,
    BuildRuns,
    PublishedBuildInfo,
    ServerDetails,
)
from buildvcs.constants import ArgumentError, BuildInfoServiceError

PUBLISHED_JSON = {
    "uri": "https://acme.jfrog.io/artifactory/api/build/my-build/17",
    "buildInfo": {
        "name": "my-build",
        "number": "17",
        "started": "2024-01-01T00:00:00.000+0000",
        "vcs": [
            {"url": "https://github.com/acme/widget.git", "revision": "abc123", "branch": "main", "message": "Fix"},
            {"url": "https://github.com/acme/other.git", "revision": "def456"},
        ],
    },
}

RUNS_JSON = {
    "uri": "https://acme.jfrog.io/artifactory/api/build/my-build",
    "buildsNumbers": [{"uri": "/17", "started": "2024-01-02T00:00:00.000+0000"}, {"uri": "/16", "started": "2024-01-01T00:00:00.000+0000"}],
}


def _response(status_code: int, payload: Optional[Dict[str, Any]] = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


def _client(*responses: MagicMock, **server: str) -> BuildInfoClient:
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = list(responses)
    return BuildInfoClient(ServerDetails(url=server.pop("url", "https://acme.jfrog.io"), **server), session=session)


class TestDataModel:
    """Test parsing of service payloads."""

    def test_published_build_info_from_dict(self) -> None:
        published = PublishedBuildInfo.from_dict(PUBLISHED_JSON)

        assert published.uri.endswith("/my-build/17")
        assert published.build_info.number == "17"
        assert published.build_info.vcs_list[0].branch == "main"
        assert published.build_info.first_revision() == "abc123"
        assert published.build_info.matching_revision("https://github.com/acme/other.git") == "def456"
        assert published.build_info.matching_revision("https://example.com/none.git") == ""
        assert not published.is_empty()

    def test_missing_vcs_list(self) -> None:
        build_info = BuildInfo.from_dict({"name": "b", "number": 3})
        assert build_info.number == "3"
        assert build_info.vcs_list == []
        assert build_info.first_revision() == ""

    def test_empty_published_build(self) -> None:
        assert PublishedBuildInfo().is_empty()

    def test_build_runs_keep_service_order(self) -> None:
        runs = BuildRuns.from_dict(RUNS_JSON)
        assert [run.build_number for run in runs.builds_numbers] == ["17", "16"]

    def test_build_number_strips_one_slash(self) -> None:
        assert BuildRun(uri="/42").build_number == "42"
        assert BuildRun(uri="42").build_number == "42"


class TestConfiguration:
    """Test build and server configuration."""

    def test_build_configuration_prefers_explicit_values(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("JFROG_CLI_BUILD_NAME", "env-build")
        monkeypatch.setenv("JFROG_CLI_BUILD_PROJECT", "env-proj")
        config = BuildConfiguration(build_name="cli-build", project="cli-proj")
        assert config.get_build_name() == "cli-build"
        assert config.get_project() == "cli-proj"
        assert BuildConfiguration().get_project() == "env-proj"

    def test_server_details_from_env(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("JFROG_URL", "https://acme.jfrog.io/")
        monkeypatch.setenv("JFROG_ACCESS_TOKEN", "token")
        details = ServerDetails.from_env()
        assert details.access_token == "token"
        assert details.artifactory_url == "https://acme.jfrog.io/artifactory"

    def test_server_details_requires_url(self, monkeypatch: Any) -> None:
        monkeypatch.delenv("JFROG_URL", raising=False)
        with pytest.raises(ArgumentError):
            ServerDetails.from_env()

    def test_artifactory_url_not_duplicated(self) -> None:
        assert ServerDetails(url="https://acme.jfrog.io/artifactory").artifactory_url == "https://acme.jfrog.io/artifactory"


class TestBuildInfoClient:
    """Test the REST client against a mocked session."""

    def test_access_token_header(self) -> None:
        client = _client(access_token="secret")
        assert client.session.headers["Authorization"] == "Bearer secret"

    def test_basic_auth(self) -> None:
        client = _client(user="admin", password="pw")
        assert client.session.auth == ("admin", "pw")

    def test_get_build_runs(self) -> None:
        client = _client(_response(200, RUNS_JSON))

        runs, found = client.get_build_runs("my build", "proj")

        assert found
        assert runs is not None
        assert [run.uri for run in runs.builds_numbers] == ["/17", "/16"]
        url = client.session.get.call_args.args[0]
        assert url == "https://acme.jfrog.io/artifactory/api/build/my%20build"
        assert client.session.get.call_args.kwargs["params"] == {"project": "proj"}

    def test_get_build_runs_not_found(self) -> None:
        client = _client(_response(404))
        assert client.get_build_runs("my-build") == (None, False)

    def test_get_build_info(self) -> None:
        client = _client(_response(200, PUBLISHED_JSON))

        published, found = client.get_build_info("my-build", "17")

        assert found
        assert published is not None
        assert published.build_info.first_revision() == "abc123"
        assert client.session.get.call_args.args[0].endswith("/api/build/my-build/17")
        assert client.session.get.call_args.kwargs["params"] is None

    def test_latest_resolves_through_runs(self) -> None:
        client = _client(_response(200, RUNS_JSON), _response(200, PUBLISHED_JSON))

        published, found = client.get_build_info("my-build", "LATEST")

        assert found
        assert client.session.get.call_args.args[0].endswith("/api/build/my-build/17")

    def test_latest_without_runs(self) -> None:
        client = _client(_response(200, {"uri": "x", "buildsNumbers": []}))
        assert client.get_build_info("my-build", "LATEST") == (None, False)

    def test_http_error_raises(self) -> None:
        client = _client(_response(500))
        with pytest.raises(BuildInfoServiceError):
            client.get_build_info("my-build", "17")

    def test_connection_error_raises(self) -> None:
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        client = BuildInfoClient(ServerDetails(url="https://acme.jfrog.io"), session=session)

        with pytest.raises(BuildInfoServiceError, match="refused"):
            client.get_build_runs("my-build")

    def test_invalid_json_raises(self) -> None:
        response = _response(200)
        response.json.side_effect = ValueError("no json")
        client = _client(response)

        with pytest.raises(BuildInfoServiceError):
            client.get_build_runs("my-build")
