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
"""Pytest configuration and shared base fixtures for build-vcs tests.

Fixtures:
- temp_dir: isolated temporary directory
- mock_git_repo: real git repository with three commits and an origin remote
- fake_git: factory writing a fake git executable with scripted output and exit code
- fake_build_client: in-memory build-info service (FakeBuildInfoClient)
"""

import os
import sys
import stat
import tempfile
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional, Tuple
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from buildvcs.build_info import BuildInfo, BuildRun, BuildRuns, PublishedBuildInfo, Vcs
from buildvcs.tool_detection import clear_cache

ORIGIN_URL = "https://github.com/acme/widget.git"


class FakeBuildInfoClient:
    """In-memory stand-in for BuildInfoClient.

    Builds are registered newest first, mirroring the service ordering.
    Every call is recorded in ``calls`` as (method, build_name, build_number, project_key).
    """

    def __init__(self, build_name: str = "my-build") -> None:
        self.build_name = build_name
        self.builds: List[PublishedBuildInfo] = []
        self.deleted: set = set()
        self.calls: List[Tuple[str, str, str, str]] = []
        self.build_exists = True

    def add_build(self, number: str, vcs: List[Tuple[str, str]], started: str = "2024-01-01T00:00:00.000+0000") -> PublishedBuildInfo:
        """Register a build older than every build added so far."""
        published = PublishedBuildInfo(
            uri=f"https://acme.jfrog.io/artifactory/api/build/{self.build_name}/{number}",
            build_info=BuildInfo(name=self.build_name, number=number, started=started, vcs_list=[Vcs(url=url, revision=rev) for url, rev in vcs]),
        )
        self.builds.append(published)
        return published

    def get_build_runs(self, build_name: str, project_key: str = "") -> Tuple[Optional[BuildRuns], bool]:
        self.calls.append(("get_build_runs", build_name, "", project_key))
        if not self.build_exists:
            return None, False
        runs = [BuildRun(uri=f"/{build.build_info.number}", started=build.build_info.started) for build in self.builds]
        return BuildRuns(uri=f"https://acme.jfrog.io/artifactory/api/build/{build_name}", builds_numbers=runs), True

    def get_build_info(self, build_name: str, build_number: str, project_key: str = "") -> Tuple[Optional[PublishedBuildInfo], bool]:
        self.calls.append(("get_build_info", build_name, build_number, project_key))
        if not self.build_exists or not self.builds:
            return None, False
        if build_number == "LATEST":
            build_number = self.builds[0].build_info.number
        if build_number in self.deleted:
            return None, False
        for build in self.builds:
            if build.build_info.number == build_number:
                return build, True
        return None, False


@pytest.fixture(autouse=True)
def clear_tool_cache() -> Generator[None, None, None]:
    """Reset git detection between tests so PATH changes are honored."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="buildvcs_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


def _git(repo_dir: str, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=repo_dir, check=True, capture_output=True, text=True)
    return result.stdout.strip()


@pytest.fixture
def mock_git_repo(temp_dir: str) -> Generator[Dict[str, object], None, None]:
    """Create a git repository with three commits and an origin remote.

    Scope: function
    Dependencies: temp_dir
    Requires: git command available

    Yields:
        Dict with "path" (repository root), "url" (origin URL) and "commits" (hashes, oldest first)
    """
    repo_dir = os.path.join(temp_dir, "widget")
    os.makedirs(repo_dir)

    try:
        _git(repo_dir, "init")
        _git(repo_dir, "config", "user.email", "test@example.com")
        _git(repo_dir, "config", "user.name", "Test User")
        _git(repo_dir, "config", "commit.gpgsign", "false")
        _git(repo_dir, "remote", "add", "origin", ORIGIN_URL)

        commits = []
        for index, subject in enumerate(["Initial commit", "Add parser", "Fix parser edge case"]):
            Path(repo_dir, f"file{index}.txt").write_text(f"content {index}\n")
            _git(repo_dir, "add", ".")
            _git(repo_dir, "commit", "-m", subject)
            commits.append(_git(repo_dir, "rev-parse", "HEAD"))
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        pytest.skip(f"Git not available or failed: {e}")

    yield {"path": repo_dir, "url": ORIGIN_URL, "commits": commits}


@pytest.fixture
def fake_git(temp_dir: str) -> Callable[..., str]:
    """Factory creating a fake git executable.

    The returned callable takes (stdout="", stderr="", exit_code=0) and returns
    the path of a script that prints its arguments to <bin>/args.txt, writes the
    scripted output and exits with the given code.
    """
    if os.name == "nt":
        pytest.skip("fake git scripts require a POSIX shell")

    bin_dir = Path(temp_dir) / "fakebin"
    bin_dir.mkdir(exist_ok=True)

    def create(stdout: str = "", stderr: str = "", exit_code: int = 0) -> str:
        (bin_dir / "stdout.txt").write_text(stdout)
        (bin_dir / "stderr.txt").write_text(stderr)
        script = bin_dir / "git"
        script.write_text(
            "#!/bin/sh\n"
            f'printf "%s\\n" "$@" > "{bin_dir}/args.txt"\n'
            f'pwd > "{bin_dir}/cwd.txt"\n'
            f'cat "{bin_dir}/stdout.txt"\n'
            f'cat "{bin_dir}/stderr.txt" >&2\n'
            f"exit {exit_code}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return create


@pytest.fixture
def fake_build_client() -> FakeBuildInfoClient:
    """Empty in-memory build-info service for the build "my-build"."""
    return FakeBuildInfoClient()
