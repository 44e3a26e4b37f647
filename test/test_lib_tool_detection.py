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
"""Tests for buildvcs.tool_detection module"""
import sys
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, Mock
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from buildvcs.constants import GitNotFoundError
from buildvcs.tool_detection import ToolInfo, _tool_cache, clear_cache, find_git, require_git


class TestToolInfo:
    """Tests for ToolInfo dataclass."""

    def test_is_found_with_command(self) -> None:
        assert ToolInfo(command="/usr/bin/git", version="git version 2.43.0").is_found() is True

    def test_is_found_without_command(self) -> None:
        tool_info = ToolInfo(command=None, version=None, error_message="git not in PATH")
        assert tool_info.is_found() is False
        assert tool_info.error_message == "git not in PATH"


class TestFindGit:
    """Tests for git detection."""

    def test_found(self, monkeypatch: Any) -> None:
        mock_result = MagicMock()
        mock_result.stdout = "git version 2.43.0\n"
        monkeypatch.setattr("subprocess.run", Mock(return_value=mock_result))
        monkeypatch.setattr("shutil.which", lambda cmd: f"/usr/bin/{cmd}")

        tool_info = find_git()

        assert tool_info.command == "/usr/bin/git"
        assert tool_info.version == "git version 2.43.0"

    def test_not_found(self, monkeypatch: Any) -> None:
        monkeypatch.setattr("shutil.which", lambda cmd: None)

        tool_info = find_git()

        assert not tool_info.is_found()
        assert tool_info.error_message == "git not in PATH"

    def test_uses_cache(self, monkeypatch: Any) -> None:
        mock_which = Mock(return_value="/usr/bin/git")
        mock_result = MagicMock()
        mock_result.stdout = "git version 2.43.0"
        monkeypatch.setattr("shutil.which", mock_which)
        monkeypatch.setattr("subprocess.run", Mock(return_value=mock_result))

        first = find_git()
        second = find_git()

        assert first is second
        assert mock_which.call_count == 1

    def test_clear_cache(self) -> None:
        _tool_cache["git"] = ToolInfo(command="git", version="1")
        clear_cache()
        assert len(_tool_cache) == 0


class TestRequireGit:
    """Tests for the git precondition."""

    def test_missing_git_raises(self, monkeypatch: Any) -> None:
        monkeypatch.setattr("shutil.which", lambda cmd: None)
        with pytest.raises(GitNotFoundError):
            require_git()

    def test_returns_path(self, monkeypatch: Any) -> None:
        mock_result = MagicMock()
        mock_result.stdout = "git version 2.43.0"
        monkeypatch.setattr("shutil.which", lambda cmd: "/usr/local/bin/git")
        monkeypatch.setattr("subprocess.run", Mock(return_value=mock_result))
        assert require_git() == "/usr/local/bin/git"
