"""Pytest configuration and fixtures for AgentRouter tests."""

import stat
from pathlib import Path

import pytest

from agentrouter.config import RouterConfig
from agentrouter.executors import Executors


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace directory for tests."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def make_script(tmp_path: Path):
    """Factory writing an executable shell script that stands in for an agent CLI."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(name: str, body: str) -> str:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture
def echo_agents(make_script) -> tuple[str, str]:
    """Fake codex and gemini CLIs that print their arguments."""
    codex = make_script("codex", 'printf "%s\\n" "$@"')
    gemini = make_script("gemini", 'printf "%s\\n" "$@"')
    return codex, gemini


@pytest.fixture
def router_config(tmp_workspace: Path, echo_agents: tuple[str, str]) -> RouterConfig:
    """Config pointing at the fake agent CLIs."""
    codex, gemini = echo_agents
    return RouterConfig(
        work_dir=tmp_workspace,
        codex_binary=codex,
        gemini_binary=gemini,
        timeout_seconds=10,
    )


@pytest.fixture
def executors(router_config: RouterConfig) -> Executors:
    """Executors bound to the fake agent CLIs."""
    return Executors.from_config(router_config)


@pytest.fixture
def missing_config(tmp_workspace: Path) -> RouterConfig:
    """Config whose agent CLIs do not exist."""
    return RouterConfig(
        work_dir=tmp_workspace,
        codex_binary="agentrouter-missing-codex-cli",
        gemini_binary="agentrouter-missing-gemini-cli",
    )
