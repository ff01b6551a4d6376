"""Shared runtime wiring for lab commands."""

from __future__ import annotations

from pathlib import Path

from .. import config
from ..git import GitCli
from ..gitlab_api import GitlabClient
from ..models import LabConfig


def load_config() -> LabConfig:
    return config.load_config()


def git_for(lab_config: LabConfig, repo_dir: Path | None = None) -> GitCli:
    return GitCli(repo_dir=repo_dir or Path.cwd(), git_path=lab_config.git_path)


def api_for(lab_config: LabConfig) -> GitlabClient:
    return GitlabClient.from_config(lab_config)
