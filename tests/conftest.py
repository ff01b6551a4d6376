# ruff: noqa: E402

import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import labcli.log as lab_log

DOCTEST_MODULES = {
    ROOT / "src" / "labcli" / "args.py",
    ROOT / "src" / "labcli" / "git.py",
    ROOT / "src" / "labcli" / "models.py",
    ROOT / "src" / "labcli" / "commands" / "todo.py",
    ROOT / "src" / "labcli" / "services" / "merge_requests" / "checkout.py",
    ROOT / "src" / "labcli" / "services" / "merge_requests" / "tracking.py",
}

_LAB_ENV = (
    "LAB_CORE_HOST",
    "LAB_CORE_TOKEN",
    "LAB_CORE_USER",
    "LAB_DEFAULT_REMOTE",
    "LAB_GIT_PATH",
    "LAB_LOG_LEVEL",
    "LAB_NO_COLOR",
    "CI_JOB_TOKEN",
)


@pytest.fixture(autouse=True)
def _isolated_lab_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _LAB_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LAB_CONFIG_DIR", str(tmp_path / "lab-config"))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(lab_log, "_configured_level", None)
    monkeypatch.setattr(lab_log, "_no_color_override", None)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
