"""Shared fixtures for pyptree tests."""

from pathlib import Path

import pytest


def write_status(proc_root: Path, dirname: str, name: str | None, pid: int | None, ppid: int | None) -> Path:
    """Create <proc_root>/<dirname>/status with the fields that are not None."""
    proc_dir = proc_root / dirname
    proc_dir.mkdir()
    lines = []
    if name is not None:
        lines.append(f"Name:\t{name}")
    lines.append("Umask:\t0022")
    lines.append("State:\tS (sleeping)")
    if pid is not None:
        lines.append(f"Pid:\t{pid}")
    if ppid is not None:
        lines.append(f"PPid:\t{ppid}")
    lines.append("Uid:\t1000\t1000\t1000\t1000")
    status = proc_dir / "status"
    status.write_text("\n".join(lines) + "\n")
    return status


@pytest.fixture
def fake_proc(tmp_path: Path) -> Path:
    """A fake /proc holding init, a shell and a cat below it."""
    root = tmp_path / "proc"
    root.mkdir()
    write_status(root, "1", "init", 1, 0)
    write_status(root, "50", "sh", 50, 1)
    write_status(root, "51", "cat", 51, 50)
    return root


@pytest.fixture
def make_status():
    """Factory for extra status files in a fake /proc."""
    return write_status
