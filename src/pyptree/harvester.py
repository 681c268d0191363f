"""Process record harvesting for pyptree."""

import logging
import os
import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import psutil

from pyptree.models import ProcessRecord

logger = logging.getLogger(__name__)

# psutil only defines PROCFS_PATH on platforms that have a procfs.
DEFAULT_PROC_ROOT = getattr(psutil, "PROCFS_PATH", "/proc")

STATUS_FILE = "status"

# Raised when a process exits between listing /proc and reading its status:
# ENOENT on open(), ESRCH on read(), ENOTDIR if the pid was reused oddly.
VANISHED_ERRORS = (FileNotFoundError, ProcessLookupError, NotADirectoryError)

# Optional sign, then ASCII digits. No underscores or other scripts.
INT_RE = re.compile(r"[+-]?[0-9]+")


class ProcRootUnavailableError(OSError):
    """The process-information root could not be enumerated at all."""

    def __init__(self, proc_root: str, cause: BaseException) -> None:
        super().__init__(f"cannot read process list from {proc_root}: {cause}")
        self.proc_root = proc_root
        self.cause = cause


def _parse_int(value: str) -> int | None:
    if INT_RE.fullmatch(value) is None:
        return None
    return int(value)


def parse_status(lines: Iterable[str]) -> ProcessRecord | None:
    """
    Build a ProcessRecord from the lines of a /proc/<pid>/status file.

    Each line is split on its first colon only, so values containing colons
    survive intact. The last occurrence of a key wins. Returns None unless
    Name, Pid and PPid were all captured.
    """
    name: str | None = None
    pid: int | None = None
    ppid: int | None = None

    for line in lines:
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if key == "Name":
            name = value
        elif key == "Pid":
            pid = _parse_int(value)
        elif key == "PPid":
            ppid = _parse_int(value)

    if name is None or pid is None or ppid is None:
        return None
    return ProcessRecord(name=name, pid=pid, ppid=ppid)


def read_status(path: str) -> ProcessRecord | None:
    """Read and parse one status file. OS errors propagate."""
    with open(path, encoding="utf-8", errors="replace") as f:
        lines = f.readlines()
    return parse_status(lines)


class ProcfsHarvester:
    """
    Harvests process records by walking a procfs mount.

    The filesystem mutates while we read it. Entries that vanish between
    listing and reading contribute nothing, and no single entry can abort
    the scan. Only failing to list the root itself is fatal.
    """

    def __init__(self, proc_root: str | None = None) -> None:
        """
        Initialize the ProcfsHarvester.

        Args:
            proc_root: Process-information root. Defaults to psutil's
                PROCFS_PATH (normally /proc).
        """
        self._proc_root = proc_root or DEFAULT_PROC_ROOT

    @property
    def proc_root(self) -> str:
        """Get the process-information root being scanned."""
        return self._proc_root

    def collect(self) -> list[ProcessRecord]:
        """Collect a record for every process describable right now."""
        try:
            with os.scandir(self._proc_root) as it:
                entries = list(it)
        except OSError as err:
            raise ProcRootUnavailableError(self._proc_root, err) from err

        records: list[ProcessRecord] = []
        skipped = 0
        for entry in entries:
            record = self._read_entry(entry)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        logger.debug(
            "harvested %d records from %s (%d entries skipped)",
            len(records),
            self._proc_root,
            skipped,
        )
        return records

    def _read_entry(self, entry: os.DirEntry) -> ProcessRecord | None:
        """Read one /proc entry, returning None for anything not usable."""
        if not entry.name.isdigit():
            return None
        try:
            # Stat now; DirEntry.is_dir() would trust the d_type from the listing.
            if not os.path.isdir(entry.path):
                return None
            record = read_status(os.path.join(entry.path, STATUS_FILE))
        except VANISHED_ERRORS:
            return None
        except OSError as err:
            logger.warning("skipping %s: %s", entry.path, err)
            return None

        if record is None:
            logger.debug("incomplete status for %s", entry.path)
        return record


@contextmanager
def _procfs_path(proc_root: str) -> Iterator[None]:
    """Point psutil at another procfs mount for the duration of the block."""
    saved = getattr(psutil, "PROCFS_PATH", None)
    psutil.PROCFS_PATH = proc_root
    try:
        yield
    finally:
        if saved is None:
            del psutil.PROCFS_PATH
        else:
            psutil.PROCFS_PATH = saved


class PsutilHarvester:
    """Harvests process records through psutil.process_iter()."""

    attrs = ["pid", "ppid", "name"]

    def __init__(self, proc_root: str | None = None) -> None:
        """
        Initialize the PsutilHarvester.

        Args:
            proc_root: procfs mount psutil should read. Defaults to psutil's
                own PROCFS_PATH.
        """
        self._proc_root = proc_root or DEFAULT_PROC_ROOT

    @property
    def proc_root(self) -> str:
        """Get the procfs mount psutil reads from."""
        return self._proc_root

    def collect(self) -> list[ProcessRecord]:
        """
        Collect a record for every process psutil can describe.

        process_iter() already drops processes that die mid-iteration and
        stores None for attributes hidden by AccessDenied or ZombieProcess.
        Processes missing any of the three fields are dropped.
        """
        records: list[ProcessRecord] = []
        try:
            with _procfs_path(self._proc_root):
                for proc in psutil.process_iter(attrs=self.attrs):
                    info = proc.info
                    name = info.get("name")
                    pid = info.get("pid")
                    ppid = info.get("ppid")
                    if name is None or pid is None or ppid is None:
                        continue
                    records.append(ProcessRecord(name=name, pid=pid, ppid=ppid))
        except (psutil.Error, OSError) as err:
            raise ProcRootUnavailableError(self._proc_root, err) from err

        logger.debug("harvested %d records via psutil from %s", len(records), self._proc_root)
        return records


SOURCES = ("procfs", "psutil")


def harvest(source: str = "procfs", proc_root: str | None = None) -> list[ProcessRecord]:
    """Harvest records from the named source."""
    if source == "procfs":
        return ProcfsHarvester(proc_root).collect()
    if source == "psutil":
        return PsutilHarvester(proc_root).collect()
    raise ValueError(f"Unknown process source: {source}")
