"""Process tree construction for pyptree."""

import logging
from collections import defaultdict
from collections.abc import Iterable

from pyptree.models import ProcessRecord, ProcessTree, ProcessTreeNode

logger = logging.getLogger(__name__)


def index_records(
    records: Iterable[ProcessRecord],
) -> tuple[dict[int, ProcessRecord], dict[int, list[int]]]:
    """
    Index records by pid and by parent pid.

    Returns (records_by_pid, child_pids_by_parent_pid). A duplicated pid keeps
    the last record seen, and only that record contributes a parent edge, so
    the pid is listed under exactly one parent. Child lists keep the order in
    which pids were first seen.
    """
    records_by_pid: dict[int, ProcessRecord] = {}
    for record in records:
        records_by_pid[record.pid] = record

    child_pids_by_parent_pid: dict[int, list[int]] = defaultdict(list)
    for pid, record in records_by_pid.items():
        child_pids_by_parent_pid[record.ppid].append(pid)

    return records_by_pid, dict(child_pids_by_parent_pid)


def build_tree(records: Iterable[ProcessRecord]) -> ProcessTree:
    """
    Build the process hierarchy under the synthetic root.

    Records whose parent chain never reaches pid 0 are left out. A pid is
    placed at most once, which also cuts ppid cycles in a corrupt snapshot.
    """
    records_by_pid, child_pids_by_parent_pid = index_records(records)

    tree = ProcessTree()
    visited = {tree.root.pid}
    stack = [tree.root]
    while stack:
        node = stack.pop()
        for child_pid in child_pids_by_parent_pid.get(node.pid, ()):
            if child_pid in visited:
                logger.debug("pid %d already placed, skipping", child_pid)
                continue
            visited.add(child_pid)
            child = ProcessTreeNode(records_by_pid[child_pid])
            node.children.append(child)
            stack.append(child)

    unreachable = len(records_by_pid.keys() - visited)
    if unreachable:
        logger.debug("%d records unreachable from the root", unreachable)
    return tree
