"""Data models for pyptree."""

from collections.abc import Iterator
from dataclasses import dataclass, field

ROOT_PID = 0
ROOT_PPID = -1
ROOT_NAME = "/"


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable identity of one observed process."""

    name: str
    pid: int
    ppid: int  # May reference a pid missing from the snapshot

    @classmethod
    def root(cls) -> "ProcessRecord":
        """Return the synthetic record sitting above init."""
        return cls(name=ROOT_NAME, pid=ROOT_PID, ppid=ROOT_PPID)


@dataclass(slots=True)
class ProcessTreeNode:
    """A node of the process hierarchy. Owns its children."""

    record: ProcessRecord
    children: list["ProcessTreeNode"] = field(default_factory=list)

    @property
    def pid(self) -> int:
        return self.record.pid

    @property
    def name(self) -> str:
        return self.record.name

    def iter_preorder(self) -> Iterator[tuple[int, "ProcessTreeNode"]]:
        """
        Yield (depth, node) pairs depth-first, parents before children.

        Children are visited in stored order. Uses an explicit stack so that
        very deep hierarchies do not hit the recursion limit.
        """
        stack: list[tuple[int, ProcessTreeNode]] = [(0, self)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            for child in reversed(node.children):
                stack.append((depth + 1, child))


@dataclass(slots=True)
class ProcessTree:
    """A process hierarchy hanging off the synthetic root."""

    root: ProcessTreeNode = field(
        default_factory=lambda: ProcessTreeNode(ProcessRecord.root())
    )

    def iter_preorder(self) -> Iterator[tuple[int, ProcessTreeNode]]:
        return self.root.iter_preorder()

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_preorder())

    def __contains__(self, pid: object) -> bool:
        return any(node.pid == pid for _, node in self.iter_preorder())
