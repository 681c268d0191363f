"""Text rendering of process trees."""

import io
import sys
from collections.abc import Iterator
from typing import TextIO

from pyptree.models import ProcessTree, ProcessTreeNode

DEFAULT_INDENT = 2


def format_node(node: ProcessTreeNode, depth: int, indent: int = DEFAULT_INDENT) -> str:
    """Format one node as '<indent>- <name> #<pid>'."""
    return f"{' ' * (indent * depth)}- {node.name} #{node.pid}"


def iter_lines(tree: ProcessTree, indent: int = DEFAULT_INDENT) -> Iterator[str]:
    """Yield one line per node, depth-first pre-order, children unsorted."""
    for depth, node in tree.iter_preorder():
        yield format_node(node, depth, indent)


def render_tree(
    tree: ProcessTree,
    out: TextIO | None = None,
    indent: int = DEFAULT_INDENT,
) -> None:
    """Write the whole tree to out (stdout by default)."""
    if out is None:
        out = sys.stdout
    for line in iter_lines(tree, indent):
        out.write(line + "\n")


def render_to_string(tree: ProcessTree, indent: int = DEFAULT_INDENT) -> str:
    buf = io.StringIO()
    render_tree(tree, buf, indent)
    return buf.getvalue()
