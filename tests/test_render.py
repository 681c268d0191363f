"""Tests for tree rendering."""

import io

from pyptree.models import ProcessRecord, ProcessTreeNode
from pyptree.render import format_node, iter_lines, render_to_string, render_tree
from pyptree.tree import build_tree

SCENARIO_A = [
    ProcessRecord(name="init", pid=1, ppid=0),
    ProcessRecord(name="sh", pid=50, ppid=1),
    ProcessRecord(name="cat", pid=51, ppid=50),
]


def test_format_node():
    """Test a node line is '<indent>- <name> #<pid>'."""
    node = ProcessTreeNode(ProcessRecord(name="sshd", pid=812, ppid=1))

    assert format_node(node, 0) == "- sshd #812"
    assert format_node(node, 3) == "      - sshd #812"
    assert format_node(node, 2, indent=4) == "        - sshd #812"


def test_scenario_chain():
    """Test init, sh and cat render as a chain under the root."""
    text = render_to_string(build_tree(SCENARIO_A))

    assert text == "- / #0\n  - init #1\n    - sh #50\n      - cat #51\n"


def test_scenario_orphan():
    """Test an orphan contributes nothing to the output."""
    records = SCENARIO_A + [ProcessRecord(name="orphan", pid=99, ppid=12345)]

    text = render_to_string(build_tree(records))

    assert "orphan" not in text
    assert "#99" not in text
    assert text == render_to_string(build_tree(SCENARIO_A))


def test_scenario_reused_pid():
    """Test a pid observed twice renders once, with the later name."""
    records = SCENARIO_A + [ProcessRecord(name="tac", pid=51, ppid=50)]

    lines = list(iter_lines(build_tree(records)))

    assert lines == ["- / #0", "  - init #1", "    - sh #50", "      - tac #51"]


def test_siblings_in_stored_order():
    """Test siblings are printed in harvest order, not pid order."""
    records = [
        ProcessRecord(name="init", pid=1, ppid=0),
        ProcessRecord(name="late", pid=300, ppid=1),
        ProcessRecord(name="early", pid=20, ppid=1),
        ProcessRecord(name="child", pid=301, ppid=300),
    ]

    lines = list(iter_lines(build_tree(records)))

    assert lines == [
        "- / #0",
        "  - init #1",
        "    - late #300",
        "      - child #301",
        "    - early #20",
    ]


def test_render_is_idempotent():
    """Test rendering the same tree twice gives the same text."""
    tree = build_tree(SCENARIO_A)

    assert render_to_string(tree) == render_to_string(tree)


def test_render_tree_writes_to_sink():
    """Test render_tree writes to the given stream."""
    out = io.StringIO()

    render_tree(build_tree(SCENARIO_A), out, indent=0)

    assert out.getvalue() == "- / #0\n- init #1\n- sh #50\n- cat #51\n"


def test_render_tree_defaults_to_stdout(capsys):
    """Test render_tree prints to stdout when no stream is given."""
    render_tree(build_tree([]))

    assert capsys.readouterr().out == "- / #0\n"
