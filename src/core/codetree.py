"""
Hierarchical code filtering.

Codes are colon-delimited paths ("Project:Sub"). A code can be both a
leaf and the parent of longer codes; "Project" and "Project:Sub" are
expected to coexist.
"""

from collections.abc import Iterable

from models.events import CodeTreeNode, Period

CODE_SEPARATOR = ":"


def build_code_tree(codes: Iterable[str]) -> CodeTreeNode:
    """Build the code hierarchy from a flat list of known codes."""
    root = CodeTreeNode()
    for code in codes:
        node = root
        parts = code.split(CODE_SEPARATOR)
        for depth, part in enumerate(parts, start=1):
            kid = node.children.get(part)
            if kid is None:
                kid = CodeTreeNode(path=CODE_SEPARATOR.join(parts[:depth]))
                node.children[part] = kid
            node = kid
    return root


def find_node(tree: CodeTreeNode, code: str) -> CodeTreeNode | None:
    """Follow the segments of `code` down from the root. None if unknown."""
    node = tree
    for part in code.split(CODE_SEPARATOR):
        node = node.children.get(part)
        if node is None:
            return None
    return node


def subtree_codes(node: CodeTreeNode) -> set[str]:
    """
    The codes of `node` and all of its descendants.

    Walks with an explicit stack, so code depth is not bounded by the
    interpreter's recursion limit.
    """
    found = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if current.path is not None:
            found.add(current.path)
        stack.extend(current.children.values())
    return found


def filter_in_periods(periods: Iterable[Period], code: str) -> list[Period]:
    """Periods whose code is exactly `code`."""
    return [p for p in periods if p.code == code]


def filter_out_periods(periods: Iterable[Period], code: str) -> list[Period]:
    """Periods whose code is anything but `code`."""
    return [p for p in periods if p.code != code]


def filter_in_subtree(periods: Iterable[Period], code: str, tree: CodeTreeNode) -> list[Period]:
    """
    Periods whose code is `code` or one of its descendants.

    An unknown code matches nothing. Input order is kept.
    """
    node = find_node(tree, code)
    if node is None:
        return []
    wanted = subtree_codes(node)
    return [p for p in periods if p.code in wanted]


def filter_out_subtree(periods: Iterable[Period], code: str, tree: CodeTreeNode) -> list[Period]:
    """
    Periods whose code is neither `code` nor one of its descendants.

    An unknown code yields nothing, like `filter_in_subtree`.
    """
    node = find_node(tree, code)
    if node is None:
        return []
    unwanted = subtree_codes(node)
    return [p for p in periods if p.code not in unwanted]
