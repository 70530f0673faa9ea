"""Pure lookups over a workspace layout tree."""

from collections.abc import Iterator

from wsm.core.types import LayoutNode, NodeMatch, NodeType, Tab, WorkspaceLayout


def iter_nodes(
    root: LayoutNode, parent: LayoutNode | None = None
) -> Iterator[NodeMatch]:
    """
    Walk a tree depth-first in pre-order, left to right.

    Args:
        root: Node to start from
        parent: Parent of ``root``, if known

    Yields:
        NodeMatch for every node, paired with its parent
    """
    yield NodeMatch(node=root, parent=parent)
    for child in root.children or []:
        yield from iter_nodes(child, root)


def find_node(root: LayoutNode, node_id: str) -> NodeMatch | None:
    """
    Find the first node with the given id.

    Ids are expected to be unique within a layout but this is not
    checked; when they are not, the first node in pre-order wins.

    Args:
        root: Tree root to search
        node_id: Id to look for

    Returns:
        The node and its parent (None for the root), or None if absent
    """
    for match in iter_nodes(root):
        if match.node.id == node_id:
            return match
    return None


def find_first_container(root: LayoutNode) -> LayoutNode | None:
    """Return the first ``tabs`` node in pre-order, or None."""
    for match in iter_nodes(root):
        if match.node.type == NodeType.TABS:
            return match.node
    return None


def _tab_from_node(node: LayoutNode) -> Tab:
    file_path = node.state.file
    title = node.state.title or file_path.split("/")[-1]
    return Tab(id=node.id, file_path=file_path, title=title)


def flatten_tabs(layout: WorkspaceLayout) -> list[Tab]:
    """
    List the tabs in a layout's main area.

    Leaves without a file (empty panes, graph views and the like) are
    skipped. The list is rebuilt from the tree on every call.

    Args:
        layout: Workspace layout

    Returns:
        Tabs in depth-first, left-to-right order
    """
    return [
        _tab_from_node(match.node)
        for match in iter_nodes(layout.main)
        if match.node.is_tab
    ]


def collect_ids(root: LayoutNode) -> set[str]:
    """Return every node id in a tree."""
    return {match.node.id for match in iter_nodes(root)}
