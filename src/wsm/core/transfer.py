"""Tab transfer operations: move, copy and delete tabs between workspaces.

These functions only edit an in-memory WorkspacesDocument. Persisting the
result (with backup and rollback) is the WorkspaceManager's job.

Tab ids that are not found are skipped with a warning rather than failing
the whole operation, so a typo in one id does not block the others. The
returned TransferResult lists them. Pass ``strict=True`` to fail instead.
"""

import logging
import uuid

from wsm.core.errors import NotFoundError
from wsm.core.navigator import (
    collect_ids,
    find_first_container,
    find_node,
    flatten_tabs,
)
from wsm.core.types import (
    LayoutNode,
    NodeMatch,
    NodeType,
    Operation,
    Tab,
    TransferResult,
    WorkspaceLayout,
    WorkspacesDocument,
)

logger = logging.getLogger(__name__)


def new_node_id(taken: set[str] | None = None) -> str:
    """Return a fresh 16 hex digit id, the shape Obsidian uses."""
    taken = taken or set()
    while True:
        candidate = uuid.uuid4().hex[:16]
        if candidate not in taken:
            return candidate


def get_layout(document: WorkspacesDocument, name: str) -> WorkspaceLayout:
    """
    Look up a workspace by name.

    Raises:
        NotFoundError: If the document has no workspace with that name
    """
    layout = document.workspaces.get(name)
    if layout is None:
        raise NotFoundError(f"Workspace not found: {name}", missing=[name])
    return layout


def list_tabs(document: WorkspacesDocument, layout_name: str) -> list[Tab]:
    """Return the tabs of a named workspace, in display order."""
    return flatten_tabs(get_layout(document, layout_name))


def insert_tab(layout: WorkspaceLayout, node: LayoutNode) -> LayoutNode:
    """
    Append a tab to a layout's first tab group.

    When ``main`` has no tab group, one is created: a ``main`` that is not
    a split is first wrapped in a new vertical split, then a new empty
    ``tabs`` node is appended to that split and receives the tab.

    Args:
        layout: Layout to insert into
        node: Leaf to insert

    Returns:
        The tab group the node was appended to
    """
    container = find_first_container(layout.main)
    if container is not None:
        if container.children is None:
            container.children = []
        container.children.append(node)
        return container

    taken = collect_ids(layout.main) | {node.id}
    if layout.main.type != NodeType.SPLIT:
        split_id = new_node_id(taken)
        taken.add(split_id)
        layout.main = LayoutNode(
            id=split_id,
            type=NodeType.SPLIT,
            children=[layout.main],
            direction="vertical",
        )
        logger.debug(f"Wrapped main in new split {split_id}")

    container = LayoutNode(id=new_node_id(taken), type=NodeType.TABS, children=[])
    if layout.main.children is None:
        layout.main.children = []
    layout.main.children.append(container)
    container.children.append(node)
    logger.debug(f"Created tab group {container.id} in {layout.main.id}")
    return container


def detach(match: NodeMatch) -> LayoutNode:
    """
    Remove a found node from its parent's children.

    Exactly one node is removed. A parent left empty stays in place.
    """
    siblings = match.parent.children
    for index, child in enumerate(siblings):
        if child is match.node:
            del siblings[index]
            break
    return match.node


def _locate_tabs(
    layout: WorkspaceLayout,
    layout_name: str,
    tab_ids: list[str],
    strict: bool,
) -> tuple[dict[str, NodeMatch], list[str], list[str]]:
    """Resolve tab ids to movable leaves, collecting what is missing."""
    found: dict[str, NodeMatch] = {}
    missing: list[str] = []
    warnings: list[str] = []

    for tab_id in tab_ids:
        if tab_id in found:
            continue
        match = find_node(layout.main, tab_id)
        if match is None:
            reason = f"Tab {tab_id} not found in workspace {layout_name}"
        elif match.node.type != NodeType.LEAF:
            reason = f"Node {tab_id} in workspace {layout_name} is not a tab"
        elif match.parent is None:
            reason = f"Tab {tab_id} is the root of workspace {layout_name}"
        else:
            found[tab_id] = match
            continue
        missing.append(tab_id)
        warnings.append(reason)

    if missing and strict:
        raise NotFoundError("; ".join(warnings), missing=missing)
    for reason in warnings:
        logger.warning(f"{reason}, skipping")
    return found, missing, warnings


def move_tabs(
    document: WorkspacesDocument,
    source: str,
    target: str,
    tab_ids: list[str],
    *,
    strict: bool = False,
) -> TransferResult:
    """
    Move tabs from one workspace to another.

    Args:
        document: Loaded document, edited in place
        source: Workspace to take tabs from
        target: Workspace to add them to
        tab_ids: Ids of the leaves to move
        strict: Raise NotFoundError instead of skipping unknown ids

    Returns:
        TransferResult with the moved and missing ids

    Raises:
        NotFoundError: If either workspace is absent (or, when strict,
            any tab id is)
    """
    source_layout = get_layout(document, source)
    target_layout = get_layout(document, target)
    found, missing, warnings = _locate_tabs(source_layout, source, tab_ids, strict)

    taken = set() if source == target else collect_ids(target_layout.main)
    transferred = []
    for tab_id, match in found.items():
        node = detach(match)
        if node.id in taken:
            node.id = new_node_id(taken | collect_ids(source_layout.main))
            logger.warning(
                f"Tab {tab_id} already exists in {target}, moved as {node.id}"
            )
        taken.add(node.id)
        insert_tab(target_layout, node)
        transferred.append(tab_id)

    if transferred:
        source_layout.touch()
        target_layout.touch()
    logger.info(f"Moved {len(transferred)} tab(s) from {source} to {target}")
    return TransferResult(
        operation=Operation.MOVE,
        source=source,
        target=target,
        requested=list(tab_ids),
        transferred=transferred,
        missing=missing,
        warnings=warnings,
    )


def copy_tabs(
    document: WorkspacesDocument,
    source: str,
    target: str,
    tab_ids: list[str],
    *,
    strict: bool = False,
) -> TransferResult:
    """
    Copy tabs from one workspace to another.

    Each copy is a deep clone with a fresh id, so it never collides with
    the original. The source workspace is left untouched.

    Args:
        document: Loaded document, edited in place
        source: Workspace to copy tabs from
        target: Workspace to add copies to
        tab_ids: Ids of the leaves to copy
        strict: Raise NotFoundError instead of skipping unknown ids

    Returns:
        TransferResult with the copied (source) ids and missing ids
    """
    source_layout = get_layout(document, source)
    target_layout = get_layout(document, target)
    found, missing, warnings = _locate_tabs(source_layout, source, tab_ids, strict)

    taken = collect_ids(source_layout.main) | collect_ids(target_layout.main)
    transferred = []
    for tab_id, match in found.items():
        clone = match.node.model_copy(deep=True)
        clone.id = new_node_id(taken)
        taken.add(clone.id)
        insert_tab(target_layout, clone)
        transferred.append(tab_id)
        logger.debug(f"Copied tab {tab_id} to {target} as {clone.id}")

    if transferred:
        target_layout.touch()
    logger.info(f"Copied {len(transferred)} tab(s) from {source} to {target}")
    return TransferResult(
        operation=Operation.COPY,
        source=source,
        target=target,
        requested=list(tab_ids),
        transferred=transferred,
        missing=missing,
        warnings=warnings,
    )


def delete_tabs(
    document: WorkspacesDocument,
    layout_name: str,
    tab_ids: list[str],
    *,
    strict: bool = False,
) -> TransferResult:
    """
    Delete tabs from a workspace.

    Finding none of the ids is not an error: the result has a count of
    zero and the workspace mtime is left alone.
    """
    layout = get_layout(document, layout_name)
    found, missing, warnings = _locate_tabs(layout, layout_name, tab_ids, strict)

    transferred = []
    for tab_id, match in found.items():
        detach(match)
        transferred.append(tab_id)

    if transferred:
        layout.touch()
    logger.info(f"Deleted {len(transferred)} tab(s) from {layout_name}")
    return TransferResult(
        operation=Operation.DELETE,
        source=layout_name,
        requested=list(tab_ids),
        transferred=transferred,
        missing=missing,
        warnings=warnings,
    )
