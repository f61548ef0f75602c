"""Tree assembly for flat menu items.

``build_tree`` turns the flat items of one location into a sorted forest of
DisplayMenuItem nodes. Unresolvable parents are tolerated: orphans, self
references and parent cycles all end up as roots so every input item appears
in the forest exactly once. ``validate_items`` reports the same conditions
without changing anything, for admin tooling.
"""

import logging
from collections.abc import Iterator

from site_menu_service.models.menu_models import DisplayMenuItem, MenuItem, MenuItemIssue

logger = logging.getLogger(__name__)


def _unique_items(items: list[MenuItem]) -> dict[str, MenuItem]:
    """Index items by id, keeping the first occurrence of a duplicated id."""
    by_id: dict[str, MenuItem] = {}
    for item in items:
        if item.id in by_id:
            logger.warning(f"Duplicate menu item id {item.id} ignored")
            continue
        by_id[item.id] = item
    return by_id


def _find_cycles(by_id: dict[str, MenuItem]) -> list[list[str]]:
    """Find parent_id cycles among the indexed items.

    Self references are not reported here; they are handled as roots directly.

    Returns:
        list: Each cycle as the list of item ids on it
    """
    cycles: list[list[str]] = []
    settled: set[str] = set()

    for start in by_id:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start

        while current is not None and current in by_id and current not in settled:
            if current in on_path:
                cycles.append(path[path.index(current) :])
                break
            path.append(current)
            on_path.add(current)
            parent_id = by_id[current].parent_id
            current = parent_id if parent_id != current else None

        settled.update(path)

    return cycles


def _effective_parents(by_id: dict[str, MenuItem]) -> dict[str, str | None]:
    """Resolve the parent each item is attached to in the forest."""
    parents: dict[str, str | None] = {}
    for item_id, item in by_id.items():
        parent_id = item.parent_id
        if parent_id is None or parent_id == item_id or parent_id not in by_id:
            parents[item_id] = None
        else:
            parents[item_id] = parent_id

    for cycle in _find_cycles(by_id):
        breaker = min(cycle, key=lambda i: by_id[i].sort_key)
        logger.warning(f"Menu item cycle {' -> '.join(cycle)} broken at {breaker}")
        parents[breaker] = None

    return parents


def sort_forest(nodes: list[DisplayMenuItem]) -> None:
    """Sort a forest in place by (order, id) at every level."""
    stack = [nodes]
    while stack:
        siblings = stack.pop()
        siblings.sort(key=lambda n: n.sort_key)
        stack.extend(node.children for node in siblings if node.children)


def build_tree(items: list[MenuItem]) -> list[DisplayMenuItem]:
    """Assemble flat items of one location into a sorted forest.

    The caller is responsible for passing only the items of a single menu.

    Args:
        items: Flat menu items in any order

    Returns:
        list: Root DisplayMenuItem nodes, each with nested children
    """
    by_id = _unique_items(items)
    nodes = {item_id: DisplayMenuItem.from_menu_item(item) for item_id, item in by_id.items()}
    roots: list[DisplayMenuItem] = []

    for item_id, parent_id in _effective_parents(by_id).items():
        if parent_id is None:
            roots.append(nodes[item_id])
        else:
            nodes[parent_id].children.append(nodes[item_id])

    sort_forest(roots)
    return roots


def flatten_tree(forest: list[DisplayMenuItem]) -> Iterator[DisplayMenuItem]:
    """Yield every node of a forest depth first, parents before children."""
    for node in forest:
        yield node
        yield from flatten_tree(node.children)


def collect_descendants(item_id: str, items: list[MenuItem]) -> list[str]:
    """Return the ids of every descendant of an item, nearest first.

    Args:
        item_id: Item whose subtree is collected
        items: Flat items of the item's menu

    Returns:
        list: Descendant ids, not including item_id itself
    """
    children: dict[str, list[str]] = {}
    for item in items:
        if item.parent_id is not None and item.parent_id != item.id:
            children.setdefault(item.parent_id, []).append(item.id)

    descendants: list[str] = []
    seen = {item_id}
    queue = list(children.get(item_id, []))
    while queue:
        child_id = queue.pop(0)
        if child_id in seen:
            continue
        seen.add(child_id)
        descendants.append(child_id)
        queue.extend(children.get(child_id, []))

    return descendants


def validate_items(items: list[MenuItem]) -> list[MenuItemIssue]:
    """Report structural problems in a menu's flat items.

    Detects duplicate ids, self-parenting items, orphans whose parent is
    missing from the set, and parent cycles. build_tree tolerates all of
    these; this pass only surfaces them.

    Args:
        items: Flat menu items of one menu

    Returns:
        list: One MenuItemIssue per problem found, empty if the menu is clean
    """
    issues: list[MenuItemIssue] = []
    seen: set[str] = set()

    for item in items:
        if item.id in seen:
            issues.append(
                MenuItemIssue(
                    item_id=item.id,
                    issue="duplicate_id",
                    message=f"Item id {item.id} appears more than once",
                )
            )
        seen.add(item.id)

    by_id = _unique_items(items)
    for item in by_id.values():
        if item.parent_id is None:
            continue
        if item.parent_id == item.id:
            issues.append(
                MenuItemIssue(
                    item_id=item.id,
                    issue="self_parent",
                    message=f"Item {item.label!r} is its own parent",
                )
            )
        elif item.parent_id not in by_id:
            issues.append(
                MenuItemIssue(
                    item_id=item.id,
                    issue="orphan",
                    message=f"Item {item.label!r} references missing parent {item.parent_id}",
                )
            )

    for cycle in _find_cycles(by_id):
        for item_id in cycle:
            issues.append(
                MenuItemIssue(
                    item_id=item_id,
                    issue="cycle",
                    message=f"Item is part of parent cycle {' -> '.join(cycle)}",
                )
            )

    return issues
