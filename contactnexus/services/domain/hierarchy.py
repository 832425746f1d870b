"""
Group hierarchy and membership resolution.

Pure functions that derive the tree view of the flat parent-pointer group
records and the contact counts attributed to each subtree. Nothing here
mutates its inputs or raises on malformed data: every traversal keeps a
visited set, so a cycle that slipped into the records only shortens the
result instead of looping.
"""

from collections import deque
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Set

from contactnexus.models import Contact, Group


@dataclass
class GroupNode:
    """A group decorated with its position and aggregates in the tree."""
    id: str
    name: str
    description: Optional[str]
    parent_id: Optional[str]
    level: int
    children: List['GroupNode'] = field(default_factory=list)
    sub_group_count: int = 0
    member_count: int = 0


def _sort_key(group: Group):
    return (group.name.casefold(), group.id)


def children_index(groups: Iterable[Group]) -> Dict[Optional[str], List[Group]]:
    """
    Map each parent id to its direct children, ordered by name.

    Groups whose parent id references a group that is not present are filed
    under ``None`` so they still surface as roots.
    """
    groups = list(groups)
    known = {g.id for g in groups}
    index: Dict[Optional[str], List[Group]] = {}
    for group in groups:
        parent = group.parent_id if group.parent_id in known else None
        index.setdefault(parent, []).append(group)
    for siblings in index.values():
        siblings.sort(key=_sort_key)
    return index


def descendant_ids(group_id: str, groups: Iterable[Group]) -> Set[str]:
    """
    Return ``group_id`` together with the ids of all groups below it.

    Breadth-first over parent to child links; a group already visited is
    never queued again.
    """
    index = children_index(groups)
    visited = {group_id}
    queue = deque([group_id])
    while queue:
        current = queue.popleft()
        for child in index.get(current, []):
            if child.id not in visited:
                visited.add(child.id)
                queue.append(child.id)
    return visited


def members(group_id: str, groups: Iterable[Group], contacts: Iterable[Contact]) -> List[Contact]:
    """Contacts tagged with ``group_id`` or any of its descendants, each once."""
    closure = descendant_ids(group_id, groups)
    return [c for c in contacts if not closure.isdisjoint(c.group_ids)]


def member_count(group_id: str, groups: Iterable[Group], contacts: Iterable[Contact]) -> int:
    """Number of distinct contacts attributable to the subtree of ``group_id``."""
    return len(members(group_id, groups, contacts))


def direct_member_count(group_id: str, contacts: Iterable[Contact]) -> int:
    """Number of contacts tagged with ``group_id`` itself."""
    return sum(1 for c in contacts if group_id in c.group_ids)


def ancestor_chain(group_id: str, groups: Iterable[Group]) -> List[Group]:
    """Ancestors of ``group_id`` ordered from the root down to the direct parent."""
    by_id = {g.id: g for g in groups}
    chain: List[Group] = []
    seen = {group_id}
    current = by_id.get(group_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id in seen:
            break
        parent = by_id.get(current.parent_id)
        if parent is None:
            break
        seen.add(parent.id)
        chain.append(parent)
        current = parent
    chain.reverse()
    return chain


def would_create_cycle(group_id: str, new_parent_id: Optional[str], groups: Iterable[Group]) -> bool:
    """True if making ``new_parent_id`` the parent of ``group_id`` closes a loop."""
    if new_parent_id is None:
        return False
    if new_parent_id == group_id:
        return True
    return any(g.id == group_id for g in ancestor_chain(new_parent_id, groups))


def build_hierarchy(
    groups: Iterable[Group],
    contacts: Iterable[Contact],
    parent_id: Optional[str] = None,
    level: int = 0,
) -> List[GroupNode]:
    """
    Build the forest below ``parent_id`` (the whole forest for ``None``).

    Every group is emitted at most once. Children are ordered by name and each
    node carries its level, direct sub-group count and subtree member count.
    """
    groups = list(groups)
    contacts = list(contacts)
    index = children_index(groups)

    roots: List[GroupNode] = []
    visited: Set[str] = set()
    if parent_id is not None:
        visited.add(parent_id)

    queue = deque((group, level, None) for group in index.get(parent_id, []))
    while queue:
        group, depth, parent_node = queue.popleft()
        if group.id in visited:
            continue
        visited.add(group.id)

        children = index.get(group.id, [])
        node = GroupNode(
            id=group.id,
            name=group.name,
            description=group.description,
            parent_id=group.parent_id,
            level=depth,
            sub_group_count=len(children),
            member_count=member_count(group.id, groups, contacts),
        )
        if parent_node is None:
            roots.append(node)
        else:
            parent_node.children.append(node)

        queue.extend((child, depth + 1, node) for child in children)

    return roots


def filter_hierarchy(nodes: List[GroupNode], term: Optional[str]) -> List[GroupNode]:
    """
    Keep the nodes whose name or description contains ``term``, plus their
    ancestors. Counts still describe the full group, not the filtered view.
    """
    if not term or not term.strip():
        return nodes
    needle = term.strip().casefold()

    def matches(node: GroupNode) -> bool:
        return needle in node.name.casefold() or needle in (node.description or "").casefold()

    def prune(level_nodes: List[GroupNode]) -> List[GroupNode]:
        kept = []
        for node in level_nodes:
            children = prune(node.children)
            if matches(node) or children:
                kept.append(replace(node, children=children))
        return kept

    return prune(nodes)


def flatten_hierarchy(nodes: List[GroupNode]) -> List[GroupNode]:
    """Depth-first pre-order listing of a forest."""
    flat: List[GroupNode] = []
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        flat.append(node)
        stack.extend(reversed(node.children))
    return flat
