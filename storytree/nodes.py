"""
Group chain construction

Turns the resolved segments of one kind into an ordered chain of group
records, deriving each id from its parent's id.

Functions:
- derive_id(name, parent) -> str: Id of a segment below a parent
- build_group_chain(root, groups, parameters, kind) -> List[Dict]: Group records
"""

from typing import Dict, List, Optional

from storytree.csf import sanitize


class InvalidKindError(ValueError):
    """A kind segment produced the same id as its parent group."""

    def __init__(self, kind: str, name: str, node_id: str):
        self.kind = kind
        self.name = name
        self.node_id = node_id
        super().__init__(
            f"Invalid part '{name}', leading to id === parentId ('{node_id}'), inside kind '{kind}'\n\n"
            f"Did you create a path that uses the separator char accidentally, "
            f"such as 'Vue <docs/>' where '/' is a separator char?"
        )


def derive_id(name: str, parent: Optional[str] = None) -> str:
    """Derive a node id: sanitize(parent + '-' + name), or sanitize(name) at the top."""
    if parent:
        return sanitize(f"{parent}-{name}")
    return sanitize(name)


def build_group_chain(root: Optional[str], groups: List[str],
                      parameters: Optional[Dict], kind: str) -> List[Dict]:
    """Build the group records for one story, top-most first.

    Args:
        root: Distinguished root segment, or None/'' when there is none
        groups: Ordered group segments
        parameters: Parameters of the story the chain belongs to
        kind: Original kind string, used in error messages

    Returns:
        List of group dicts with id, name, depth, children, isComponent,
        isRoot, isLeaf, parameters and (below the top) parent

    Raises:
        InvalidKindError: If a derived id equals its parent's id
    """
    names = ([root] if root else []) + list(groups)

    chain = []
    for depth, name in enumerate(names):
        parent = chain[depth - 1]['id'] if depth > 0 else None
        node_id = derive_id(name, parent)
        if parent == node_id:
            raise InvalidKindError(kind, name, node_id)

        group = {
            'id': node_id,
            'name': name,
            'depth': depth,
            'children': [],
            'isComponent': False,
            'isLeaf': False,
            'isRoot': bool(root) and depth == 0,
            'parameters': parameters,
        }
        if parent is not None:
            group['parent'] = parent
        chain.append(group)

    return chain
