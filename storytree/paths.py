"""
Kind path resolution

Splits a story kind into an optional root segment and an ordered list of
group segments. Three policies exist for backwards compatibility:

1. Explicit hierarchySeparator / hierarchyRootSeparator options (deprecated)
2. Implicit legacy separators, when any kind still uses '|' or '.'
3. Plain '/' splitting, with showRoots promoting the first segment to a root

Functions:
- uses_legacy_separators(stories) -> bool: Detect '|' or '.' in any kind
- get_kind_options(parameters) -> Dict: Read the separator options of a story
- resolve_kind(kind, options, legacy_kinds) -> Tuple: Root and groups
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from storytree.csf import parse_kind
from storytree import deprecations

LEGACY_ROOT_SEPARATOR = '|'
LEGACY_GROUP_SEPARATOR = re.compile(r'/|\.')
LEGACY_SEPARATORS = re.compile(r'\.|\|')
GROUP_SEPARATOR = '/'


def uses_legacy_separators(stories: Iterable[Dict]) -> bool:
    """Return True if any story kind contains '|' or '.'."""
    return any(LEGACY_SEPARATORS.search(story.get('kind', '')) for story in stories)


def get_kind_options(parameters: Optional[Dict]) -> Dict:
    """Extract the kind splitting options from story parameters.

    Missing or malformed parameters fall back to no options at all, which
    selects plain '/' splitting without a root.
    """
    if not isinstance(parameters, dict):
        return {}
    options = parameters.get('options')
    if not isinstance(options, dict):
        return {}
    return {
        key: options[key]
        for key in ('hierarchyRootSeparator', 'hierarchySeparator', 'showRoots')
        if options.get(key) is not None
    }


def resolve_kind(kind: str, options: Dict,
                 legacy_kinds: bool = False) -> Tuple[Optional[str], List[str]]:
    """Resolve a kind into (root, groups).

    Args:
        kind: Kind string, e.g. 'Components/Button'
        options: Output of get_kind_options() for the story
        legacy_kinds: Whether any story in the same input uses '|' or '.'

    Returns:
        Tuple of (root, groups); root is None when no distinguished root applies
    """
    root_separator = options.get('hierarchyRootSeparator')
    group_separator = options.get('hierarchySeparator')
    show_roots = options.get('showRoots')
    using_show_roots = show_roots is not None

    if root_separator is not None or group_separator is not None:
        deprecations.warn_removing_hierarchy_separators()
        if using_show_roots:
            deprecations.warn_using_hierarchy_separators_and_show_roots()
        return parse_kind(
            kind,
            root_separator or LEGACY_ROOT_SEPARATOR,
            group_separator or LEGACY_GROUP_SEPARATOR,
        )

    if legacy_kinds and not using_show_roots:
        deprecations.warn_changing_default_hierarchy_separators()
        return parse_kind(kind, LEGACY_ROOT_SEPARATOR, LEGACY_GROUP_SEPARATOR)

    parts = kind.split(GROUP_SEPARATOR)
    if show_roots and len(parts) > 1:
        return parts[0], parts[1:]
    return None, parts
