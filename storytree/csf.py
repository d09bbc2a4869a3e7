"""
Component Story Format helpers

Pure functions shared by every stage that derives ids from story kinds.

Functions:
- sanitize(string) -> str: Turn a display name into an id fragment
- parse_kind(kind, root_separator, group_separator) -> Tuple: Legacy kind split
"""

import re
from typing import List, Optional, Tuple, Union

Separator = Union[str, re.Pattern]

# Characters that never survive into an id
_UNSAFE_CHARS = re.compile(r"""[\s’–—―′¿'`~!@#$%^&*()_|+\-=?;:",.<>{}\[\]\\/]""")
_DASH_RUNS = re.compile(r'-+')


def sanitize(string: str) -> str:
    """Turn an arbitrary name into a stable, lower-case id fragment.

    Args:
        string: Display name such as 'Components/Button Primary'

    Returns:
        Id fragment such as 'components-button-primary'
    """
    result = _UNSAFE_CHARS.sub('-', string.lower())
    result = _DASH_RUNS.sub('-', result)
    return result.strip('-')


def split_on(value: str, separator: Separator) -> List[str]:
    """Split on a literal string or a compiled pattern."""
    if isinstance(separator, str):
        return value.split(separator)
    return separator.split(value)


def parse_kind(kind: str, root_separator: Separator,
               group_separator: Separator) -> Tuple[Optional[str], List[str]]:
    """Split a kind using the legacy root/group separators.

    Only the first two pieces around the root separator are looked at, so
    'A|B|C' yields root 'A' and the groups of 'B'.

    Args:
        kind: Kind string, e.g. 'Addon|Forms/Input'
        root_separator: Separator between root and groups
        group_separator: Separator between groups

    Returns:
        Tuple of (root, groups) where root is None when nothing follows
        the root separator and groups never contains empty strings
    """
    pieces = split_on(kind, root_separator)
    if len(pieces) > 1 and pieces[1]:
        root, remainder = pieces[0], pieces[1]
    else:
        root, remainder = None, kind

    groups = [group for group in split_on(remainder, group_separator) if group]
    return root, groups
