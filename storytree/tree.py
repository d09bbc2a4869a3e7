#!/usr/bin/env python3
"""
Stories Hash Builder

Builds the navigation tree (StoriesHash) from raw story records (StoriesRaw).

Construction runs in two passes:
1. Accumulate: every story contributes its group chain and its leaf record
   to a provisional mapping, merging groups shared between stories.
2. Resolve: walk the provisional mapping depth-first, inserting each node
   before its descendants and flagging groups whose children are all leaves
   as components.

Input: stories.json (StoriesRaw, story id -> story record)
Output: stories_hash.json (StoriesHash, node id -> root/group/story)

Usage:
    python3 -m storytree.tree stories.json stories_hash.json
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Dict, List, Optional, Set

import jsonschema

from storytree.nodes import InvalidKindError, build_group_chain
from storytree.paths import get_kind_options, resolve_kind, uses_legacy_separators
from storytree.schemas import load_schema

logger = logging.getLogger(__name__)


# =============================================================================
# MERGING
# =============================================================================

def merge_node(existing: Dict, update: Dict) -> Dict:
    """Merge two records for the same node.

    Every field of `update` replaces the one in `existing`, except
    `children`, which becomes the ordered union of both lists.

    Args:
        existing: Record already in the mapping (may be empty)
        update: Newer record for the same id

    Returns:
        New merged dict; neither argument is modified
    """
    merged = {**existing, **update}

    if 'children' in existing and 'children' in update:
        children = list(existing['children'])
        for child in update['children']:
            if child not in children:
                children.append(child)
        merged['children'] = children

    return merged


# =============================================================================
# PASS 1 - ACCUMULATE
# =============================================================================

def accumulate_stories(stories_raw: Dict[str, Dict]) -> Dict[str, Dict]:
    """Fold every story and its group chain into a provisional mapping.

    Args:
        stories_raw: Dict mapping story id -> story record

    Returns:
        Dict mapping node id -> node, in first-discovery order, with
        isComponent not yet resolved

    Raises:
        InvalidKindError: If a kind produces a group with its parent's id
    """
    stories = list(stories_raw.values())
    legacy_kinds = uses_legacy_separators(stories)

    provisional = {}
    for item in stories:
        kind = item.get('kind', '')
        parameters = item.get('parameters')

        root, groups = resolve_kind(kind, get_kind_options(parameters), legacy_kinds)
        chain = build_group_chain(root, groups, parameters, kind)

        path = [group['id'] for group in chain] + [item['id']]
        for index, group in enumerate(chain):
            update = {**group, 'children': [path[index + 1]]}
            provisional[group['id']] = merge_node(provisional.get(group['id'], {}), update)

        story = {'isComponent': False, 'isRoot': False, **item, 'isLeaf': True}
        if chain:
            story['parent'] = chain[-1]['id']
        else:
            logger.warning(f"Story '{item['id']}' has no groups in kind '{kind}', placing it at the top")
        provisional[item['id']] = story

    return provisional


# =============================================================================
# PASS 2 - RESOLVE COMPONENT FLAGS
# =============================================================================

def resolve_flags(provisional: Dict[str, Dict],
                  base: Optional[Dict[str, Dict]] = None) -> Dict[str, Dict]:
    """Insert provisional nodes into the final mapping and set isComponent.

    Nodes already present in `base` are kept as they are and not revisited.

    Args:
        provisional: Output of accumulate_stories()
        base: Existing StoriesHash to build on (not modified)

    Returns:
        New StoriesHash with base nodes first, then new nodes in
        depth-first discovery order
    """
    result = dict(base or {})
    resolved: Set[str] = set(result)

    def add_item(node: Dict) -> None:
        node_id = node['id']
        if node_id in resolved:
            return
        resolved.add(node_id)
        result[node_id] = node

        if node.get('isLeaf') or 'children' not in node:
            return

        child_nodes = []
        for child_id in node['children']:
            child = provisional.get(child_id) or result.get(child_id)
            if child is None:
                logger.warning(f"Node '{node_id}' lists unknown child '{child_id}', skipping it")
                continue
            child_nodes.append(child)

        for child in child_nodes:
            add_item(child)

        node['isComponent'] = all(child.get('isLeaf', False) for child in child_nodes)

    for node in provisional.values():
        add_item(node)

    return result


def transform_stories_raw_to_stories_hash(stories_raw: Dict[str, Dict],
                                          base: Optional[Dict[str, Dict]] = None) -> Dict[str, Dict]:
    """Build a StoriesHash from StoriesRaw (both passes).

    Args:
        stories_raw: Dict mapping story id -> {id, name, kind, children, parameters}
        base: Existing StoriesHash to compose onto

    Returns:
        Dict mapping node id -> root, group or story node

    Raises:
        InvalidKindError: If a kind segment sanitizes to its parent's id
    """
    provisional = accumulate_stories(stories_raw)
    stories_hash = resolve_flags(provisional, base)

    logger.debug(f"Built {len(stories_hash)} nodes from {len(stories_raw)} stories")
    return stories_hash


# =============================================================================
# IO HELPERS
# =============================================================================

def load_stories_raw(input_path: Path, validate: bool = False) -> Dict[str, Dict]:
    """Read a StoriesRaw JSON file, optionally checking it against its schema.

    Raises:
        json.JSONDecodeError: If the file is not valid JSON
        jsonschema.ValidationError: If validate is set and the data doesn't match
    """
    with open(input_path, 'r', encoding='utf-8') as f:
        stories_raw = json.load(f)

    if validate:
        jsonschema.validate(instance=stories_raw, schema=load_schema('stories_raw'))

    return stories_raw


def write_stories_hash(stories_hash: Dict[str, Dict], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(stories_hash, f, indent=2)


def count_nodes(stories_hash: Dict[str, Dict]) -> Dict[str, int]:
    """Count roots, groups, components and stories in a StoriesHash."""
    counts = {'roots': 0, 'groups': 0, 'components': 0, 'stories': 0}
    for node in stories_hash.values():
        if node.get('isLeaf'):
            counts['stories'] += 1
        elif node.get('isRoot'):
            counts['roots'] += 1
        else:
            counts['groups'] += 1
            if node.get('isComponent'):
                counts['components'] += 1
    return counts


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command-line usage."""
    parser = argparse.ArgumentParser(
        description='Build a navigation tree (StoriesHash) from stories.json'
    )
    parser.add_argument('input_json', type=Path, help='Path to stories.json (StoriesRaw)')
    parser.add_argument('output_json', type=Path, help='Path to output stories_hash.json file')
    parser.add_argument('--validate', action='store_true', default=False,
                        help='Validate the input against the StoriesRaw schema')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    if not args.input_json.exists():
        print(f"Error: Input file not found: {args.input_json}", file=sys.stderr)
        return 1

    try:
        stories_raw = load_stories_raw(args.input_json, validate=args.validate)
        stories_hash = transform_stories_raw_to_stories_hash(stories_raw)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.input_json}: {e}", file=sys.stderr)
        return 1
    except jsonschema.ValidationError as e:
        print(f"Error: {args.input_json} doesn't match the StoriesRaw schema: {e.message}", file=sys.stderr)
        return 1
    except InvalidKindError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_stories_hash(stories_hash, args.output_json)

    counts = count_nodes(stories_hash)
    print(f"✓ Built {len(stories_hash)} nodes: {counts['roots']} roots, {counts['groups']} groups "
          f"({counts['components']} components), {counts['stories']} stories", file=sys.stderr)
    print(f"✓ Output: {args.output_json}", file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
