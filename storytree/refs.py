#!/usr/bin/env python3
"""
Refs: trees of stories from remote sources

A ref is a separately built story tree identified by an id and reachable at
a url. Before a ref's stories join the local tree they are:

1. Mapped: each story goes through a mapper (default: prefix the kind with
   the ref id), and stories the mapper rejects are dropped
2. Built: the usual two-pass StoriesHash construction
3. Namespaced: every id, parent and child becomes '<ref id>_<id>', and the
   original id is kept as knownAs so commands can be routed back

Input: stories.json of the ref (StoriesRaw)
Output: namespaced StoriesHash for that ref

Usage:
    python3 -m storytree.refs storybookjs stories.json ref_hash.json --url https://example.com/
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Callable, Dict, List, Optional

import jsonschema

from storytree.nodes import InvalidKindError
from storytree.store import ConfigProvider, Store
from storytree.tree import (
    load_stories_raw,
    transform_stories_raw_to_stories_hash,
    write_stories_hash,
)

logger = logging.getLogger(__name__)

# Separator between ref id and original id in namespaced ids
NAMESPACE_SEPARATOR = '_'

Mapper = Callable[[Dict, Dict], Optional[Dict]]


# =============================================================================
# SOURCE TYPE
# =============================================================================

def get_source_type(source: str, origin: str, pathname: str) -> str:
    """Tell whether a story source url is the local preview or an external ref.

    Args:
        source: Url a story message came from
        origin: Origin of the manager, e.g. 'http://localhost:6006'
        pathname: Path of the manager, e.g. '/'

    Returns:
        'local' or 'external'
    """
    if source == origin or source == f"{origin}{pathname}iframe.html":
        return 'local'
    return 'external'


# =============================================================================
# MAPPING
# =============================================================================

def default_mapper(ref: Dict, story: Dict) -> Dict:
    """Prefix a story's kind with the ref id.

    Only the first '|' of the kind becomes '/'; later ones are left as-is.
    """
    kind = story['kind'].replace('|', '/', 1)
    return {**story, 'kind': f"{ref['id']}/{kind}"}


def map_stories(stories_raw: Dict[str, Dict], ref: Dict,
                mapper: Optional[Mapper] = None) -> Dict[str, Dict]:
    """Apply a mapper to every story of a ref.

    Args:
        stories_raw: StoriesRaw of the ref
        ref: Ref descriptor {id, url}
        mapper: Called as mapper(ref, story); a falsy result drops the story.
            Without a mapper the stories pass through unchanged.

    Returns:
        New StoriesRaw with the mapped stories, keyed by their original ids
    """
    output = {}
    for story_id, story in stories_raw.items():
        mapped = mapper(ref, story) if mapper else story
        if mapped:
            output[story_id] = mapped
        else:
            logger.debug(f"Mapper dropped story '{story_id}' of ref '{ref['id']}'")
    return output


# =============================================================================
# NAMESPACING
# =============================================================================

def namespace_id(ref_id: str, node_id: str) -> str:
    return f"{ref_id}{NAMESPACE_SEPARATOR}{node_id}"


def namespace_stories(stories_hash: Dict[str, Dict], ref: Dict) -> Dict[str, Dict]:
    """Move every node of a ref's tree into the ref's id namespace.

    Args:
        stories_hash: StoriesHash built from the ref's mapped stories
        ref: Ref descriptor {id, url}; each node keeps a reference to it

    Returns:
        New StoriesHash where id, parent and children carry the
        '<ref id>_' prefix and knownAs holds the original id
    """
    ref_id = ref['id']
    output = {}
    for node_id, node in stories_hash.items():
        if not node:
            continue

        mapped_id = namespace_id(ref_id, node['id'])
        mapped = {
            **node,
            'id': mapped_id,
            'knownAs': node_id,
            'ref': ref,
        }
        if node.get('parent') is not None:
            mapped['parent'] = namespace_id(ref_id, node['parent'])
        if node.get('children') is not None:
            mapped['children'] = [namespace_id(ref_id, child) for child in node['children']]

        output[mapped_id] = mapped
    return output


def split_namespaced_id(namespaced_id: str) -> List[str]:
    """Split '<ref id>_<original id>' back into [ref id, original id]."""
    return namespaced_id.split(NAMESPACE_SEPARATOR, 1)


def build_ref_stories_hash(stories_raw: Dict[str, Dict], ref: Dict,
                           mapper: Optional[Mapper] = default_mapper) -> Dict[str, Dict]:
    """Run map -> build -> namespace for one ref."""
    mapped = map_stories(stories_raw, ref, mapper)
    return namespace_stories(transform_stories_raw_to_stories_hash(mapped), ref)


# =============================================================================
# REFS API
# =============================================================================

class RefsApi:
    """
    Keeps the trees of all refs in the store's 'refs' entry.

    State layout:
        {'refs': {ref_id: {'id': ref_id, 'url': url, 'data': StoriesHash}}}
    """

    def __init__(self, store: Store, provider: ConfigProvider):
        self.store = store
        self.provider = provider

    def get_refs(self) -> Dict[str, str]:
        """Return the registered refs as {ref id: url}."""
        return self.provider.get_config().get('refs') or {}

    def initial_state(self) -> Dict[str, Dict]:
        """State for every registered ref, with empty trees."""
        return {
            'refs': {
                ref_id: {'id': ref_id, 'url': url, 'data': {}}
                for ref_id, url in self.get_refs().items()
            }
        }

    def set_ref(self, ref_id: str, stories_raw: Dict[str, Dict]) -> Dict[str, Dict]:
        """Rebuild the tree of one ref and replace it in the store.

        Args:
            ref_id: Id of the ref that reported new stories
            stories_raw: Full StoriesRaw of that ref

        Returns:
            The ref's new namespaced StoriesHash

        Raises:
            InvalidKindError: If one of the ref's kinds is malformed
        """
        url = self.get_refs().get(ref_id)
        if url is None:
            logger.warning(f"Ref '{ref_id}' is not registered, storing it without a url")
        ref = {'id': ref_id, 'url': url}

        mapper = self.provider.get_config().get('mapper') or default_mapper
        data = build_ref_stories_hash(stories_raw, ref, mapper)

        entry = {'id': ref_id, 'url': url, 'data': data}
        self.store.update_state(
            lambda state: {'refs': {**(state.get('refs') or {}), ref_id: entry}}
        )

        logger.info(f"Ref '{ref_id}' updated with {len(data)} nodes")
        return data


def init_refs_api(store: Store, provider: ConfigProvider) -> RefsApi:
    """Create the refs API and seed the store with the registered refs."""
    api = RefsApi(store, provider)
    store.set_state(api.initial_state())
    return api


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command-line usage."""
    parser = argparse.ArgumentParser(
        description="Build the namespaced tree of a ref from its stories.json"
    )
    parser.add_argument('ref_id', help='Id of the ref, used as namespace prefix')
    parser.add_argument('input_json', type=Path, help="Path to the ref's stories.json (StoriesRaw)")
    parser.add_argument('output_json', type=Path, help='Path to output ref_hash.json file')
    parser.add_argument('--url', help='Url of the ref (overrides --config)')
    parser.add_argument('--config', type=Path,
                        help='JSON file with {"refs": {id: url}} registrations')
    parser.add_argument('--validate', action='store_true', default=False,
                        help='Validate the input against the StoriesRaw schema')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    for path in (args.input_json, args.config):
        if path is not None and not path.exists():
            print(f"Error: Input file not found: {path}", file=sys.stderr)
            return 1

    try:
        provider = ConfigProvider.from_file(args.config) if args.config else ConfigProvider()
        if args.url:
            refs = {**provider.get_config().get('refs', {}), args.ref_id: args.url}
            provider = ConfigProvider({**provider.get_config(), 'refs': refs})

        store = Store()
        api = init_refs_api(store, provider)
        data = api.set_ref(args.ref_id, load_stories_raw(args.input_json, validate=args.validate))
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1
    except jsonschema.ValidationError as e:
        print(f"Error: Schema validation failed: {e.message}", file=sys.stderr)
        return 1
    except InvalidKindError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_stories_hash(data, args.output_json)

    print(f"✓ Ref '{args.ref_id}' built with {len(data)} nodes", file=sys.stderr)
    print(f"✓ Output: {args.output_json}", file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
