"""
Story Tree Library

Builds the navigation tree shown in a component explorer from a flat set
of stories, and merges trees coming from remote sources ("refs").

Modules:
- csf: sanitize ids and split kind strings
- paths: pick a kind splitting policy and resolve a kind into root + groups
- nodes: turn resolved segments into a chain of group records
- tree: accumulate stories into a StoriesHash and resolve component flags
- refs: map, build and namespace trees of remote sources
- store: in-memory state store and configuration provider
"""

__version__ = "1.0.0"
