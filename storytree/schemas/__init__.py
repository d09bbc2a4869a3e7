"""
JSON Schemas for the files read and written by the storytree stages.

- stories_raw.schema.json: StoriesRaw input (story id -> story record)
- stories_hash.schema.json: StoriesHash output (node id -> root/group/story)
- refs_config.schema.json: refs configuration ({"refs": {id: url}})
"""

import json
from pathlib import Path
from typing import Dict

SCHEMA_DIR = Path(__file__).parent


def load_schema(name: str) -> Dict:
    """Load the schema '<name>.schema.json' from this package."""
    schema_path = SCHEMA_DIR / f"{name}.schema.json"
    with open(schema_path, 'r', encoding='utf-8') as f:
        return json.load(f)
