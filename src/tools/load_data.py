#!/usr/bin/env python3
"""
Data loading tool - creates lookup records from a JSON file through the
lookup services, so every record goes through the duplicate check and both stores
"""

import os
import sys
import json
import asyncio
import argparse
from typing import Any, Dict, List

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config.lookups import get_all_descriptors
from services.container import create_container
from utils.errors import ConflictError


async def load_records(service, records: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Create each record, counting outcomes

    Returns:
        Dict with loaded / duplicates / failed counts
    """
    counts = {"loaded": 0, "duplicates": 0, "failed": 0}
    for record in records:
        data = {name: value for name, value in record.items() if name in service.descriptor.field_names}
        for lookup_field in service.descriptor.fields:
            if data.get(lookup_field.name) is None and lookup_field.default is not None:
                data[lookup_field.name] = lookup_field.default
        try:
            await service.create(data)
            counts["loaded"] += 1
        except ConflictError as e:
            print(f"   skipped: {e.message}")
            counts["duplicates"] += 1
        except Exception as e:
            print(f"❌ Failed to load {data}: {str(e)}")
            counts["failed"] += 1
    return counts


async def load_file(lookup: str, path: str) -> Dict[str, int]:
    with open(path, 'r') as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON array of records")

    container = await create_container()
    try:
        service = container.services()[lookup]
        print(f"🚀 Loading {len(records)} {lookup} records from {path}")
        counts = await load_records(service, records)
    finally:
        await container.close()

    print(f"✅ Loaded {counts['loaded']}, duplicates {counts['duplicates']}, failed {counts['failed']}")
    return counts


def main():
    """Main CLI interface"""
    parser = argparse.ArgumentParser(description="Load lookup records from a JSON file")
    parser.add_argument("--lookup", required=True, choices=sorted(get_all_descriptors()), help="Lookup to load")
    parser.add_argument("--file", required=True, help="JSON file holding an array of records")
    args = parser.parse_args()

    try:
        counts = asyncio.run(load_file(args.lookup, args.file))
    except Exception as e:
        print(f"❌ Error: {str(e)}")
        sys.exit(1)
    if counts["failed"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
