#!/usr/bin/env python3
"""
Index rebuild tool - recreates a lookup's search index from the primary store.
Repair path for records left diverged by a failed rollback.
"""

import os
import sys
import asyncio
import argparse

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config.lookups import get_all_descriptors, get_descriptor
from services.container import create_container


async def rebuild_index(primary_store, search_index, descriptor) -> int:
    """Recreate the index and copy every primary store row into it, soft deleted rows included"""
    records = await primary_store.scan(descriptor.table)
    await search_index.recreate_index(descriptor.index, descriptor.field_names)
    for record in records:
        await search_index.create(descriptor.index, record["id"], record)
    return len(records)


async def run(lookup: str) -> int:
    descriptor = get_descriptor(lookup)
    container = await create_container()
    try:
        print(f"🔧 Rebuilding index {descriptor.index} from table {descriptor.table}")
        count = await rebuild_index(container.primary_store, container.search_index, descriptor)
    finally:
        await container.close()
    print(f"✅ Re-indexed {count} records")
    return count


def main():
    """Main CLI interface"""
    parser = argparse.ArgumentParser(description="Rebuild a lookup search index from the primary store")
    parser.add_argument("--lookup", required=True, choices=sorted(get_all_descriptors()), help="Lookup to rebuild")
    args = parser.parse_args()

    try:
        asyncio.run(run(args.lookup))
    except Exception as e:
        print(f"❌ Error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
