#!/usr/bin/env python3
"""
Store initialization tool - creates primary store tables and search indices
for every lookup
"""

import os
import sys
import asyncio
import argparse

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config.lookups import get_all_descriptors
from services.container import create_container


async def init_store(drop: bool = False) -> None:
    """
    Create tables and indices for all lookups

    Args:
        drop: Drop existing tables and indices first (all data is lost)
    """
    container = await create_container()
    try:
        for descriptor in get_all_descriptors().values():
            print(f"🔧 Initializing {descriptor.path}")
            if drop:
                await container.primary_store.drop_table(descriptor.table)
                await container.search_index.recreate_index(descriptor.index, descriptor.field_names)
                print(f"🗑️  Dropped and re-created table {descriptor.table} and index {descriptor.index}")
            elif await container.search_index.ensure_index(descriptor.index, descriptor.field_names):
                print(f"📝 Created index {descriptor.index}")
            else:
                print(f"   Index {descriptor.index} already exists")
            await container.primary_store.ensure_table(descriptor.table)
        print("✅ Stores initialized")
    finally:
        await container.close()


def main():
    """Main CLI interface"""
    parser = argparse.ArgumentParser(description="Create lookup tables and search indices")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables and indices first")
    args = parser.parse_args()

    try:
        asyncio.run(init_store(args.drop))
    except Exception as e:
        print(f"❌ Error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
