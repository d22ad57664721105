#!/usr/bin/env python3
"""
Backfill default outline structure for passages that have none.

Every passage is expected to own at least one column, section and segment
anchored at its first word. Passages created before the outline tables
existed are missing them; this script creates the default set.
"""

import os
import sys

# Add parent directory to path to import outline_api modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from outline_api.database import transaction
from outline_api.repositories.passage import PassageRepository
from outline_api.services.structure_service import get_structure_service


def backfill_passage_structures(dry_run=True):
    """
    Create the default column/section/segment for bare passages.

    Args:
        dry_run: If True, only show what would be done without making changes
    """

    print("=" * 70)
    print("Passage Structure Backfill Script")
    print("=" * 70)
    print()

    if dry_run:
        print("🔍 DRY RUN MODE - No changes will be made to the database")
    else:
        print("⚠️  LIVE MODE - Changes will be committed to the database")
    print()

    service = get_structure_service()

    with transaction() as cur:
        passages = PassageRepository.list_passages_without_structure(cur)
        print(f"Found {len(passages)} passages without structure")
        print()

        if not passages:
            print("✓ Every passage already has a structure!")
            return

        for i, passage in enumerate(passages[:10], 1):
            first_word = service.first_word_id(
                passage['testament'], passage['book_id'], passage['from_chapter'], passage['from_verse']
            )
            print(f"  {i}. Passage {passage['id']} ({passage['book_name']}): starts at {first_word}")

        if len(passages) > 10:
            print(f"  ... and {len(passages) - 10} more passages")
        print()

        if dry_run:
            print("✓ Dry run complete. Run with --live to apply changes.")
            return

        print("Creating structures...")
        created_count = 0
        for passage in passages:
            service.create_default_passage_structure(
                passage['id'],
                passage['testament'],
                passage['book_id'],
                passage['from_chapter'],
                passage['from_verse'],
                cur=cur,
            )
            created_count += 1

            if created_count % 50 == 0:
                print(f"  Progress: {created_count}/{len(passages)} passages...")

    print()
    print("=" * 70)
    print("✓ Backfill Complete!")
    print("=" * 70)
    print(f"Created {created_count} column(s), {created_count} section(s) and {created_count} segment(s)")
    print()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Create default outline structure for passages that have none"
    )
    parser.add_argument(
        '--live',
        action='store_true',
        help='Actually perform the backfill (default is dry-run mode)'
    )

    args = parser.parse_args()

    try:
        backfill_passage_structures(dry_run=not args.live)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
