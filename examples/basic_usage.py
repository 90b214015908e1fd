#!/usr/bin/env python3
"""
Basic usage examples for Article History.

This script demonstrates the fundamental operations:
- Recording versions of a document
- Forking the history from an older version
- Reading the main branch and rebuilding text
- Saving and reloading the unordered version collection
"""

import os
import sys
import json

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from history_core import Version, VersionManager, VersionNotFoundError, new_version


def build_history() -> VersionManager:
    """Record a short linear history, then fork it."""
    print("📝 Recording versions...")
    manager = VersionManager()

    first = new_version("", "Python is a language.")
    manager.add_version(first)

    second = new_version("Python is a language.", "Python is a programming language.", first.id)
    manager.add_version(second)

    # A concurrent edit based on the first version creates a second lineage
    fork = new_version("Python is a language.", "Python is a snake.", first.id)
    manager.add_version(fork)

    print(f"✅ {len(manager)} versions, {len(manager.get_leaves())} branch tips")
    return manager


def show_main_branch(manager: VersionManager):
    """Print the main branch and the text at its tip."""
    print("\n📜 Main branch:")
    for version in manager.get_main_branch():
        print(f"   {version.id} (parent: {version.parent})")
    print(f"   Text: {manager.compile_text()!r}")

    for leaf in manager.get_leaves():
        print(f"🌿 Tip {leaf}: {manager.compile_text(leaf)!r}")


def round_trip(manager: VersionManager) -> VersionManager:
    """Serialize the versions and load them back."""
    print("\n💾 Serializing versions...")
    payload = json.dumps([version.to_dict() for version in manager.get_all_versions()])
    restored = VersionManager(Version.from_dict(item) for item in json.loads(payload))
    print(f"✅ Restored main branch tip: {restored.last_version}")
    return restored


def main():
    manager = build_history()
    show_main_branch(manager)
    restored = round_trip(manager)
    assert restored.compile_text() == manager.compile_text()

    try:
        manager.get_branch("missing")
    except VersionNotFoundError as e:
        print(f"\n❌ Expected failure ({e.kind.value}): {e}")


if __name__ == "__main__":
    main()
