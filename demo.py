#!/usr/bin/env python3
"""
Demo script showcasing termfs.

This demonstrates:
1. Building a namespace from the starter layout
2. Path navigation, reads and writes
3. Copy, move and rename with identity semantics
4. Search, statistics and JSON export
"""

import logging

from termfs import Namespace, CyclicMove, PathNotFound, format_tree


def demo_navigation(ns: Namespace):
    """Demonstrate navigation and file contents."""
    print("=== Navigation Demo ===")
    print()

    ns.change_directory('/home/demo')
    print(f"cwd: {ns.current_path()}")
    for node in ns.list(show_hidden=True):
        print(f"  {node.name:<20} {node.kind:<8} {node.permissions}  size={node.size}")

    ns.write_file('notes.txt', 'hello')
    ns.write_file('notes.txt', '!', append=True)
    print(f"\nnotes.txt: {ns.read_file('notes.txt')!r}")

    ns.change_directory('../..')
    print(f"after cd ../..: {ns.current_path()}")


def demo_restructuring(ns: Namespace):
    """Demonstrate mkdir, copy, move and rename."""
    print("\n=== Restructuring Demo ===")
    print()

    ns.mkdir('/srv/app/static')
    original = ns.resolve('/srv/app')

    ns.copy('/srv/app', '/tmp')
    copied = ns.resolve('/tmp/app')
    print(f"copy has fresh identity: {copied.uid != original.uid}")

    ns.move('/srv/app', '/var')
    print(f"move keeps identity: {ns.resolve('/var/app') is original}")

    try:
        ns.move('/var', '/var/app/static')
    except CyclicMove as e:
        print(f"refused: {e}")

    ns.rename('/var/app', 'webapp')
    try:
        ns.resolve('/var/app')
    except PathNotFound as e:
        print(f"old path gone: {e}")

    print("\n/ (directories):")
    print(format_tree(ns.tree.root))


def demo_queries(ns: Namespace):
    """Demonstrate search, stats and export."""
    print("\n=== Query Demo ===")
    print()

    print("*.conf:", [n.absolute_path() for n in ns.search('*.conf')])
    print("stats:", ns.stats())
    print(f"JSON export: {len(ns.to_json())} characters")


def main():
    logging.basicConfig(level=logging.WARNING)
    ns = Namespace.with_default_layout()
    demo_navigation(ns)
    demo_restructuring(ns)
    demo_queries(ns)


if __name__ == "__main__":
    main()
