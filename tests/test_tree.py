#!/usr/bin/env python3
"""
Unit tests for Tree - insert/delete, search, traversal, stats and records.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from termfs.tree import Tree, TreeStats
from termfs.node import Node
from termfs.errors import InvalidArgument, NotADirectory, ParentNotFound, PathNotFound


@pytest.fixture
def tree():
    """
    /
      a/
        a1
        a2/
          deep
      b/
      c.txt
    """
    tree = Tree()
    root = tree.insert('/', properties={'kind': 'dir'})
    a = tree.insert('a', root, {'kind': 'dir'})
    tree.insert('a1', a, {'payload': 'one'})
    a2 = tree.insert('a2', a, {'kind': 'dir'})
    tree.insert('deep', a2)
    tree.insert('b', root, {'kind': 'dir'})
    tree.insert('c.txt', root, {'payload': 'see'})
    return tree


class TestTreeInsert:
    """Root creation and parent specifications."""

    def test_first_insert_becomes_root(self):
        tree = Tree()
        assert tree.is_empty
        root = tree.insert('root', properties={'kind': 'dir'})
        assert tree.root is root
        assert not tree.is_empty

    def test_second_root_rejected(self, tree):
        with pytest.raises(ParentNotFound):
            tree.insert('other')

    def test_parent_by_reference(self, tree):
        b = tree.find_first('b')
        node = tree.insert('x', b)
        assert node.parent is b

    def test_parent_by_pattern_uses_first_match(self, tree):
        node = tree.insert('x', 'a*', {'kind': 'file'})
        assert node.parent.name == 'a'

    def test_parent_by_candidate_list(self, tree):
        b = tree.find_first('b')
        a = tree.find_first('a')
        node = tree.insert('x', [b, a])
        assert node.parent is b

    def test_parent_not_found(self, tree):
        with pytest.raises(ParentNotFound):
            tree.insert('x', 'missing')
        with pytest.raises(ParentNotFound):
            tree.insert('x', [])

    def test_parent_must_be_directory(self, tree):
        with pytest.raises(NotADirectory):
            tree.insert('x', 'c.txt')

    def test_missing_name(self, tree):
        with pytest.raises(InvalidArgument):
            tree.insert('', tree.root)

    def test_attach_detached_subtree(self, tree):
        sub = Node('sub', 'dir')
        sub.insert(Node('leaf'))
        tree.attach(sub, tree.find_first('b'))
        assert tree.find_first('leaf').absolute_path() == '/b/sub/leaf'


class TestTreeDelete:
    """Deletion by reference and by pattern."""

    def test_delete_by_reference(self, tree):
        a1 = tree.find_first('a1')
        assert tree.delete(a1) == 1
        assert tree.search('a1') == []
        assert a1.parent is None

    def test_delete_by_pattern_removes_all_matches(self, tree):
        tree.insert('a1', 'b')
        assert tree.delete('a1') == 2
        assert tree.search('a1') == []

    def test_delete_root_empties_tree(self, tree):
        assert tree.delete(tree.root) == 1
        assert tree.is_empty
        assert tree.search('*') == []

    def test_delete_nothing_matched(self, tree):
        with pytest.raises(PathNotFound):
            tree.delete('nope')

    def test_deleted_subtree_stays_coherent(self, tree):
        a = tree.find_first('a')
        tree.delete(a)
        assert a.find_by_name('a2').find_by_name('deep').absolute_path() == '/a2/deep'


class TestTreeTraversal:
    """BFS, DFS and levels."""

    def test_dfs_preorder(self, tree):
        seen = []
        tree.traverse_dfs(lambda n: seen.append(n.name))
        assert seen == ['/', 'a', 'a1', 'a2', 'deep', 'b', 'c.txt']

    def test_bfs_level_order(self, tree):
        seen = []
        tree.traverse_bfs(lambda n: seen.append(n.name))
        assert seen == ['/', 'a', 'b', 'c.txt', 'a1', 'a2', 'deep']

    def test_traversal_of_empty_tree(self):
        seen = []
        Tree().traverse_dfs(seen.append)
        Tree().traverse_bfs(seen.append)
        assert seen == []

    def test_levels(self, tree):
        levels = [[n.name for n in level] for level in tree.levels()]
        assert levels == [['/'], ['a', 'b', 'c.txt'], ['a1', 'a2'], ['deep']]
        assert Tree().levels() == []


class TestTreeStats:
    """Node count, depth and leaves."""

    def test_stats(self, tree):
        assert tree.stats() == TreeStats(node_count=7, max_depth=3, leaf_count=4)

    def test_empty_stats(self):
        assert Tree().stats().to_dict() == {'node_count': 0, 'max_depth': 0, 'leaf_count': 0}

    def test_str(self, tree):
        assert str(tree) == "Tree(root: /, nodes: 7, depth: 3)"
        assert str(Tree()) == "Empty Tree"


class TestTreeRecords:
    """Whole-tree record round trip."""

    def test_round_trip_preserves_shape_and_metadata(self, tree):
        record = tree.to_record()
        rebuilt = Tree.from_record(record)
        assert rebuilt.to_record() == record
        assert rebuilt.root is not tree.root
        assert rebuilt.root.uid != tree.root.uid

    def test_empty_round_trip(self):
        assert Tree().to_record() is None
        assert Tree.from_record(None).is_empty

    def test_clear(self, tree):
        tree.clear()
        assert tree.is_empty
