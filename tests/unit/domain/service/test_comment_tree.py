"""Unit tests for comment tree operations."""

from discuss.domain.model import ReactionSnapshot
from discuss.domain.service import comment_tree
from discuss.domain.value import CommentId, ReactionCategory
from tests.conftest import make_node, make_snapshot


def _ids(tree) -> list[str]:
    return [str(node.id) for node in comment_tree.walk(tree)]


class TestInsert:
    """Tests for insert."""

    def test_reply_under_reply(self):
        """Replies should nest below their parent at any depth."""
        # Arrange
        liked = make_snapshot(("u1", ReactionCategory.LIKE))
        a = make_node("A", reaction_state=liked)
        tree = [a]

        # Act
        tree = comment_tree.insert(tree, CommentId("A"), make_node("B"))
        tree = comment_tree.insert(tree, CommentId("B"), make_node("C"))

        # Assert
        root = tree[0]
        assert [str(n.id) for n in root.children] == ["B"]
        assert [str(n.id) for n in root.children[0].children] == ["C"]
        assert comment_tree.max_depth(tree) == 2
        assert root.reaction_state == a.reaction_state

    def test_top_level_appends_at_end(self):
        """A comment without parent should go last at the top level."""
        tree = [make_node("A")]

        result = comment_tree.insert(tree, None, make_node("B"))

        assert [str(n.id) for n in result] == ["A", "B"]
        assert [str(n.id) for n in tree] == ["A"]

    def test_reply_appended_after_existing_replies(self):
        """A new reply should go after its siblings."""
        tree = [make_node("A", make_node("B"))]

        result = comment_tree.insert(tree, CommentId("A"), make_node("C"))

        assert [str(n.id) for n in result[0].children] == ["B", "C"]

    def test_missing_parent_is_noop(self):
        """Inserting under an unknown parent should return the input tree."""
        tree = [make_node("A")]

        result = comment_tree.insert(tree, CommentId("missing"), make_node("B"))

        assert result is tree

    def test_unrelated_subtrees_shared(self):
        """Nodes off the path to the target should be the same objects."""
        # Arrange
        untouched = make_node("X", make_node("Y"))
        tree = [make_node("A", make_node("B")), untouched]

        # Act
        result = comment_tree.insert(tree, CommentId("B"), make_node("C"))

        # Assert
        assert result[1] is untouched
        assert tree[0].children[0].children == ()
        assert _ids(result) == ["A", "B", "C", "X", "Y"]


class TestRemove:
    """Tests for remove."""

    def test_delete_cascades(self):
        """Removing a node should remove its whole subtree."""
        # Arrange
        tree = [make_node("A", make_node("B", make_node("C")))]

        # Act
        result = comment_tree.remove(tree, CommentId("B"))

        # Assert
        assert len(result) == 1
        assert result[0].children == ()
        assert comment_tree.find(result, CommentId("C")) is None

    def test_remove_top_level(self):
        """Removing a root should keep its siblings in order."""
        tree = [make_node("A"), make_node("B"), make_node("C")]

        result = comment_tree.remove(tree, CommentId("B"))

        assert [str(n.id) for n in result] == ["A", "C"]
        assert result[0] is tree[0]
        assert result[1] is tree[2]

    def test_remove_missing_is_noop(self):
        """Removing an absent node should return the input tree."""
        tree = [make_node("A")]

        assert comment_tree.remove(tree, CommentId("gone")) is tree


class TestReplaceContentAndMapReaction:
    """Tests for replace_content and map_reaction."""

    def test_replace_content_touches_only_target(self):
        """Only the target's content should change."""
        # Arrange
        sibling = make_node("S", content="keep")
        tree = [make_node("A", make_node("B", content="old"), sibling)]

        # Act
        result = comment_tree.replace_content(tree, CommentId("B"), "new")

        # Assert
        assert comment_tree.find(result, CommentId("B")).content == "new"
        assert result[0].children[1] is sibling
        assert result[0].content == tree[0].content
        assert comment_tree.find(tree, CommentId("B")).content == "old"

    def test_map_reaction_replaces_snapshot(self):
        """The target should carry the new snapshot, nothing else changes."""
        # Arrange
        tree = [make_node("A", make_node("B")), make_node("C")]
        snapshot = make_snapshot(("u1", ReactionCategory.WOW))

        # Act
        result = comment_tree.map_reaction(tree, CommentId("B"), snapshot)

        # Assert
        assert comment_tree.find(result, CommentId("B")).reaction_state == snapshot
        assert result[0].reaction_state == ReactionSnapshot.empty()
        assert result[1] is tree[1]


class TestTraversal:
    """Tests for find, walk, count and depth."""

    def test_walk_is_preorder(self):
        """Parents should come before their replies, siblings in order."""
        tree = [
            make_node("A", make_node("B", make_node("C")), make_node("D")),
            make_node("E"),
        ]

        assert _ids(tree) == ["A", "B", "C", "D", "E"]
        assert comment_tree.count(tree) == 5
        assert comment_tree.max_depth(tree) == 2

    def test_subtree_ids(self):
        """subtree_ids should list the node and all descendants."""
        node = make_node("A", make_node("B", make_node("C")), make_node("D"))

        assert [str(i) for i in comment_tree.subtree_ids(node)] == ["A", "B", "C", "D"]

    def test_empty_tree(self):
        """An empty thread should have no comments and depth zero."""
        assert comment_tree.count([]) == 0
        assert comment_tree.max_depth([]) == 0
        assert comment_tree.find([], CommentId("A")) is None

    def test_deep_nesting(self):
        """Very deep threads should not hit recursion limits."""
        # Arrange
        depth = 2000
        node = make_node(f"n{depth - 1}")
        for level in reversed(range(depth - 1)):
            node = make_node(f"n{level}", node)
        tree = [node]

        # Act
        found = comment_tree.find(tree, CommentId(f"n{depth - 1}"))
        trimmed = comment_tree.remove(tree, CommentId("n1"))

        # Assert
        assert found is not None
        assert comment_tree.max_depth(tree) == depth - 1
        assert comment_tree.count(trimmed) == 1
