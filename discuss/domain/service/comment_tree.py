"""Comment tree operations.

Pure functions over a thread (the ordered list of top-level comments).
Every operation returns a new tree and leaves its input untouched.
Subtrees off the path to the target are shared with the input, so a
memoizing render layer sees the same objects for unchanged branches.
Operations that miss their target return the input tree itself.

Walks are iterative: the model asserts no bound on nesting depth.
"""

from collections.abc import Callable, Iterator

from discuss.domain.model.comment import CommentNode, CommentTree
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.value import CommentId

# One step of a path: the siblings and the index within them
_Step = tuple[CommentTree, int]


def _locate(tree: CommentTree, comment_id: CommentId) -> list[_Step] | None:
    """Depth-first search for a node, returning the path from the root."""
    stack: list[tuple[_Step, ...]] = [
        ((tree, index),) for index in reversed(range(len(tree)))
    ]
    while stack:
        path = stack.pop()
        siblings, index = path[-1]
        node = siblings[index]
        if node.id == comment_id:
            return list(path)
        for child_index in reversed(range(len(node.children))):
            stack.append(path + ((node.children, child_index),))
    return None


def _splice(
    siblings: CommentTree, index: int, replacement: CommentNode | None
) -> CommentTree:
    middle = () if replacement is None else (replacement,)
    return (*siblings[:index], *middle, *siblings[index + 1 :])


def _rebuild(path: list[_Step], replacement: CommentNode | None) -> CommentTree:
    """Copy the nodes along a path, swapping in the replacement at its end.

    A replacement of None removes the target together with its subtree.
    """
    siblings, index = path[-1]
    rebuilt = _splice(siblings, index, replacement)

    for siblings, index in reversed(path[:-1]):
        parent = siblings[index].model_copy(update={"children": rebuilt})
        rebuilt = _splice(siblings, index, parent)
    return rebuilt


def _update(
    tree: CommentTree,
    comment_id: CommentId,
    change: Callable[[CommentNode], CommentNode | None],
) -> CommentTree:
    path = _locate(tree, comment_id)
    if path is None:
        return tree
    siblings, index = path[-1]
    return _rebuild(path, change(siblings[index]))


def insert(
    tree: CommentTree, parent_id: CommentId | None, node: CommentNode
) -> CommentTree:
    """Append a comment at the top level or as the last reply of a parent.

    Args:
        tree: Current thread
        parent_id: Parent comment ID (None for a top-level comment)
        node: Comment to append

    Returns:
        Updated thread; the input itself if the parent does not exist
    """
    if parent_id is None:
        return (*tree, node)
    return _update(
        tree,
        parent_id,
        lambda parent: parent.model_copy(
            update={"children": (*parent.children, node)}
        ),
    )


def replace_content(
    tree: CommentTree, comment_id: CommentId, content: str
) -> CommentTree:
    """Replace the text of one comment."""
    return _update(
        tree,
        comment_id,
        lambda node: node.model_copy(update={"content": content}),
    )


def remove(tree: CommentTree, comment_id: CommentId) -> CommentTree:
    """Remove a comment and its whole subtree.

    Replies are removed with their parent, never promoted.
    """
    return _update(tree, comment_id, lambda node: None)


def map_reaction(
    tree: CommentTree, comment_id: CommentId, snapshot: ReactionSnapshot
) -> CommentTree:
    """Attach a new reaction snapshot to exactly one comment."""
    return _update(
        tree,
        comment_id,
        lambda node: node.model_copy(update={"reaction_state": snapshot}),
    )


def find(tree: CommentTree, comment_id: CommentId) -> CommentNode | None:
    """Find a comment anywhere in the thread."""
    path = _locate(tree, comment_id)
    if path is None:
        return None
    siblings, index = path[-1]
    return siblings[index]


def walk(tree: CommentTree) -> Iterator[CommentNode]:
    """Iterate over every comment depth-first, parents before replies."""
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def subtree_ids(node: CommentNode) -> list[CommentId]:
    """IDs of a comment and all of its descendants."""
    return [descendant.id for descendant in walk([node])]


def count(tree: CommentTree) -> int:
    """Total number of comments, replies included."""
    return sum(1 for _ in walk(tree))


def max_depth(tree: CommentTree) -> int:
    """Deepest nesting level; top-level comments are at depth 0."""
    deepest = 0
    stack = [(node, 0) for node in tree]
    while stack:
        node, level = stack.pop()
        deepest = max(deepest, level)
        stack.extend((child, level + 1) for child in node.children)
    return deepest
