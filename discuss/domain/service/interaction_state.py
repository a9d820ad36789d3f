"""Per-viewer, per-node interaction state of a rendered thread.

This is view state, kept apart from the comment data: which reply
composer, menu, picker or editor is open, which subtrees are expanded,
and unsent drafts. Nothing here is persisted.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from discuss.domain.value import CommentId, EntityId


@dataclass
class ThreadInteractionState:
    """Interaction state keyed by comment (or post) id.

    Attributes:
        reply_composer_open_for: Comment whose reply box is open (one at a time)
        overflow_menu_open: Edit/delete menu open flags
        subtree_expanded: Reply visibility flags
        picker_open: Reaction picker open flags (posts and comments)
        editing: Comment currently in edit mode (one at a time)
        edit_drafts: Unsaved edit text per comment
        reply_drafts: Unsent reply text per comment
        composer_visible: Whether the top-level comment box is shown
        composer_draft: Unsent top-level comment text
    """

    reply_composer_open_for: CommentId | None = None
    overflow_menu_open: dict[CommentId, bool] = field(default_factory=dict)
    subtree_expanded: dict[CommentId, bool] = field(default_factory=dict)
    picker_open: dict[EntityId, bool] = field(default_factory=dict)
    editing: CommentId | None = None
    edit_drafts: dict[CommentId, str] = field(default_factory=dict)
    reply_drafts: dict[CommentId, str] = field(default_factory=dict)
    composer_visible: bool = True
    composer_draft: str = ""

    def toggle_reply_composer(self, comment_id: CommentId) -> None:
        """Open the reply box under a comment, or close it if already open."""
        if self.reply_composer_open_for == comment_id:
            self.reply_composer_open_for = None
        else:
            self.reply_composer_open_for = comment_id

    def toggle_overflow_menu(self, comment_id: CommentId) -> None:
        self.overflow_menu_open[comment_id] = not self.overflow_menu_open.get(
            comment_id, False
        )

    def toggle_subtree(self, comment_id: CommentId) -> None:
        self.subtree_expanded[comment_id] = not self.subtree_expanded.get(
            comment_id, False
        )

    def is_expanded(self, comment_id: CommentId) -> bool:
        return self.subtree_expanded.get(comment_id, False)

    def set_picker(self, entity_id: EntityId, open_: bool) -> None:
        self.picker_open[entity_id] = open_

    def is_picker_open(self, entity_id: EntityId) -> bool:
        return self.picker_open.get(entity_id, False)

    def begin_edit(self, comment_id: CommentId, content: str) -> None:
        """Enter edit mode for a comment, seeding the draft with its text.

        Asking again for the comment already being edited leaves edit mode.
        """
        if self.editing == comment_id:
            self.editing = None
            return
        self.editing = comment_id
        self.edit_drafts[comment_id] = content

    def end_edit(self, comment_id: CommentId) -> None:
        """Leave edit mode and drop the draft."""
        if self.editing == comment_id:
            self.editing = None
        self.edit_drafts.pop(comment_id, None)

    def set_reply_draft(self, comment_id: CommentId, text: str) -> None:
        self.reply_drafts[comment_id] = text

    def reply_sent(self, parent_id: CommentId | None) -> None:
        """Clear the composer that produced a new comment."""
        if parent_id is None:
            self.composer_draft = ""
            self.composer_visible = False
            return
        self.reply_drafts.pop(parent_id, None)
        if self.reply_composer_open_for == parent_id:
            self.reply_composer_open_for = None
        # Show the reply that was just added
        self.subtree_expanded[parent_id] = True

    def prune(self, ids: Iterable[CommentId]) -> None:
        """Forget every key belonging to removed comments."""
        for comment_id in ids:
            self.overflow_menu_open.pop(comment_id, None)
            self.subtree_expanded.pop(comment_id, None)
            self.picker_open.pop(EntityId(comment_id), None)
            self.edit_drafts.pop(comment_id, None)
            self.reply_drafts.pop(comment_id, None)
            if self.reply_composer_open_for == comment_id:
                self.reply_composer_open_for = None
            if self.editing == comment_id:
                self.editing = None

    def reset(self) -> None:
        """Return to the initial state; called on thread teardown."""
        self.reply_composer_open_for = None
        self.overflow_menu_open.clear()
        self.subtree_expanded.clear()
        self.picker_open.clear()
        self.editing = None
        self.edit_drafts.clear()
        self.reply_drafts.clear()
        self.composer_visible = True
        self.composer_draft = ""
