"""
Object update service.

Main entry point for applying merge-based changes to plain-data trees.
The source tree is cloned once; every change is applied to the clone, and
each change's comment is recorded against its resolved path.
"""

import logging
from typing import Any, Callable, Optional, Union

from .instructions import with_instructions
from .merge import merge as merge_fragment
from .models import ChangeRequest, CommentDirective, CommentRecord, ObjectEdit
from .paths import Selector, get_value_at_path, resolve_path, set_value_at_path
from .structures import clone, is_record

logger = logging.getLogger(__name__)

MergeFn = Callable[[Any], Any]
CommentFn = Callable[[None], Union[CommentDirective, dict, None]]


class Annotator:
    """
    Applies changes to a tree owned by a single update_object call.

    Passed to the annotate procedure; ``change`` may be called any
    number of times, each call completing before the next starts.
    """

    def __init__(self, result: Any):
        self.result = result
        self.comments: list[CommentRecord] = []

    def change(
        self,
        find_key: Selector,
        merge: MergeFn,
        comment: Optional[CommentFn] = None,
    ) -> None:
        """
        Merge a fragment into the value at a path.

        Args:
            find_key: Selector for the target (callable, key list, or
                JSON Pointer); resolved against the current result, so it
                sees the effects of earlier changes
            merge: Receives the current value at the path (None if absent)
                and returns the fragment to merge into it
            comment: Called with None; may return a CommentDirective (or a
                dict of its fields) to record against the path
        """
        path = resolve_path(self.result, find_key)

        if comment is not None:
            self._record_comment(path, comment(None))

        if not path:
            merge_fragment(self.result, merge(self.result))
            return

        original = get_value_at_path(self.result, path)
        if original is None:
            set_value_at_path(self.result, path, merge(None))
            return

        merge_fragment(original, merge(original))
        set_value_at_path(self.result, path, original)

    def _record_comment(
        self,
        path: list,
        directive: Union[CommentDirective, dict, None],
    ) -> None:
        if not directive:
            return
        directive = CommentDirective.model_validate(directive)
        self.comments.append(CommentRecord(
            path=path,
            comment=directive.text,
            direction=directive.direction,
        ))


def update_object(
    source: Any,
    annotate: Optional[Callable[[Annotator], None]] = None,
) -> ObjectEdit:
    """
    Apply merge-based changes to a copy of a tree.

    The source is never mutated. All changes are applied, in order, to a
    deep copy.

    Args:
        source: The tree to update
        annotate: Called once with an Annotator; declares changes by
            calling ``annotator.change(...)``

    Returns:
        ObjectEdit with the updated copy and the recorded comments

    Raises:
        UnsupportedKeyKind: If a selector reads a non str/int key

    Example:
        >>> def annotate(editor):
        ...     editor.change(
        ...         find_key=lambda doc: doc["server"],
        ...         merge=lambda server: {"port": 8080},
        ...         comment=lambda prev: {"text": "Use prod port", "direction": "right"},
        ...     )
        >>> edit = update_object({"server": {"host": "localhost", "port": 3000}}, annotate)
        >>> edit.result
        {'server': {'host': 'localhost', 'port': 8080}}
        >>> edit.comments[0].path
        ['server']
    """
    annotator = Annotator(clone(source))

    if annotate is not None:
        annotate(annotator)

    logger.debug("Object updated | comments=%d", len(annotator.comments))

    return ObjectEdit(
        result=annotator.result,
        comments=annotator.comments,
    )


def apply_changes(source: Any, changes: list[ChangeRequest]) -> ObjectEdit:
    """
    Apply a list of declarative changes.

    Each change's value is cloned before merging, and its instructions
    apply to the top level of that value.

    Args:
        source: The tree to update
        changes: Changes to apply in order

    Returns:
        ObjectEdit with the updated copy and the recorded comments

    Example:
        >>> edit = apply_changes(
        ...     {"spec": {"replicas": 1}},
        ...     [ChangeRequest(path="/spec", value={"replicas": 3})],
        ... )
        >>> edit.result
        {'spec': {'replicas': 3}}
    """
    def annotate(editor: Annotator) -> None:
        for change in changes:
            editor.change(
                find_key=change.path,
                merge=_fragment_factory(change),
                comment=_comment_factory(change),
            )

    return update_object(source, annotate)


def _fragment_factory(change: ChangeRequest) -> MergeFn:
    def produce(original: Any) -> Any:
        value = clone(change.value)
        # Absent targets take the value as-is, so instructions would be left in the tree
        if change.instructions and is_record(value) and original is not None:
            return with_instructions(value, *change.instructions)
        return value

    return produce


def _comment_factory(change: ChangeRequest) -> Optional[CommentFn]:
    if change.comment is None:
        return None
    return lambda _prev: change.comment
