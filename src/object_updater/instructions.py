"""
Merge instructions carried beside a fragment.

A Fragment is a plain dict of fields plus an ``instructions`` mapping of
property name to MergeInstructions. The mapping lives on an attribute,
never among the dict's items, so iterating a fragment only ever sees its
fields.

    fragment = with_instructions(
        {"tolerations": [{"effect": "NoExecute", "operator": "Exists"}]},
        add_instructions("tolerations", merge_by_contents=True),
    )
"""

from typing import Any, Mapping, Optional

from .models import MergeInstructions


class Fragment(dict):
    """A dict of fields with per-property merge instructions attached."""

    def __init__(
        self,
        fields: Optional[Mapping[str, Any]] = None,
        instructions: Optional[Mapping[str, MergeInstructions]] = None,
    ):
        super().__init__(fields or {})
        self.instructions: dict[str, MergeInstructions] = dict(instructions or {})

    def instruct(self, entry: MergeInstructions) -> "Fragment":
        """Attach instructions for one property (fluent interface)."""
        self.instructions[entry.prop] = entry
        return self

    def __repr__(self) -> str:
        return f"Fragment({dict.__repr__(self)}, instructions={self.instructions!r})"


def add_instructions(
    prop: str,
    *,
    merge_by_contents: Optional[bool] = None,
    merge_by_prop: Optional[str] = None,
    merge_by_name: Optional[bool] = None,
    deep_merge: Optional[bool] = None,
    comment: Optional[str] = None,
    remove_comment: Optional[bool] = None,
    comment_before: Optional[str] = None,
    comment_after: Optional[str] = None,
) -> MergeInstructions:
    """
    Build merge instructions for one property.

    When several strategies are set, merge_by_contents wins over
    merge_by_prop, which wins over merge_by_name. With none set, list
    items are appended. ``deep_merge`` and the comment options are
    accepted but have no effect on merging.

    Args:
        prop: Name of the fragment property to instruct
        merge_by_contents: Skip items equal to an existing item
        merge_by_prop: Merge items sharing a value for this field
        merge_by_name: Merge items sharing a ``name``

    Returns:
        MergeInstructions to pass to with_instructions

    Example:
        >>> entry = add_instructions("containers", merge_by_name=True)
        >>> entry.merge_key
        'name'
    """
    return MergeInstructions(
        prop=prop,
        merge_by_contents=merge_by_contents,
        merge_by_prop=merge_by_prop,
        merge_by_name=merge_by_name,
        deep_merge=deep_merge,
        comment=comment,
        remove_comment=remove_comment,
        comment_before=comment_before,
        comment_after=comment_after,
    )


def with_instructions(
    fields: Optional[Mapping[str, Any]] = None,
    *entries: MergeInstructions,
) -> Fragment:
    """
    Combine a field map with instruction entries into a Fragment.

    Instructions already attached to ``fields`` (if it is a Fragment) are
    kept. A later entry for the same property replaces an earlier one.
    """
    fragment = Fragment(fields, getattr(fields, "instructions", None))
    for entry in entries:
        fragment.instruct(entry)
    return fragment


def extract_instructions(fragment: Any) -> tuple[dict[str, MergeInstructions], dict]:
    """
    Split a fragment into its instructions and a clean dict of fields.

    Args:
        fragment: A Fragment or plain dict

    Returns:
        Tuple of (instructions by property name, plain dict of fields)
    """
    instructions = dict(getattr(fragment, "instructions", None) or {})
    return instructions, dict(fragment)
