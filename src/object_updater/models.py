"""
Pydantic models for object updates.

Covers merge instructions, comment directives and records, edit results,
and the declarative change format used by ``apply_changes``.
"""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


PathKey = Union[int, str]


class ArrayStrategy(str, Enum):
    """
    How list items from a fragment are combined with an existing list.

    Chosen from MergeInstructions by priority:
    contents > key (merge_by_prop, then merge_by_name) > append.
    """

    MERGE_BY_CONTENTS = "merge_by_contents"
    MERGE_BY_KEY = "merge_by_key"
    APPEND = "append"


class CommentDirection(str, Enum):
    """Where a comment sits relative to the annotated value."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class MergeInstructions(BaseModel):
    """
    Merge policy for a single property of a fragment.

    Examples:
        Deduplicate list items:
            {"prop": "tolerations", "merge_by_contents": True}

        Merge list items sharing an id:
            {"prop": "jobs", "merge_by_prop": "id"}
    """

    model_config = ConfigDict(frozen=True)

    prop: str = Field(
        ...,
        description="Name of the fragment property these instructions apply to"
    )
    merge_by_contents: Optional[bool] = Field(
        default=None,
        description="Skip list items structurally equal to an existing item"
    )
    merge_by_prop: Optional[str] = Field(
        default=None,
        description="Merge list items whose value for this field matches"
    )
    merge_by_name: Optional[bool] = Field(
        default=None,
        description="Shorthand for merge_by_prop='name'"
    )
    deep_merge: Optional[bool] = Field(
        default=None,
        description="Accepted for compatibility; has no effect"
    )

    # Reserved comment fields, accepted but not acted on
    comment: Optional[str] = None
    remove_comment: Optional[bool] = None
    comment_before: Optional[str] = None
    comment_after: Optional[str] = None

    @property
    def strategy(self) -> ArrayStrategy:
        """The single effective list strategy."""
        if self.merge_by_contents:
            return ArrayStrategy.MERGE_BY_CONTENTS
        if self.merge_by_prop or self.merge_by_name:
            return ArrayStrategy.MERGE_BY_KEY
        return ArrayStrategy.APPEND

    @property
    def merge_key(self) -> Optional[str]:
        """Field used to match list items, if merging by key."""
        if self.merge_by_contents:
            return None
        if self.merge_by_prop:
            return self.merge_by_prop
        if self.merge_by_name:
            return "name"
        return None


class CommentDirective(BaseModel):
    """Annotation text returned by a change's comment procedure."""

    text: str = Field(description="Comment text")
    direction: CommentDirection = Field(description="Placement of the comment")


class CommentRecord(BaseModel):
    """A comment recorded against the path of the change that produced it."""

    path: list[PathKey] = Field(description="Resolved path of the change")
    comment: str = Field(description="Comment text")
    direction: CommentDirection = Field(description="Placement of the comment")


class ObjectEdit(BaseModel):
    """Result of update_object."""

    result: Any = Field(description="The edited copy of the source tree")
    comments: list[CommentRecord] = Field(
        default_factory=list,
        description="Comments in the order their changes were declared"
    )


class ChangeRequest(BaseModel):
    """
    A declarative change.

    The path is either a list of keys or a JSON Pointer. The value is the
    fragment merged into whatever sits at the path.

    Examples:
        Bump replicas:
            {"path": "/spec", "value": {"replicas": 3}}

        Add a toleration without duplicates:
            {
                "path": [],
                "value": {"tolerations": [{"effect": "NoExecute"}]},
                "instructions": [{"prop": "tolerations", "merge_by_contents": true}]
            }
    """

    path: Union[list[PathKey], str] = Field(
        default_factory=list,
        description="Target path: list of keys or JSON Pointer (e.g. '/spec/template')"
    )
    value: Any = Field(
        default=None,
        description="Fragment to merge at the path"
    )
    instructions: list[MergeInstructions] = Field(
        default_factory=list,
        description="Merge instructions for the top level of the fragment"
    )
    comment: Optional[CommentDirective] = Field(
        default=None,
        description="Comment to record for this change"
    )

    @field_validator("path")
    @classmethod
    def validate_path_format(cls, v: Union[list[PathKey], str]) -> Union[list[PathKey], str]:
        """String paths must be empty or start with /."""
        if isinstance(v, str) and v and not v.startswith("/"):
            raise ValueError("path must be empty or start with '/'")
        return v
