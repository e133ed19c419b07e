"""
Object Updater

Applies targeted, policy-driven merges to nested plain-data trees
(deployment manifests, config files) without mutating the input, and
records a comment for each change.
"""

__version__ = "0.1.0"

from .instructions import Fragment, add_instructions, with_instructions
from .merge import merge
from .models import (
    ArrayStrategy,
    ChangeRequest,
    CommentDirection,
    CommentDirective,
    CommentRecord,
    MergeInstructions,
    ObjectEdit,
)
from .paths import PathNotWritable, UnsupportedKeyKind, resolve_path
from .service import Annotator, apply_changes, update_object

__all__ = [
    "__version__",
    "Annotator",
    "ArrayStrategy",
    "ChangeRequest",
    "CommentDirection",
    "CommentDirective",
    "CommentRecord",
    "Fragment",
    "MergeInstructions",
    "ObjectEdit",
    "PathNotWritable",
    "UnsupportedKeyKind",
    "add_instructions",
    "apply_changes",
    "merge",
    "resolve_path",
    "update_object",
    "with_instructions",
]
