"""
Merge engine.

Applies a fragment onto a target tree in place, honoring per-property
merge instructions at every level and falling back to a default deep
merge.

Default rules, per fragment field:
    • list   → if the target holds a list, merge by "name" when the
               fragment's first item is a dict with a "name" field,
               otherwise append clones; else replace with a clone
    • dict   → recurse, resetting the target field to {} if needed
    • scalar → overwrite

Shape mismatches never raise: the target slot is reset to an empty
container of the right kind, or the fragment is ignored where no slot
can be reset.
"""

import logging
from typing import Any, Mapping, Optional

from .instructions import extract_instructions
from .models import ArrayStrategy, MergeInstructions
from .structures import clone, is_record, is_sequence, values_equal

logger = logging.getLogger(__name__)


def merge(
    target: Any,
    fragment: Any,
    instructions: Optional[Mapping[str, MergeInstructions]] = None,
) -> None:
    """
    Merge a fragment into a target, in place.

    Args:
        target: Tree to modify (must not be shared with any source the
            caller wants to keep intact)
        fragment: Dict (optionally a Fragment carrying instructions) or list
        instructions: Extra instructions for the top level of the fragment;
            instructions attached to the fragment itself take precedence

    Example:
        >>> doc = {"tags": ["a", "b"]}
        >>> merge(doc, {"tags": ["b", "c"]},
        ...       {"tags": MergeInstructions(prop="tags", merge_by_contents=True)})
        >>> doc
        {'tags': ['a', 'b', 'c']}
    """
    if is_sequence(fragment):
        if is_sequence(target):
            target.extend([clone(item) for item in fragment])
        else:
            logger.debug("Ignoring list fragment | target=%s", type(target).__name__)
        return

    if not is_record(fragment):
        return

    if not is_record(target):
        logger.debug("Ignoring dict fragment | target=%s", type(target).__name__)
        return

    _merge_record(target, fragment, instructions)


def _merge_record(
    target: dict,
    fragment: Any,
    extra: Optional[Mapping[str, MergeInstructions]] = None,
) -> None:
    """Merge a dict fragment into a dict target, honoring its instructions."""
    instructions, fields = extract_instructions(fragment)
    if extra:
        instructions = {**extra, **instructions}

    for prop, instruction in instructions.items():
        if prop not in fields:
            continue
        _merge_instructed(target, prop, fields.pop(prop), instruction)

    _deep_merge(target, fields)


def _merge_instructed(
    target: dict,
    prop: str,
    value: Any,
    instruction: MergeInstructions,
) -> None:
    """Merge one property according to its instructions."""
    if is_sequence(value):
        if not is_sequence(target.get(prop)):
            target[prop] = []
        _merge_list(target[prop], value, instruction)
    elif is_record(value):
        if not is_record(target.get(prop)):
            target[prop] = {}
        _merge_record(target[prop], value)
    else:
        target[prop] = value


def _merge_list(
    target: list,
    items: list,
    instruction: MergeInstructions,
) -> None:
    strategy = instruction.strategy
    logger.debug("Merging list | prop=%s strategy=%s", instruction.prop, strategy.value)

    if strategy == ArrayStrategy.MERGE_BY_CONTENTS:
        for item in list(items):
            if not any(values_equal(existing, item) for existing in target):
                target.append(clone(item))
    elif strategy == ArrayStrategy.MERGE_BY_KEY:
        merge_by_key(target, items, instruction.merge_key)
    else:
        target.extend([clone(item) for item in items])


def merge_by_key(target: list, items: list, key: str) -> None:
    """
    Merge list items that share a value for ``key``.

    Each item that is a dict containing ``key`` updates the first target
    dict with an equal value for that field: lists replace, dicts deep
    merge, scalars overwrite. Anything else, or an item with no match,
    is appended as a clone. Items are applied in order, so for duplicate
    keys the later item's fields win.
    """
    for item in list(items):
        if not is_record(item) or key not in item:
            target.append(clone(item))
            continue

        match = _find_by_key(target, key, item[key])
        if match is None:
            target.append(clone(item))
            continue

        for field, value in item.items():
            if is_sequence(value):
                match[field] = clone(value)
            elif is_record(value):
                if not is_record(match.get(field)):
                    match[field] = {}
                _merge_record(match[field], value)
            else:
                match[field] = value


def _find_by_key(target: list, key: str, value: Any) -> Optional[dict]:
    for existing in target:
        if is_record(existing) and key in existing and values_equal(existing[key], value):
            return existing
    return None


def _deep_merge(target: dict, fields: Mapping[str, Any]) -> None:
    """Apply the default merge rules to every field."""
    for key, value in fields.items():
        if is_sequence(value):
            current = target.get(key)
            if not is_sequence(current):
                target[key] = clone(value)
            elif value and is_record(value[0]) and "name" in value[0]:
                merge_by_key(current, value, "name")
            else:
                current.extend([clone(item) for item in value])
        elif is_record(value):
            if not is_record(target.get(key)):
                target[key] = {}
            _merge_record(target[key], value)
        else:
            target[key] = value
