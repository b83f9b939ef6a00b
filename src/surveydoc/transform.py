"""
Type Transformer: reshape an item when its type changes.

`transform_item(item, new_type)` builds a brand new item of the target
class:

    - id, code and positional fields are copied unchanged
    - options are REPLACED by the target type's defaults
    - label is seeded with the target's default (absent on page breaks)
    - help is seeded for questions, absent elsewhere
    - children survive only between container types
    - rows / columns survive only between question types

IMPORTANT:
    Transforming away from a container drops its subtree. This cannot be
    undone from the result.

    The caller must not transform an item into its own type: options would
    be reset to defaults. `surveydoc.tree.change_item_type` performs that
    check.

This module is pure: no I/O, no hidden state.
"""

from typing import Any, Dict

from .defaults import default_help, default_label, default_options
from .model import (
    CONTAINER_TYPES,
    LABELLED_TYPES,
    QUESTION_TYPES,
    ItemType,
    QuestionnaireItem,
    item_class_for,
)

_IDENTITY_FIELDS = ("id", "code", "index", "depth", "is_last", "parent_index", "parent_indexes")


def transform_item(item: QuestionnaireItem, new_type: ItemType) -> QuestionnaireItem:
    """
    Reshape `item` into an item of `new_type`.

    Args:
        item: Existing item
        new_type: Target type (must differ from item.type)

    Returns:
        A new item of the class implementing `new_type`
    """
    fields: Dict[str, Any] = {name: getattr(item, name) for name in _IDENTITY_FIELDS}
    fields["options"] = default_options(new_type)

    if new_type in LABELLED_TYPES:
        fields["label"] = default_label(new_type)

    if new_type in QUESTION_TYPES:
        fields["help"] = default_help(new_type)
        fields["rows"] = getattr(item, "rows", ())
        fields["columns"] = getattr(item, "columns", ())

    if new_type in CONTAINER_TYPES:
        fields["children"] = getattr(item, "children", ())

    return item_class_for(new_type)(**fields)
