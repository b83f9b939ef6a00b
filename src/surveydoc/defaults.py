"""
Default values per item type and the default-question constructor.

The tables here are the single source for what a "fresh" item of a given
type looks like. Both `create_default_question` and the type transformer
read from them.
"""

from typing import Callable, Dict, Iterable, List

from .identity import generate_id, generate_unique_code
from .model import (
    BlockItem,
    BlockOptions,
    BreakPageItem,
    ChoiceOptions,
    ChoiceQuestion,
    ChoiceRowColumnOptions,
    ElementOptions,
    ElementRow,
    FlowOptions,
    ItemType,
    LoopItem,
    LoopOptions,
    MarkerItem,
    NumberOptions,
    NumberQuestion,
    QuestionnaireItem,
    QuotaItem,
    StringOptions,
    StringQuestion,
    TerminationItem,
    TextItem,
    TextOptions,
)


_DEFAULT_OPTIONS: Dict[ItemType, Callable[[], ElementOptions]] = {
    ItemType.STRING: lambda: StringOptions(
        required=False,
        multiline=False,
        placeholder="",
        na_option=False,
        na_label="",
    ),
    ItemType.NUMBER: lambda: NumberOptions(
        required=False,
        integer=True,
        placeholder="",
        na_option=False,
        na_label="",
    ),
    ItemType.CHOICE: lambda: ChoiceOptions(
        required=False,
        multiple_selection=False,
    ),
    ItemType.BLOCK: lambda: BlockOptions(show_label=True),
    ItemType.LOOP: LoopOptions,
    ItemType.TEXT: TextOptions,
    ItemType.BREAK_PAGE: ElementOptions,
    ItemType.MARKER: FlowOptions,
    ItemType.QUOTA: FlowOptions,
    ItemType.TERMINATION: FlowOptions,
}

# Labels seeded by the type transformer
_DEFAULT_LABELS: Dict[ItemType, str] = {
    ItemType.STRING: "Enter your response",
    ItemType.NUMBER: "Enter a number",
    ItemType.CHOICE: "Select an option",
    ItemType.BLOCK: "Question Group",
    ItemType.LOOP: "Repeating Section",
    ItemType.TEXT: "Information text",
    ItemType.MARKER: "Survey Marker",
    ItemType.QUOTA: "Response Quota",
    ItemType.TERMINATION: "Survey End",
}

_DEFAULT_HELP: Dict[ItemType, str] = {
    ItemType.STRING: "Please provide your answer in the text field.",
    ItemType.NUMBER: "Enter a numeric value.",
    ItemType.CHOICE: "Select one or more options from the list.",
}

# Labels of freshly created items (differ from transformer labels)
_CREATION_LABELS: Dict[ItemType, str] = {
    ItemType.TEXT: "New text content",
    ItemType.STRING: "New text question",
    ItemType.NUMBER: "New number question",
    ItemType.CHOICE: "New choice question",
    ItemType.BLOCK: "New block",
    ItemType.LOOP: "New loop",
}


def default_options(item_type: ItemType) -> ElementOptions:
    """Fresh default options object for `item_type`."""
    return _DEFAULT_OPTIONS[item_type]()


def default_label(item_type: ItemType) -> str:
    """Label seeded when an item is transformed into `item_type`."""
    return _DEFAULT_LABELS.get(item_type, "")


def default_help(item_type: ItemType) -> str:
    return _DEFAULT_HELP.get(item_type, "")


def create_default_question(item_type: ItemType, existing_codes: Iterable[str]) -> QuestionnaireItem:
    """
    Create a new item of `item_type` with a generated id and unique code.

    Choice questions start with two rows, "Option 1" and "Option 2",
    each with its own unique `R<n>` code.

    Args:
        item_type: Type of the new item (an ItemType or its string value;
            unknown values raise ValueError)
        existing_codes: Every code already used in the document

    Returns:
        A new, unpositioned item (index 0, depth 0, last)
    """
    item_type = ItemType(item_type)
    existing: List[str] = list(existing_codes)
    code = generate_unique_code(existing)
    base = dict(id=generate_id(), code=code, index=0, depth=0, is_last=True)
    label = _CREATION_LABELS.get(item_type, default_label(item_type))
    options = default_options(item_type)

    if item_type is ItemType.STRING:
        return StringQuestion(label=label, help="", options=options, **base)
    if item_type is ItemType.NUMBER:
        return NumberQuestion(label=label, help="", options=options, **base)
    if item_type is ItemType.CHOICE:
        taken = existing + [code]
        rows = []
        for position in range(2):
            row_code = generate_unique_code(taken, "R")
            taken.append(row_code)
            rows.append(
                ElementRow(
                    id=generate_id(),
                    code=row_code,
                    index=position,
                    depth=0,
                    is_last=position == 1,
                    label=f"Option {position + 1}",
                    options=ChoiceRowColumnOptions(),
                )
            )
        return ChoiceQuestion(label=label, help="", options=options, rows=tuple(rows), **base)
    if item_type is ItemType.BLOCK:
        return BlockItem(label=label, options=options, children=(), **base)
    if item_type is ItemType.LOOP:
        return LoopItem(label=label, options=options, children=(), concepts=(), **base)
    if item_type is ItemType.BREAK_PAGE:
        return BreakPageItem(options=options, **base)
    if item_type is ItemType.TEXT:
        return TextItem(label=label, options=options, **base)
    if item_type is ItemType.MARKER:
        return MarkerItem(label=label, options=options, **base)
    if item_type is ItemType.QUOTA:
        return QuotaItem(label=label, options=options, **base)
    return TerminationItem(label=label, options=options, **base)
