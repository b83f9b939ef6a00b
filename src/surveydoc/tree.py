"""
Tree utilities: traversal and copy-on-write editing of survey documents.

Traversal helpers are read-only. Editing helpers never mutate their input:
each returns a new Survey in which the edited item and its ancestors are
new objects, while untouched sibling subtrees are shared by reference.

After every edit, positional fields (index, is_last, depth, parent
indexes) are recomputed from array position by `reindex_items`.

Field paths use the dot/bracket form shared with validation diagnostics:
    children[0]
    children[0].children[2].rows[1]
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .conditions import ElementCondition
from .identity import generate_id, generate_unique_code
from .model import (
    ChoiceQuestion,
    ChoiceRowColumnOptions,
    ConditionalOptions,
    ContainerItem,
    ElementColumn,
    ElementRow,
    ItemType,
    LoopItem,
    QuestionItem,
    QuestionnaireItem,
    RowColumnOptions,
    Survey,
)
from .transform import transform_item

logger = logging.getLogger(__name__)


class ItemNotFoundError(KeyError):
    """Raised when an edit targets an id that is not in the document."""


class NotAContainerError(ValueError):
    """Raised when children are added under an item that cannot own them."""


class NotAQuestionError(ValueError):
    """Raised when rows or columns are edited on an item that has none."""


# =============================================================================
# TRAVERSAL
# =============================================================================


@dataclass(frozen=True)
class CodeLocation:
    """Where a code occurs: its field path and the owning node."""

    path: str
    node: object


def iter_items(items: Sequence[QuestionnaireItem], path: str = "children") -> Iterator[Tuple[str, QuestionnaireItem]]:
    """Yield (path, item) depth-first, parents before children."""
    for position, item in enumerate(items):
        item_path = f"{path}[{position}]"
        yield item_path, item
        if isinstance(item, ContainerItem):
            yield from iter_items(item.children, f"{item_path}.children")


def get_all_codes(survey: Survey) -> List[str]:
    """
    Collect every code of the document, depth-first.

    Order: survey code, then per item its own code, its subtree, its rows,
    its columns.
    """
    codes = [survey.code]

    def extract(items: Sequence[QuestionnaireItem]) -> None:
        for item in items:
            codes.append(item.code)
            if isinstance(item, ContainerItem):
                extract(item.children)
            if isinstance(item, QuestionItem):
                codes.extend(row.code for row in item.rows)
                codes.extend(column.code for column in item.columns)

    extract(survey.children)
    return codes


def find_item_by_id(items: Sequence[QuestionnaireItem], item_id: str) -> Optional[QuestionnaireItem]:
    for item in items:
        if item.id == item_id:
            return item
        if isinstance(item, ContainerItem):
            found = find_item_by_id(item.children, item_id)
            if found is not None:
                return found
    return None


def calculate_depth(items: Sequence[QuestionnaireItem], target_id: str, current_depth: int = 0) -> int:
    """Nesting level of `target_id`, or -1 when absent."""
    for item in items:
        if item.id == target_id:
            return current_depth
        if isinstance(item, ContainerItem):
            depth = calculate_depth(item.children, target_id, current_depth + 1)
            if depth != -1:
                return depth
    return -1


def flatten_survey(items: Sequence[QuestionnaireItem]) -> List[QuestionnaireItem]:
    """All items in display order, each with `depth` set to its nesting level."""
    flattened: List[QuestionnaireItem] = []

    def flatten(level_items: Sequence[QuestionnaireItem], depth: int) -> None:
        for item in level_items:
            flattened.append(item if item.depth == depth else replace(item, depth=depth))
            if isinstance(item, ContainerItem):
                flatten(item.children, depth + 1)

    flatten(items, 0)
    return flattened


def build_code_index(survey: Survey) -> Dict[str, List[CodeLocation]]:
    """
    Map every non-empty code to all places it occurs.

    The survey's own code is located at `survey.code`; item, row and
    column codes at their `<path>.code`.
    """
    index: Dict[str, List[CodeLocation]] = defaultdict(list)
    if survey.code:
        index[survey.code].append(CodeLocation("survey.code", survey))

    for path, item in iter_items(survey.children):
        if item.code:
            index[item.code].append(CodeLocation(f"{path}.code", item))
        if isinstance(item, QuestionItem):
            for position, row in enumerate(item.rows):
                if row.code:
                    index[row.code].append(CodeLocation(f"{path}.rows[{position}].code", row))
            for position, column in enumerate(item.columns):
                if column.code:
                    index[column.code].append(CodeLocation(f"{path}.columns[{position}].code", column))
    return dict(index)


def collect_conditions(survey: Survey) -> List[Tuple[str, ElementCondition]]:
    """
    Every condition in the document with its field path.

    Covers item options, row/column options and loop concepts.
    """
    found: List[Tuple[str, ElementCondition]] = []
    for path, item in iter_items(survey.children):
        condition = getattr(item.options, "condition", None)
        if condition is not None:
            found.append((f"{path}.options.condition", condition))
        if isinstance(item, QuestionItem):
            for kind, entries in (("rows", item.rows), ("columns", item.columns)):
                for position, entry in enumerate(entries):
                    if entry.options is not None and entry.options.condition is not None:
                        found.append((f"{path}.{kind}[{position}].options.condition", entry.options.condition))
        if isinstance(item, LoopItem):
            for position, concept in enumerate(item.concepts):
                if concept.condition is not None:
                    found.append((f"{path}.concepts[{position}].condition", concept.condition))
    return found


# =============================================================================
# POSITIONAL FIELDS
# =============================================================================


def _reindex_entries(entries: Tuple) -> Tuple:
    """Recompute index / is_last of rows, columns or concepts."""
    last = len(entries) - 1
    result = []
    for position, entry in enumerate(entries):
        if entry.index != position or entry.is_last != (position == last):
            entry = replace(entry, index=position, is_last=position == last)
        result.append(entry)
    return tuple(result)


def _unchanged(new: Tuple, old: Tuple) -> bool:
    return len(new) == len(old) and all(a is b for a, b in zip(new, old))


def reindex_items(
    items: Sequence[QuestionnaireItem],
    depth: int = 0,
    parent_indexes: Tuple[int, ...] = (),
) -> Tuple[QuestionnaireItem, ...]:
    """
    Recompute positional fields of a sibling sequence and its subtrees.

    Items whose fields are already correct are returned as the same
    objects.
    """
    last = len(items) - 1
    result = []
    for position, item in enumerate(items):
        wanted = {
            "index": position,
            "is_last": position == last,
            "depth": depth,
            "parent_index": parent_indexes[-1] if parent_indexes else None,
            "parent_indexes": parent_indexes or None,
        }
        changes = {name: value for name, value in wanted.items() if getattr(item, name) != value}

        if isinstance(item, ContainerItem):
            children = reindex_items(item.children, depth + 1, parent_indexes + (position,))
            if not _unchanged(children, item.children):
                changes["children"] = children
        if isinstance(item, LoopItem):
            concepts = _reindex_entries(item.concepts)
            if not _unchanged(concepts, item.concepts):
                changes["concepts"] = concepts
        if isinstance(item, QuestionItem):
            rows = _reindex_entries(item.rows)
            if not _unchanged(rows, item.rows):
                changes["rows"] = rows
            columns = _reindex_entries(item.columns)
            if not _unchanged(columns, item.columns):
                changes["columns"] = columns

        result.append(replace(item, **changes) if changes else item)
    return tuple(result)


# =============================================================================
# COPY-ON-WRITE EDITS
# =============================================================================

SiblingEdit = Callable[[List[QuestionnaireItem], int], List[QuestionnaireItem]]


def _edit_siblings(
    items: Tuple[QuestionnaireItem, ...], item_id: str, edit: SiblingEdit
) -> Optional[Tuple[QuestionnaireItem, ...]]:
    """Apply `edit` to the sibling list holding `item_id`; None if not found."""
    for position, item in enumerate(items):
        if item.id == item_id:
            return tuple(edit(list(items), position))
        if isinstance(item, ContainerItem):
            children = _edit_siblings(item.children, item_id, edit)
            if children is not None:
                updated = list(items)
                updated[position] = replace(item, children=children)
                return tuple(updated)
    return None


def _apply(survey: Survey, item_id: str, edit: SiblingEdit) -> Survey:
    children = _edit_siblings(survey.children, item_id, edit)
    if children is None:
        raise ItemNotFoundError(item_id)
    return replace(survey, children=reindex_items(children))


def _require_item(survey: Survey, item_id: str) -> QuestionnaireItem:
    item = find_item_by_id(survey.children, item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return item


def add_item(
    survey: Survey,
    item: QuestionnaireItem,
    parent_id: Optional[str] = None,
    position: Optional[int] = None,
) -> Survey:
    """
    Insert `item` at the top level or under the container `parent_id`.

    `position` defaults to the end of the sibling sequence.
    """

    def insert(siblings: Sequence[QuestionnaireItem]) -> Tuple[QuestionnaireItem, ...]:
        updated = list(siblings)
        updated.insert(len(updated) if position is None else position, item)
        return tuple(updated)

    if parent_id is None:
        logger.debug("Adding %s item %s at top level", item.type.value, item.code)
        return replace(survey, children=reindex_items(insert(survey.children)))

    parent = _require_item(survey, parent_id)
    if not isinstance(parent, ContainerItem):
        raise NotAContainerError(f"Item '{parent.code}' of type {parent.type.value} cannot have children")

    logger.debug("Adding %s item %s under %s", item.type.value, item.code, parent.code)

    def edit(siblings, at):
        siblings[at] = replace(parent, children=insert(parent.children))
        return siblings

    return _apply(survey, parent_id, edit)


def remove_item(survey: Survey, item_id: str) -> Survey:
    """Remove an item and its whole subtree."""

    def edit(siblings, at):
        del siblings[at]
        return siblings

    logger.debug("Removing item %s", item_id)
    return _apply(survey, item_id, edit)


def replace_item(survey: Survey, item: QuestionnaireItem) -> Survey:
    """Replace the item with the same id by `item`."""

    def edit(siblings, at):
        siblings[at] = item
        return siblings

    return _apply(survey, item.id, edit)


def update_item(survey: Survey, item_id: str, **changes) -> Survey:
    """Replace fields of one item, e.g. `update_item(s, id, label="Age")`."""
    return replace_item(survey, replace(_require_item(survey, item_id), **changes))


def move_item(survey: Survey, item_id: str, new_position: int) -> Survey:
    """Move an item within its own sibling sequence (clamped to bounds)."""

    def edit(siblings, at):
        item = siblings.pop(at)
        siblings.insert(max(0, min(new_position, len(siblings))), item)
        return siblings

    return _apply(survey, item_id, edit)


def change_item_type(survey: Survey, item_id: str, new_type: ItemType) -> Survey:
    """
    Change the declared type of an item.

    Returns `survey` itself when the type is unchanged, so existing
    options are never reset by a no-op selection.
    """
    item = _require_item(survey, item_id)
    if item.type is new_type:
        return survey
    logger.debug("Changing item %s from %s to %s", item.code, item.type.value, new_type.value)
    return replace_item(survey, transform_item(item, new_type))


def _fresh_entries(entries, taken: Set[str], prefix: str) -> Tuple:
    fresh = []
    for entry in entries:
        code = generate_unique_code(taken, prefix)
        taken.add(code)
        fresh.append(replace(entry, id=generate_id(), code=code))
    return tuple(fresh)


def _fresh_copy(item: QuestionnaireItem, taken: Set[str]) -> QuestionnaireItem:
    code = generate_unique_code(taken)
    taken.add(code)
    changes = {"id": generate_id(), "code": code}
    if isinstance(item, ContainerItem):
        changes["children"] = tuple(_fresh_copy(child, taken) for child in item.children)
    if isinstance(item, QuestionItem):
        changes["rows"] = _fresh_entries(item.rows, taken, "R")
        changes["columns"] = _fresh_entries(item.columns, taken, "C")
    if isinstance(item, LoopItem):
        changes["concepts"] = _fresh_entries(item.concepts, taken, "L")
    return replace(item, **changes)


def duplicate_item(survey: Survey, item_id: str) -> Survey:
    """
    Insert a copy of an item right after it.

    The copy, its descendants, rows, columns and loop concepts all get new
    ids and new codes unique across the document.
    """
    taken = set(get_all_codes(survey))
    copy = _fresh_copy(_require_item(survey, item_id), taken)

    def edit(siblings, at):
        siblings.insert(at + 1, copy)
        return siblings

    logger.debug("Duplicating item %s as %s", item_id, copy.code)
    return _apply(survey, item_id, edit)


def set_item_condition(item: QuestionnaireItem, condition: Optional[ElementCondition]) -> QuestionnaireItem:
    """Return `item` with its condition set, or cleared when None."""
    if not isinstance(item.options, ConditionalOptions):
        raise ValueError(f"Items of type {item.type.value} cannot carry a condition")
    return replace(item, options=replace(item.options, condition=condition))


# =============================================================================
# ROWS AND COLUMNS
# =============================================================================


def _require_question(survey: Survey, item_id: str) -> QuestionItem:
    item = _require_item(survey, item_id)
    if not isinstance(item, QuestionItem):
        raise NotAQuestionError(f"Item '{item.code}' of type {item.type.value} has no rows or columns")
    return item


def _entry_options(question: QuestionItem) -> RowColumnOptions:
    if isinstance(question, ChoiceQuestion):
        return ChoiceRowColumnOptions()
    return RowColumnOptions()


def add_row(survey: Survey, item_id: str, label: str = "") -> Survey:
    """Append a row with a code unique across the document."""
    question = _require_question(survey, item_id)
    row = ElementRow(
        id=generate_id(),
        code=generate_unique_code(get_all_codes(survey), "R"),
        label=label,
        options=_entry_options(question),
    )
    return replace_item(survey, replace(question, rows=question.rows + (row,)))


def add_column(survey: Survey, item_id: str, label: str = "") -> Survey:
    """Append a column with a code unique across the document."""
    question = _require_question(survey, item_id)
    column = ElementColumn(
        id=generate_id(),
        code=generate_unique_code(get_all_codes(survey), "C"),
        label=label,
        options=_entry_options(question),
    )
    return replace_item(survey, replace(question, columns=question.columns + (column,)))


def remove_row(survey: Survey, item_id: str, row_id: str) -> Survey:
    question = _require_question(survey, item_id)
    rows = tuple(row for row in question.rows if row.id != row_id)
    if len(rows) == len(question.rows):
        raise ItemNotFoundError(row_id)
    return replace_item(survey, replace(question, rows=rows))


def remove_column(survey: Survey, item_id: str, column_id: str) -> Survey:
    question = _require_question(survey, item_id)
    columns = tuple(column for column in question.columns if column.id != column_id)
    if len(columns) == len(question.columns):
        raise ItemNotFoundError(column_id)
    return replace_item(survey, replace(question, columns=columns))
