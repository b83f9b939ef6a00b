"""
Core Survey Document Model

Defines the data structures of an editable survey document:
    - Survey (root)
    - Questionnaire items (one class per item type)
    - Rows and columns of matrix-style questions
    - Typed option objects per item type

ARCHITECTURAL RULE:
    These objects:
        - Are immutable (frozen dataclasses, tuples for sequences)
        - Are fully serializable (no back-pointers, ancestry is by index)
        - Represent structure, not behavior

    Every edit produces a new value. See `surveydoc.tree` for the
    copy-on-write editing helpers.

The item class IS the type tag. A field that does not belong to an item
type does not exist on its class: a `StringQuestion` has no `children`,
a `BreakPageItem` has no `label`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Iterator, Optional, Tuple, Type

from .conditions import ElementCondition


class ItemType(Enum):
    """Every kind of node a questionnaire tree can hold."""

    BLOCK = "block"
    LOOP = "loop"
    BREAK_PAGE = "breakPage"
    TEXT = "text"
    STRING = "string"
    NUMBER = "number"
    CHOICE = "choice"
    MARKER = "marker"
    QUOTA = "quota"
    TERMINATION = "termination"


CONTAINER_TYPES = frozenset({ItemType.BLOCK, ItemType.LOOP})
QUESTION_TYPES = frozenset({ItemType.STRING, ItemType.NUMBER, ItemType.CHOICE})
LABELLED_TYPES = frozenset(t for t in ItemType if t is not ItemType.BREAK_PAGE)


# =============================================================================
# OPTIONS
# =============================================================================


@dataclass(frozen=True)
class ElementOptions:
    """Options of an element that has no configuration (page breaks)."""


@dataclass(frozen=True)
class ConditionalOptions(ElementOptions):
    condition: Optional[ElementCondition] = None


@dataclass(frozen=True)
class BlockOptions(ConditionalOptions):
    show_label: Optional[bool] = None


@dataclass(frozen=True)
class LoopOptions(ConditionalOptions):
    pass


@dataclass(frozen=True)
class TextOptions(ConditionalOptions):
    pass


@dataclass(frozen=True)
class FlowOptions(ConditionalOptions):
    """Options of marker, quota and termination elements."""


@dataclass(frozen=True)
class QuestionOptions(ConditionalOptions):
    """Options shared by all answerable questions."""

    hidden: Optional[bool] = None
    required: Optional[bool] = None
    randomize_rows: Optional[bool] = None
    randomize_columns: Optional[bool] = None


@dataclass(frozen=True)
class StringOptions(QuestionOptions):
    multiline: Optional[bool] = None
    placeholder: Optional[str] = None
    regex: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None  # only meaningful when multiline
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    verifier: Optional[str] = None  # "email" | "number" | "url"
    na_option: Optional[bool] = None
    na_label: Optional[str] = None


@dataclass(frozen=True)
class NumberOptions(QuestionOptions):
    placeholder: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    width: Optional[int] = None
    integer: Optional[bool] = None
    decimal_places: Optional[int] = None  # only meaningful when not integer
    fixed_values: Optional[Tuple[float, ...]] = None
    na_option: Optional[bool] = None
    na_label: Optional[str] = None

    def __post_init__(self):
        if self.fixed_values is not None:
            object.__setattr__(self, "fixed_values", tuple(self.fixed_values))


@dataclass(frozen=True)
class ChoiceOptions(QuestionOptions):
    multiple_selection: Optional[bool] = None
    min_selections: Optional[int] = None
    max_selections: Optional[int] = None


@dataclass(frozen=True)
class RowColumnOptions:
    condition: Optional[ElementCondition] = None
    no_randomize: Optional[bool] = None


@dataclass(frozen=True)
class ChoiceRowColumnOptions(RowColumnOptions):
    # Selecting an exclusive row/column clears the others in a multiple selection
    exclusive: Optional[bool] = None


# =============================================================================
# SORTABLE ITEMS
# =============================================================================


@dataclass(frozen=True)
class SortableItem:
    """
    Base shape of everything that sits in an ordered sequence.

    Properties:
        id:
            Generator-assigned identity, never reused

        code:
            User-facing identifier, unique across the whole document

        index / is_last:
            Position among siblings (recomputed after every edit)

        depth:
            Nesting level (derived)

        parent_index / parent_indexes:
            Ancestry as sibling indexes, never live references
    """

    _tuple_fields: ClassVar[Tuple[str, ...]] = ()

    id: str
    code: str
    index: int = 0
    depth: int = 0
    is_last: bool = True
    parent_index: Optional[int] = None
    parent_indexes: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        if self.parent_indexes is not None:
            object.__setattr__(self, "parent_indexes", tuple(self.parent_indexes))
        for name in self._tuple_fields:
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True)
class ElementRow(SortableItem):
    label: str = ""
    options: Optional[RowColumnOptions] = None


@dataclass(frozen=True)
class ElementColumn(SortableItem):
    label: str = ""
    options: Optional[RowColumnOptions] = None


@dataclass(frozen=True)
class LoopConcept(SortableItem):
    """One iteration subject of a loop."""

    label: str = ""
    condition: Optional[ElementCondition] = None


# =============================================================================
# QUESTIONNAIRE ITEMS
# =============================================================================


@dataclass(frozen=True)
class QuestionnaireItem(SortableItem):
    """Base of every node in the questionnaire tree."""

    type: ClassVar[ItemType]

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def is_question(self) -> bool:
        return self.type in QUESTION_TYPES


@dataclass(frozen=True)
class BreakPageItem(QuestionnaireItem):
    type = ItemType.BREAK_PAGE

    options: ElementOptions = field(default_factory=ElementOptions)


@dataclass(frozen=True)
class LabelledItem(QuestionnaireItem):
    label: str = ""


@dataclass(frozen=True)
class ContainerItem(LabelledItem):
    """An item that exclusively owns an ordered subtree."""

    _tuple_fields = ("children",)

    children: Tuple[QuestionnaireItem, ...] = ()


@dataclass(frozen=True)
class BlockItem(ContainerItem):
    type = ItemType.BLOCK

    options: BlockOptions = field(default_factory=BlockOptions)


@dataclass(frozen=True)
class LoopItem(ContainerItem):
    type = ItemType.LOOP
    _tuple_fields = ("children", "concepts")

    options: LoopOptions = field(default_factory=LoopOptions)
    concepts: Tuple[LoopConcept, ...] = ()


@dataclass(frozen=True)
class TextItem(LabelledItem):
    type = ItemType.TEXT

    options: TextOptions = field(default_factory=TextOptions)


@dataclass(frozen=True)
class MarkerItem(LabelledItem):
    type = ItemType.MARKER

    options: FlowOptions = field(default_factory=FlowOptions)


@dataclass(frozen=True)
class QuotaItem(LabelledItem):
    type = ItemType.QUOTA

    options: FlowOptions = field(default_factory=FlowOptions)


@dataclass(frozen=True)
class TerminationItem(LabelledItem):
    type = ItemType.TERMINATION

    options: FlowOptions = field(default_factory=FlowOptions)


@dataclass(frozen=True)
class QuestionItem(LabelledItem):
    """An answerable question; may carry matrix rows and columns."""

    _tuple_fields = ("rows", "columns")

    help: Optional[str] = None
    rows: Tuple[ElementRow, ...] = ()
    columns: Tuple[ElementColumn, ...] = ()


@dataclass(frozen=True)
class StringQuestion(QuestionItem):
    type = ItemType.STRING

    options: StringOptions = field(default_factory=StringOptions)


@dataclass(frozen=True)
class NumberQuestion(QuestionItem):
    type = ItemType.NUMBER

    options: NumberOptions = field(default_factory=NumberOptions)


@dataclass(frozen=True)
class ChoiceQuestion(QuestionItem):
    type = ItemType.CHOICE

    options: ChoiceOptions = field(default_factory=ChoiceOptions)


ITEM_CLASSES: Dict[ItemType, Type[QuestionnaireItem]] = {
    cls.type: cls
    for cls in (
        BlockItem,
        LoopItem,
        BreakPageItem,
        TextItem,
        StringQuestion,
        NumberQuestion,
        ChoiceQuestion,
        MarkerItem,
        QuotaItem,
        TerminationItem,
    )
}


def item_class_for(item_type: ItemType) -> Type[QuestionnaireItem]:
    """Return the item class implementing `item_type`."""
    return ITEM_CLASSES[item_type]


# =============================================================================
# SURVEY
# =============================================================================


@dataclass(frozen=True)
class Survey:
    """
    Root of a survey document.

    Properties:
        code:
            Unique identifier, `^[A-Za-z0-9_-]+$`

        title:
            Human-readable title

        description:
            Optional introduction text

        children:
            Top-level questionnaire items, in order

    INVARIANTS:
        - Every code (survey, items, rows, columns) is unique document-wide
        - index / is_last of every item match its position
        - Every item only carries the fields of its type
    """

    code: str = ""
    title: str = ""
    description: Optional[str] = None
    children: Tuple[QuestionnaireItem, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children or ()))

    def walk(self) -> Iterator[QuestionnaireItem]:
        """Yield every item depth-first, parents before children."""
        return _walk(self.children)

    def get_item(self, item_id: str) -> Optional[QuestionnaireItem]:
        """
        Retrieve an item by id.

        Args:
            item_id: Item identity

        Returns:
            The item or None if not found
        """
        for item in self.walk():
            if item.id == item_id:
                return item
        return None

    def get_item_by_code(self, code: str) -> Optional[QuestionnaireItem]:
        """First item carrying `code`, or None."""
        for item in self.walk():
            if item.code == code:
                return item
        return None


def _walk(items) -> Iterator[QuestionnaireItem]:
    for item in items:
        yield item
        if isinstance(item, ContainerItem):
            yield from _walk(item.children)
