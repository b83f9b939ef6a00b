"""
Serialization helpers for survey documents.

Provides lossless JSON/YAML round-trip via an intermediate dict
representation. Dict keys use the camelCase names of the editor's JSON
documents (`isLast`, `parentIndexes`, `multipleSelection`, ...).

A key that does not belong to an item type is never written: a string
question has no "children" key, a page break has no "label" key. Unset
options are omitted, so a page break's options serialize to {}.
"""
from __future__ import annotations

import json
from dataclasses import fields
from typing import Any, Dict, Optional, Type

import yaml

from surveydoc.conditions import ConditionAction, ConditionRule, ElementCondition, Gate, Operator
from surveydoc.model import (
    BlockOptions,
    ChoiceOptions,
    ChoiceQuestion,
    ChoiceRowColumnOptions,
    ContainerItem,
    ElementColumn,
    ElementOptions,
    ElementRow,
    FlowOptions,
    ItemType,
    LabelledItem,
    LoopConcept,
    LoopItem,
    LoopOptions,
    NumberOptions,
    QuestionItem,
    QuestionnaireItem,
    RowColumnOptions,
    SortableItem,
    StringOptions,
    Survey,
    TextOptions,
    item_class_for,
)


class SerializationError(ValueError):
    """Raised when a dict cannot be decoded into a survey document."""


_OPTIONS_CLASSES: Dict[ItemType, Type[ElementOptions]] = {
    ItemType.STRING: StringOptions,
    ItemType.NUMBER: NumberOptions,
    ItemType.CHOICE: ChoiceOptions,
    ItemType.BLOCK: BlockOptions,
    ItemType.LOOP: LoopOptions,
    ItemType.TEXT: TextOptions,
    ItemType.BREAK_PAGE: ElementOptions,
    ItemType.MARKER: FlowOptions,
    ItemType.QUOTA: FlowOptions,
    ItemType.TERMINATION: FlowOptions,
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _require(d: Dict[str, Any], key: str) -> Any:
    if key not in d:
        raise SerializationError(f"Missing required key '{key}' in {d!r}")
    return d[key]


# =============================================================================
# CONDITIONS
# =============================================================================


def rule_to_dict(rule: ConditionRule) -> Dict[str, Any]:
    d: Dict[str, Any] = {"code": rule.code, "operator": rule.operator.value}
    if rule.value is not None:
        d["value"] = rule.value
    if rule.negate is not None:
        d["negate"] = rule.negate
    if rule.row_code is not None:
        d["rowCode"] = rule.row_code
    if rule.column_code is not None:
        d["columnCode"] = rule.column_code
    if rule.gate is not None:
        d["gate"] = rule.gate.value
    return d


def rule_from_dict(d: Dict[str, Any]) -> ConditionRule:
    gate = d.get("gate")
    return ConditionRule(
        code=_require(d, "code"),
        operator=Operator(d.get("operator", "=")),
        value=d.get("value"),
        negate=d.get("negate"),
        row_code=d.get("rowCode"),
        column_code=d.get("columnCode"),
        gate=Gate(gate) if gate is not None else None,
    )


def condition_to_dict(c: ElementCondition | None) -> Optional[Dict[str, Any]]:
    if c is None:
        return None
    return {"action": c.action.value, "rules": [rule_to_dict(r) for r in c.rules]}


def condition_from_dict(d: Optional[Dict[str, Any]]) -> ElementCondition | None:
    if d is None:
        return None
    return ElementCondition(
        action=ConditionAction(d.get("action", "show")),
        rules=[rule_from_dict(r) for r in d.get("rules", [])],
    )


# =============================================================================
# OPTIONS
# =============================================================================


def options_to_dict(options) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for f in fields(options):
        value = getattr(options, f.name)
        if value is None:
            continue
        if isinstance(value, ElementCondition):
            value = condition_to_dict(value)
        elif isinstance(value, tuple):
            value = list(value)
        d[_camel(f.name)] = value
    return d


def options_from_dict(cls: Type, d: Optional[Dict[str, Any]]):
    d = d or {}
    kwargs = {}
    for f in fields(cls):
        key = _camel(f.name)
        if key not in d:
            continue
        value = d[key]
        if f.name == "condition":
            value = condition_from_dict(value)
        kwargs[f.name] = value
    return cls(**kwargs)


# =============================================================================
# ROWS, COLUMNS, CONCEPTS
# =============================================================================


def _sortable_to_dict(s: SortableItem) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": s.id,
        "code": s.code,
        "index": s.index,
        "depth": s.depth,
        "isLast": s.is_last,
    }
    if s.parent_index is not None:
        d["parentIndex"] = s.parent_index
    if s.parent_indexes is not None:
        d["parentIndexes"] = list(s.parent_indexes)
    return d


def _sortable_from_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": _require(d, "id"),
        "code": d.get("code", ""),
        "index": d.get("index", 0),
        "depth": d.get("depth", 0),
        "is_last": d.get("isLast", True),
        "parent_index": d.get("parentIndex"),
        "parent_indexes": d.get("parentIndexes"),
    }


def entry_to_dict(e: ElementRow | ElementColumn) -> Dict[str, Any]:
    d = _sortable_to_dict(e)
    d["label"] = e.label
    if e.options is not None:
        d["options"] = options_to_dict(e.options)
    return d


def row_from_dict(d: Dict[str, Any], options_cls: Type[RowColumnOptions] = RowColumnOptions) -> ElementRow:
    options = d.get("options")
    return ElementRow(
        label=d.get("label", ""),
        options=options_from_dict(options_cls, options) if options is not None else None,
        **_sortable_from_dict(d),
    )


def column_from_dict(d: Dict[str, Any], options_cls: Type[RowColumnOptions] = RowColumnOptions) -> ElementColumn:
    options = d.get("options")
    return ElementColumn(
        label=d.get("label", ""),
        options=options_from_dict(options_cls, options) if options is not None else None,
        **_sortable_from_dict(d),
    )


def concept_to_dict(c: LoopConcept) -> Dict[str, Any]:
    d = _sortable_to_dict(c)
    d["label"] = c.label
    if c.condition is not None:
        d["condition"] = condition_to_dict(c.condition)
    return d


def concept_from_dict(d: Dict[str, Any]) -> LoopConcept:
    return LoopConcept(
        label=d.get("label", ""),
        condition=condition_from_dict(d.get("condition")),
        **_sortable_from_dict(d),
    )


# =============================================================================
# ITEMS
# =============================================================================


def item_to_dict(item: QuestionnaireItem) -> Dict[str, Any]:
    d = _sortable_to_dict(item)
    d["type"] = item.type.value
    if isinstance(item, LabelledItem):
        d["label"] = item.label
    if isinstance(item, QuestionItem):
        if item.help is not None:
            d["help"] = item.help
        d["rows"] = [entry_to_dict(r) for r in item.rows]
        d["columns"] = [entry_to_dict(c) for c in item.columns]
    if isinstance(item, ContainerItem):
        d["children"] = [item_to_dict(child) for child in item.children]
    if isinstance(item, LoopItem):
        d["concepts"] = [concept_to_dict(c) for c in item.concepts]
    d["options"] = options_to_dict(item.options)
    return d


def item_from_dict(d: Dict[str, Any]) -> QuestionnaireItem:
    try:
        item_type = ItemType(_require(d, "type"))
    except ValueError as exc:
        raise SerializationError(f"Unknown item type: {d.get('type')!r}") from exc

    cls = item_class_for(item_type)
    kwargs = _sortable_from_dict(d)
    kwargs["options"] = options_from_dict(_OPTIONS_CLASSES[item_type], d.get("options"))

    if issubclass(cls, LabelledItem):
        kwargs["label"] = d.get("label", "")
    if issubclass(cls, QuestionItem):
        entry_options = ChoiceRowColumnOptions if cls is ChoiceQuestion else RowColumnOptions
        kwargs["help"] = d.get("help")
        kwargs["rows"] = [row_from_dict(r, entry_options) for r in d.get("rows") or []]
        kwargs["columns"] = [column_from_dict(c, entry_options) for c in d.get("columns") or []]
    if issubclass(cls, ContainerItem):
        kwargs["children"] = [item_from_dict(child) for child in d.get("children") or []]
    if issubclass(cls, LoopItem):
        kwargs["concepts"] = [concept_from_dict(c) for c in d.get("concepts") or []]

    return cls(**kwargs)


# =============================================================================
# SURVEY
# =============================================================================


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    d: Dict[str, Any] = {"code": s.code, "title": s.title}
    if s.description is not None:
        d["description"] = s.description
    d["children"] = [item_to_dict(item) for item in s.children]
    return d


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    if not isinstance(d, dict):
        raise SerializationError(f"Survey document must be a mapping, got {type(d).__name__}")
    return Survey(
        code=d.get("code") or "",
        title=d.get("title") or "",
        description=d.get("description"),
        children=[item_from_dict(item) for item in d.get("children") or []],
    )


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)
