"""
Tests for default options and the default-question constructor.
"""

import pytest
from surveydoc.defaults import create_default_question, default_help, default_label, default_options
from surveydoc.model import (
    BlockOptions,
    ChoiceRowColumnOptions,
    ElementOptions,
    ItemType,
    LABELLED_TYPES,
    StringOptions,
)


class TestDefaultTables:

    def test_string_options(self):
        options = default_options(ItemType.STRING)
        assert options == StringOptions(
            required=False, multiline=False, placeholder="", na_option=False, na_label=""
        )

    def test_number_options(self):
        options = default_options(ItemType.NUMBER)
        assert options.integer is True
        assert options.required is False
        assert options.min is None

    def test_block_options(self):
        assert default_options(ItemType.BLOCK) == BlockOptions(show_label=True)

    def test_break_page_options(self):
        assert default_options(ItemType.BREAK_PAGE) == ElementOptions()

    def test_fresh_instance_each_call(self):
        assert default_options(ItemType.CHOICE) is not default_options(ItemType.CHOICE)

    def test_labels_and_help(self):
        assert default_label(ItemType.BREAK_PAGE) == ""
        assert default_label(ItemType.BLOCK) == "Question Group"
        assert default_help(ItemType.NUMBER) == "Enter a numeric value."
        assert default_help(ItemType.TEXT) == ""


class TestCreateDefaultQuestion:

    def test_choice_question(self):
        item = create_default_question(ItemType.CHOICE, [])
        assert item.type is ItemType.CHOICE
        assert item.code == "Q1"
        assert item.options.multiple_selection is False
        assert len(item.rows) == 2
        assert item.rows[0].code != item.rows[1].code
        assert [row.code for row in item.rows] == ["R1", "R2"]
        assert [row.label for row in item.rows] == ["Option 1", "Option 2"]
        assert [row.index for row in item.rows] == [0, 1]
        assert [row.is_last for row in item.rows] == [False, True]
        assert all(isinstance(row.options, ChoiceRowColumnOptions) for row in item.rows)

    def test_choice_rows_avoid_existing_codes(self):
        item = create_default_question(ItemType.CHOICE, ["S1", "Q1", "R1"])
        assert item.code == "Q2"
        assert [row.code for row in item.rows] == ["R2", "R3"]

    def test_string_question(self):
        item = create_default_question(ItemType.STRING, ["Q1"])
        assert item.code == "Q2"
        assert item.label == "New text question"
        assert item.help == ""
        assert item.options.multiline is False

    def test_positional_defaults(self):
        item = create_default_question(ItemType.NUMBER, [])
        assert (item.index, item.depth, item.is_last) == (0, 0, True)
        assert item.parent_index is None

    def test_containers_start_empty(self):
        assert create_default_question(ItemType.BLOCK, []).children == ()
        loop = create_default_question(ItemType.LOOP, [])
        assert loop.children == ()
        assert loop.concepts == ()

    def test_break_page(self):
        item = create_default_question(ItemType.BREAK_PAGE, [])
        assert not hasattr(item, "label")

    @pytest.mark.parametrize("item_type", sorted(ItemType, key=lambda t: t.value))
    def test_every_type_is_labelled_unless_page_break(self, item_type):
        item = create_default_question(item_type, [])
        assert item.type is item_type
        if item_type in LABELLED_TYPES:
            assert item.label
        assert item.id.startswith("item_")

    def test_type_given_as_string(self):
        item = create_default_question("text", [])
        assert item.type is ItemType.TEXT

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            create_default_question("slider", [])
