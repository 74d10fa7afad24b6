import pytest
import yaml

from instopts.optionmodel import Column, ItemFlag, OptionModel, Role
from instopts.optiontree import CheckState

DOC = """
- name: "CCR"
  description: "Tools for the Chakra Community Repository"
  options:
    - ccr
    - base-devel
    - bash
"""

DOC_WITH_EXPANDED = """
- name: "CCR"
  description: "Tools for the Chakra Community Repository"
  expanded: true
  options:
    - ccr
    - base-devel
    - bash
"""


def _model(text, global_storage=None):
    model = OptionModel(global_storage)
    model.setup_model_data(yaml.safe_load(text))
    return model


def test_setup_counts_rows():
    model = _model(DOC)
    assert model.row_count() == 1
    group = model.item_at(0)
    assert group.is_group
    assert group.name == "CCR"
    assert model.row_count(group) == 3
    assert all(child.is_option() for child in group.children)
    assert [c.option_name for c in group.children] == ["ccr", "base-devel", "bash"]


def test_column_count_matches_columns():
    assert OptionModel().column_count() == len(Column)


def test_model_without_tree():
    model = OptionModel()
    assert model.row_count() == 0
    assert model.item_at(0) is None
    assert model.get_options() == []
    assert model.set_data(None, CheckState.CHECKED, Role.CHECK_STATE) is False
    model.append_model_data(yaml.safe_load(DOC))
    assert model.root_item is None


def test_nothing_selected_by_default():
    model = _model(DOC)
    group = model.item_at(0)
    assert group.selected == CheckState.UNCHECKED
    assert model.get_options() == []


def test_selected_group_selects_options():
    data = yaml.safe_load(DOC)
    data[0]["selected"] = True
    model = OptionModel()
    model.setup_model_data(data)
    assert model.item_at(0).selected == CheckState.CHECKED
    names = [o.option_name for o in model.get_options()]
    assert names == ["ccr", "base-devel", "bash"]
    assert model.get_option_names(model.item_at(0)) == names


def test_set_selections_checks_group():
    model = _model(DOC)
    model.set_selections(["CCR"])
    assert model.get_option_names(model.get_options()) == ["ccr", "base-devel", "bash"]


def test_set_selections_ignores_option_names():
    model = _model(DOC)
    model.set_selections(["bash"])
    assert model.get_options() == []


def test_check_one_option_makes_group_partial():
    model = _model(DOC)
    group = model.item_at(0)
    bash = model.item_at(2, group)
    assert model.set_data(bash, CheckState.CHECKED, Role.CHECK_STATE)
    assert group.selected == CheckState.PARTIALLY_CHECKED
    assert model.get_options() == [bash]


def test_distinct_group_keeps_single_choice():
    data = [{"name": "shell", "distinct": True, "options": ["bash", "zsh", "fish"]}]
    model = OptionModel()
    model.setup_model_data(data)
    group = model.item_at(0)
    model.set_data(model.item_at(1, group), CheckState.CHECKED, Role.CHECK_STATE)
    assert model.get_option_names(model.get_options()) == ["zsh"]
    assert group.selected == CheckState.CHECKED


def test_display_and_expand_roles():
    model = _model(DOC_WITH_EXPANDED)
    group = model.item_at(0)
    assert model.data(group, Column.NAME, Role.DISPLAY) == "CCR"
    assert model.data(group, Column.DESCRIPTION, Role.DISPLAY) == (
        "Tools for the Chakra Community Repository"
    )
    assert model.data(group, Column.NAME, Role.META_EXPAND) is True
    assert _model(DOC).data(_model(DOC).item_at(0), Column.NAME, Role.META_EXPAND) is False


def test_expanded_groups_compare_unequal():
    assert _model(DOC_WITH_EXPANDED).item_at(0) != _model(DOC).item_at(0)
    assert _model(DOC).item_at(0) == _model(DOC).item_at(0)


def test_check_state_role_only_on_name_column():
    model = _model(DOC)
    group = model.item_at(0)
    assert model.data(group, Column.NAME, Role.CHECK_STATE) == CheckState.UNCHECKED
    assert model.data(group, Column.DESCRIPTION, Role.CHECK_STATE) is None


def test_editable_option_input():
    data = [
        {
            "name": "tune",
            "options": [
                {"name": "level", "description": "--level=", "editable": True, "default": "5"}
            ],
        }
    ]
    model = OptionModel()
    model.setup_model_data(data)
    option = model.item_at(0, model.item_at(0))
    assert model.data(option, Column.INPUT, Role.EDIT) == "5"
    assert ItemFlag.EDITABLE in model.flags(option, Column.INPUT)
    assert model.set_data(option, "7", Role.EDIT)
    assert option.input == "7"
    assert option.to_operation() == "--level=7"


def test_non_editable_option_ignores_edit():
    model = _model(DOC)
    option = model.item_at(0, model.item_at(0))
    assert model.data(option, Column.NAME, Role.EDIT) is None
    assert model.set_data(option, "changed", Role.EDIT)
    assert option.input == ""
    assert ItemFlag.EDITABLE not in model.flags(option, Column.INPUT)


def test_immutable_group_flags_and_check_state():
    data = [{"name": "base", "immutable": True, "options": ["core"]}]
    model = OptionModel()
    model.setup_model_data(data)
    group = model.item_at(0)
    assert model.data(group, Column.NAME, Role.CHECK_STATE) is None
    assert ItemFlag.USER_CHECKABLE not in model.flags(group, Column.NAME)
    option = model.item_at(0, group)
    assert ItemFlag.USER_CHECKABLE not in model.flags(option, Column.NAME)


def test_regular_group_is_checkable():
    model = _model(DOC)
    flags = model.flags(model.item_at(0), Column.NAME)
    assert ItemFlag.USER_CHECKABLE in flags
    assert ItemFlag.ENABLED in flags
    assert model.flags(None, Column.NAME) == ItemFlag.NONE


@pytest.mark.parametrize(
    "section, text",
    [(0, "Name"), (1, "Description"), (2, "Input (Optional)"), (7, "Input (Optional)")],
)
def test_header_data(section, text):
    assert OptionModel().header_data(section) == text


def test_subgroups_are_nested():
    data = [
        {
            "name": "top",
            "subgroups": [
                {"name": "a", "options": ["x"]},
                {"name": "b", "selected": True, "options": ["y", "z"]},
            ],
        }
    ]
    model = OptionModel()
    model.setup_model_data(data)
    top = model.item_at(0)
    assert model.row_count(top) == 2
    assert top.selected == CheckState.PARTIALLY_CHECKED
    assert model.get_option_names(model.get_options()) == ["y", "z"]


def test_subgroups_not_a_list_adds_nothing():
    model = OptionModel()
    model.setup_model_data([{"name": "top", "subgroups": "nope"}])
    assert model.row_count(model.item_at(0)) == 0


def test_empty_entries_are_skipped():
    model = OptionModel()
    model.setup_model_data([{}, "text", {"name": "real"}])
    assert model.row_count() == 1
    assert model.item_at(0).name == "real"


def test_append_prunes_same_source():
    model = OptionModel()
    model.setup_model_data(
        [{"name": "old", "source": "remote"}, {"name": "keep", "source": "local"}]
    )
    model.append_model_data([{"name": "new", "source": "remote"}])
    assert [child.name for child in model.root_item.children] == ["keep", "new"]


def test_append_without_source_keeps_existing():
    model = _model(DOC)
    model.append_model_data([{"name": "extra"}])
    assert [child.name for child in model.root_item.children] == ["CCR", "extra"]


def test_hidden_exception_uses_global_storage():
    data = [{"name": "data", "description": "DATA=on"}]
    hidden = OptionModel({"partitions": "/data"})
    hidden.setup_model_data(data)
    shown = OptionModel({"partitions": "/home"})
    shown.setup_model_data(data)
    assert hidden.item_at(0).is_hidden
    assert not shown.item_at(0).is_hidden


def test_update_next_call_is_stored():
    calls = []
    model = OptionModel()
    model.set_update_next_call(calls.append)
    model.update_next_call(True)
    assert calls == [True]