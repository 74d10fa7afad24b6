# instopts

Option trees and preset selection for installer configuration steps.

`instopts` models two steps of an installer:

- **Options**: a tree of groups and options, loaded from YAML group data.
  Groups may be distinct (radio-like), hidden, immutable, non-checkable or
  expanded on start; options may be editable and carry an input value.
  Selection state propagates between parents and children as a tri-state
  `CheckState` (`UNCHECKED`, `PARTIALLY_CHECKED`, `CHECKED`). When the step
  is left, the selected options are joined into one string and stored under
  the `"options"` key of the global storage.
- **Presets**: a list of sections (label, description, icon, target), one
  of which the user picks. When the step is left, the chosen target is
  stored under `"presets"` as `{"selection": target}`. The options step
  reads that selection and fetches its group data from it.

The global storage is any mutable mapping, usually a plain `dict`, shared
between the steps.

## Installation

```
pip install instopts
```

## Modules

- `instopts.optiontree`: `CheckState` and `OptionTreeItem` (the root, groups
  and options, with selection propagation).
- `instopts.optionmodel`: `OptionModel`, which builds the tree from a list of
  group mappings and answers cell queries (`data`, `set_data`, `flags`,
  `header_data`) using `Column`, `Role` and `ItemFlag`.
- `instopts.labels`: `TranslatedString` and `labels_from_config`, for the
  `sidebar`, `title` and `subtitle` labels with `key[locale]` translations.
- `instopts.options_config`: `OptionsConfig` and `Status`.
- `instopts.options_step`: `OptionsStep`, which fetches and parses group data.
- `instopts.section`: the `Section` dataclass.
- `instopts.presets`: `PresetsConfig`, `PresetsStep`, `grid_layout` and
  `border_color`.

## Using the option tree

```python
import yaml

from instopts.optionmodel import OptionModel

groups = yaml.safe_load("""
- name: "Shells"
  description: "Command interpreters"
  selected: true
  options:
    - bash
    - zsh
""")

model = OptionModel({})
model.setup_model_data(groups)

print(model.row_count())                      # 1 group at the top level
selected = model.get_options()
print(model.get_option_names(selected))       # ['bash', 'zsh']
```

Use `OptionTreeItem.set_selected(state)` to change a selection and let it
propagate; `OptionModel.set_selections(names)` checks whole groups by name.
`OptionModel.append_model_data(groups)` adds groups to an existing tree,
first removing top-level groups that came from the same `source`.

A group whose description contains `DATA=` is hidden when the storage's
`"partitions"` value mentions `/data`.

## The options step

```python
from instopts.options_step import OptionsStep

GROUPS = "- name: Shells\n  selected: true\n  options: [bash, zsh]\n"

storage = {"presets": {"selection": "https://example.com/groups.yaml"}}
step = OptionsStep(storage, opener=lambda url: GROUPS)
step.set_configuration_map({"required": True, "label": {"sidebar": "Options"}})
step.on_activate()          # fetches and loads the URL named by the presets step
print(step.is_next_enabled())   # True
print(step.on_leave())      # 'bash zsh ', also stored in storage["options"]
```

The `opener` is called with the URL and returns the document as bytes or
text. By default it is an HTTP(S) fetch through `urllib` with a 30 second
timeout. An `OSError` from it counts as a network error, a `ValueError` as
a bad configuration. The document may be a list of groups or a mapping
with a `groups` list.

`OptionsConfig.status()` gives a readable message for any failure (bad
configuration, internal error, network error, invalid data, no option
list); it is empty when loading succeeded. `status_code` holds the
`Status` member.

## The presets step

```python
from instopts.presets import PresetsStep, grid_layout

storage = {}
step = PresetsStep(storage)
step.set_configuration_map({
    "entries": [
        {"label": "Desktop", "description": "Full desktop", "icon": "", "target": "desktop.yaml"},
        {"label": "Server", "description": "Minimal server", "icon": "", "target": "server.yaml"},
    ]
})
step.select(1)
step.on_leave()
print(storage["presets"])   # {'selection': 'server.yaml'}

print(grid_layout(5))       # [[0, 1, 2], [3, 4]]
```

`grid_layout(count)` returns the section indices of each row, at most three
per row and spread evenly. `PresetsStep.style_sheets()` gives each shown
section's frame style, with `border_color(selected)` as its border colour.

## What this package does not do

It keeps the state and logic of the two steps only. It draws no screens,
has no command-line program, and runs no installation jobs: `jobs()`
returns an empty list on both steps. Icons are kept as paths and are not
loaded or rendered.