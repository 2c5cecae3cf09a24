# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Uploaded file remapping.

Some hosts report uploaded files grouped by attribute rather than by file.
A form field named ``docs[]`` with two files arrives as::

    {'docs': {'name': ['a.txt', 'b.txt'], 'size': [10, 20], ...}}

:func:`map_uploaded_files` turns that into one mapping per file::

    {'docs': [{'name': 'a.txt', 'size': 10, ...},
              {'name': 'b.txt', 'size': 20, ...}]}

Nested field names (``docs[cv][]``) are handled recursively.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

__all__ = ('map_uploaded_files',)


def _indexed_items(value: Any):
    if isinstance(value, Mapping):
        return value.items()
    return enumerate(value)


def _is_branch(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _map_file_param(target: Dict[Any, Any], param: str, index: Any, value: Any) -> None:
    if not _is_branch(value):
        target.setdefault(index, {})[param] = value
        return

    node = target.setdefault(index, {})
    for sub_index, sub_value in _indexed_items(value):
        _map_file_param(node, param, sub_index, sub_value)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node

    converted = {key: _listify(value) for key, value in node.items()}
    if converted and all(isinstance(key, int) for key in converted):
        if sorted(converted) == list(range(len(converted))):
            return [converted[i] for i in range(len(converted))]

    return converted


def map_uploaded_files(files: Mapping[str, Any]) -> Dict[str, Any]:
    """Regroup a by-attribute upload tree into one mapping per file.

    Args:
        files: Uploaded files keyed by form field name. Each entry maps
            attribute names (``'name'``, ``'type'``, ``'tmp_name'``,
            ``'error'``, ``'size'``) either to a scalar, for a single file,
            or to parallel lists/mappings, for several files sharing the
            field name.

    Returns:
        dict: A new tree in which each leaf is a mapping of attributes for
        a single file. Sequences in the input become lists in the output.

    Raises:
        TypeError: A field entry was not a mapping of attributes.
    """
    mapped: Dict[str, Any] = {}

    for field_name, file_params in files.items():
        if not isinstance(file_params, Mapping):
            raise TypeError(
                'Upload entry %r must be a mapping of attributes, not %s'
                % (field_name, type(file_params).__name__)
            )

        entry: Dict[Any, Any] = {}
        for param, data in file_params.items():
            if not _is_branch(data):
                entry[param] = data
            else:
                for index, value in _indexed_items(data):
                    _map_file_param(entry, param, index, value)

        mapped[field_name] = _listify(entry)

    return mapped
