# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Environment-variable naming and flattened leaf projections."""

from collections.abc import Iterator

from .models import DefaultInfo, EnvBinding, EnvInfo, FieldKind
from .node import ConfigNode


def resolve_env_name(node: ConfigNode) -> str | None:
    """Return the environment variable bound to a node, or None when suppressed."""
    name, exists = node.resolved_env_name()
    return name if exists else None


def _bindable_nodes(node: ConfigNode) -> Iterator[ConfigNode]:
    if node.leaf is not None or node.is_array_of_structs:
        yield node
        return
    for child in node.children:
        yield from _bindable_nodes(child)


def collect_env_info(tree: ConfigNode) -> list[EnvInfo]:
    """Project every addressable value of the tree into an EnvInfo record.

    Leaves are projected one record each. A struct array is projected as a
    single record for the whole list, whose variable holds a JSON array of
    elements; the leaves templating its elements have no dotted path of their
    own and are not projected.
    """
    infos: list[EnvInfo] = []
    for node in _bindable_nodes(tree):
        if node.leaf is None:
            infos.append(
                EnvInfo(
                    env_var=resolve_env_name(node),
                    bind_key=node.bind_key(),
                    default_present=False,
                    default_value=None,
                    kind=FieldKind.STRUCT,
                    is_array=True,
                    help_text=node.description,
                )
            )
            continue
        descriptor = node.leaf
        infos.append(
            EnvInfo(
                env_var=resolve_env_name(node),
                bind_key=node.bind_key(),
                default_present=descriptor.default_present,
                default_value=descriptor.default_value,
                kind=descriptor.kind,
                is_array=descriptor.is_array,
                help_text=node.description,
            )
        )
    return infos


def default_values(tree: ConfigNode) -> list[DefaultInfo]:
    """Return (dotted path, default) pairs for every leaf with a declared default."""
    return [
        DefaultInfo(info.bind_key, info.default_value)
        for info in collect_env_info(tree)
        if info.default_present
    ]


def env_bindings(tree: ConfigNode) -> list[EnvBinding]:
    """Return (dotted path, environment variable) pairs for every bound value."""
    return [
        EnvBinding(info.bind_key, info.env_var)
        for info in collect_env_info(tree)
        if info.env_var is not None
    ]
