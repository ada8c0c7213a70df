# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Builds the schema tree from a declarative field set."""

import logging
from collections.abc import Sequence
from typing import Any

from .coercion import coerce_default
from .exceptions import ShapeError, TagError
from .models import FieldKind, FieldSpec
from .node import ConfigNode
from .schema import ConfigSchema, as_schema

logger = logging.getLogger(__name__)


class SchemaBuilder:
    """Walks field descriptions and produces an immutable ConfigNode tree.

    Children are created in declaration order and attached to their parent
    as soon as they are constructed. Any error aborts the whole build; no
    partial tree is returned.
    """

    def build(self, source: Any) -> ConfigNode:
        """Build a tree from a schema declaration.

        Args:
            source: ConfigSchema, dataclass type, struct FieldSpec or list of FieldSpec

        Returns:
            The synthetic root node

        Raises:
            ShapeError: If the root or a nested struct is not a container
            TagError: If a field has no binding key
            DefaultValueError: If a declared default does not parse
            StructuralError: If a node would be both container and leaf
        """
        schema = as_schema(source)
        root = ConfigNode.root()
        root.target = schema.target
        self._build_children(root, schema.fields)
        logger.debug(
            f"Built schema tree for {schema.service_name} "
            f"with {sum(1 for _ in root.all_leaves())} leaves"
        )
        return root

    def _build_children(self, parent: ConfigNode, fields: Sequence[FieldSpec]) -> None:
        for spec in fields:
            if not spec.binding_key:
                raise TagError(f"field {spec.name} has no binding key")

            node = ConfigNode(
                spec.binding_key,
                description=spec.description,
                env_override=spec.env,
                attr_name=spec.name,
            )
            parent.add_child(node)

            if spec.kind == FieldKind.STRUCT:
                self._build_struct(node, spec)
            else:
                present, value = coerce_default(spec.name, spec.kind, spec.is_array, spec.default)
                node.set_leaf(spec.kind, spec.is_array, present, value)

    def _build_struct(self, node: ConfigNode, spec: FieldSpec) -> None:
        # An empty container is neither a container nor a leaf
        if not spec.fields:
            raise ShapeError(f"field {spec.name}: struct type declares no fields")

        if spec.default is not None:
            logger.warning(
                f"Ignoring default '{spec.default}' declared on struct field {spec.name}"
            )

        node.is_array_of_structs = spec.is_array
        node.target = spec.target
        self._build_children(node, spec.fields)


def build_tree(source: Any) -> ConfigNode:
    """Build a schema tree; see SchemaBuilder.build."""
    return SchemaBuilder().build(source)


def build_from_schema_file(filepath: str) -> ConfigNode:
    """Load a JSON/YAML schema file and build its tree."""
    return build_tree(ConfigSchema.from_file(filepath))
