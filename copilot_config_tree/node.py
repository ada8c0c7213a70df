# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Schema tree node."""

import weakref
from collections.abc import Iterator
from typing import Any, Optional

from .exceptions import StructuralError
from .models import ENV_SUPPRESS, FieldKind, LeafDescriptor

ROOT_FIELD_NAME = "root"


class ConfigNode:
    """A single element of the schema tree.

    A node is either a container (it has children) or a leaf (it has a
    LeafDescriptor), never both. The parent is held through a weak reference
    and is only used to walk upwards when reconstructing paths. Every
    attached node holds the top node of its tree, so a handle to any node
    keeps the whole tree alive.
    """

    def __init__(
        self,
        field_name: str,
        description: str = "",
        env_override: str = "",
        attr_name: Optional[str] = None,
    ):
        self.field_name = field_name
        self.description = description
        self.env_override = env_override
        self.attr_name = attr_name or field_name
        self.level = 0
        self.children: list["ConfigNode"] = []
        self.is_array_of_structs = False
        self.leaf: Optional[LeafDescriptor] = None
        # Dataclass instantiated when decoding this container, if any
        self.target: Optional[type] = None
        self._parent: Optional[weakref.ReferenceType] = None
        self._owner: Optional["ConfigNode"] = None

    @classmethod
    def root(cls) -> "ConfigNode":
        """Create the synthetic root node."""
        return cls(ROOT_FIELD_NAME, "root node")

    @property
    def parent(self) -> Optional["ConfigNode"]:
        """The parent node, or None for the top of a tree.

        Raises:
            StructuralError: If the parent has been garbage collected
        """
        if self._parent is None:
            return None
        parent = self._parent()
        if parent is None:
            raise StructuralError(f"parent of node '{self.field_name}' no longer exists")
        return parent

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def is_leaf(self) -> bool:
        return self.leaf is not None

    def add_child(self, child: "ConfigNode") -> None:
        """Attach a child node.

        Raises:
            StructuralError: If this node already carries a leaf descriptor
        """
        if self.leaf is not None:
            raise StructuralError(
                f"node '{self.field_name}' is a leaf, cannot add child '{child.field_name}'"
            )
        child._parent = weakref.ref(self)
        child.level = self.level + 1
        self.children.append(child)
        child._set_owner(self._owner or self)

    def _set_owner(self, owner: "ConfigNode") -> None:
        self._owner = owner
        for child in self.children:
            child.level = self.level + 1
            child._set_owner(owner)

    def set_leaf(
        self,
        kind: FieldKind,
        is_array: bool = False,
        default_present: bool = False,
        default_value: Any = None,
    ) -> None:
        """Turn this node into a leaf.

        Raises:
            StructuralError: If this node already has children
        """
        if self.children:
            raise StructuralError(
                f"node '{self.field_name}' has children, cannot become a leaf"
            )
        self.leaf = LeafDescriptor(
            kind=kind,
            is_array=is_array,
            default_present=default_present,
            default_value=default_value,
        )

    def ancestors(self) -> list["ConfigNode"]:
        """Return ancestors below the root, ordered from the top down."""
        nodes: list[ConfigNode] = []
        current = self.parent
        while current is not None and not current.is_root:
            nodes.append(current)
            current = current.parent
        nodes.reverse()
        return nodes

    def full_path(self) -> list[str]:
        """Return field names from just below the root down to this node."""
        if self.is_root:
            return []
        return [node.field_name for node in self.ancestors()] + [self.field_name]

    def bind_key(self) -> str:
        """Dotted path used to address this node in merged values."""
        return ".".join(self.full_path())

    def all_leaves(self) -> Iterator["ConfigNode"]:
        """Yield every leaf in this subtree, depth-first in declaration order."""
        if self.leaf is not None:
            yield self
        for child in self.children:
            yield from child.all_leaves()

    def in_struct_array(self) -> bool:
        """True when this node templates an element of a struct array."""
        return any(node.is_array_of_structs for node in self.ancestors())

    def resolved_env_name(self) -> tuple[str, bool]:
        """Derive the environment variable bound to this node.

        Returns:
            Tuple of (name, exists). When any node on the path suppresses
            environment binding, exists is False and name is empty.
        """
        chain = self.ancestors() + [self]
        if any(node.env_override == ENV_SUPPRESS for node in chain):
            return "", False

        if self.env_override:
            return self.env_override.upper(), True

        fragments = [node.env_override or node.field_name for node in chain[:-1]]
        fragments.append(self.field_name)
        return "_".join(fragments).upper(), True

    def __repr__(self) -> str:
        kind = "leaf" if self.leaf is not None else "container"
        return f"ConfigNode({self.field_name!r}, level={self.level}, {kind})"
