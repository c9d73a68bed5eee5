# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Qualified-name registry: maps dotted names to types and back.

Types are placed in a namespace tree. A namespace is either a dotted string,
materialized as a chain of placeholder nodes (one per segment), or another
registered type. The qualified name of a type is the path of its node, so
relocating a node relocates every type nested under it::

    register("", Parent)
    register(Parent, Child)              # "Parent.Child"
    register("org.example", Parent)      # "org.example.Parent.Child"

The registry also holds the revivers and to-plain-form hooks bound to types.
Both are looked up along the MRO, so a subclass inherits the reviver of its
base class while keeping its own qualified name.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from typing import Any

from jsonrevive.errors import IllegalAccessError, NameConflictError, NameNotFoundError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_NAMESPACE = ""
ERROR_NAMESPACE = "error"


class Namespace:
    """A node of the namespace tree.

    Placeholder nodes stand for one segment of a dotted string namespace and
    carry no *target*; the other nodes carry the registered type.

    Attributes:
        segment: The last segment of the qualified name.
        target: The registered type, or ``None`` for a placeholder.
        parent: The enclosing node, ``None`` for the root.
        children: The nodes nested under this one.
    """

    def __init__(self, segment: str, target: type | None = None) -> None:
        self.segment = segment
        self.target = target
        self.parent: Namespace | None = None
        self.children: list[Namespace] = []
        self.shadowed = False

    @property
    def is_placeholder(self) -> bool:
        return self.target is None

    def path(self) -> str:
        """Return the dotted qualified name of this node."""
        segments: list[str] = []
        node = self
        while node.parent is not None:
            segments.append(node.segment)
            node = node.parent
        return ".".join(reversed(segments))

    def walk(self) -> Iterator[Namespace]:
        """Yield this node and every node nested under it, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"Namespace({self.path()!r})"


NamespaceRef = str | type | Namespace


class Registry:
    """Process-wide table of qualified names, bound revivers and hooks.

    Mutations and name lookups are serialized by a reentrant lock; MRO
    lookups of revivers and hooks only read settled dictionaries.

    Attributes:
        base_error: The type returned when a name of the ``error`` namespace
            is not registered.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._bootstraps: list[Callable[[Registry], None]] = []
        self.base_error: type[BaseException] = Exception
        self.reset()

    # Lifecycle

    def reset(self) -> None:
        """Forget every registered name, reviver and hook."""
        with self._lock:
            self._root = Namespace(DEFAULT_NAMESPACE)
            self._nodes: dict[type, Namespace] = {}
            self._names: dict[str, list[type]] = {}
            self._revivers: dict[type, Any] = {}
            self._hooks: dict[type, Callable[[Any], Any]] = {}

    def add_bootstrap(self, bootstrap: Callable[[Registry], None]) -> None:
        """Add a function run by :meth:`init` to populate a fresh registry."""
        if bootstrap not in self._bootstraps:
            self._bootstraps.append(bootstrap)

    def init(self) -> None:
        """Reset the registry, then run every bootstrap function in order."""
        with self._lock:
            self.reset()
            for bootstrap in self._bootstraps:
                bootstrap(self)

    # Names

    def register(self, namespace: NamespaceRef, target: type | Namespace, *, name: str | None = None) -> Any:
        """Place *target* under *namespace*, relocating it if already placed.

        Args:
            namespace: A dotted string (``""`` is the root), a type (registered
                on the fly in its default namespace if needed), or a
                :class:`Namespace` placeholder.
            target: The type to place, or a placeholder to relocate together
                with everything nested under it.
            name: Optional new last segment for *target*.

        Returns:
            *target*, so that the call can wrap a class statement.

        Raises:
            IllegalAccessError: If a placeholder would be renamed, or if the
                placement would nest *target* under itself.
        """
        with self._lock:
            parent = self._parent_node(namespace)
            node = target if isinstance(target, Namespace) else self._nodes.get(target)
            if node is None:
                node = Namespace(name or target.__name__, target)
            else:
                if name is not None and name != node.segment and node.is_placeholder:
                    raise IllegalAccessError(f"{node.segment!r}'s name is locked and can't be renamed to {name!r}")
                if node.parent is parent and (name is None or name == node.segment) and not node.shadowed:
                    return target
                self._check_acyclic(node, parent)
                self._detach(node)
                if name is not None:
                    node.segment = name
            node.shadowed = False
            node.parent = parent
            parent.children.append(node)
            if node.target is not None:
                self._nodes[node.target] = node
            self._index(node)
        logger.debug("Placed %r as %r", target, node.path())
        return target

    def namespace(self, dotted: str) -> Namespace:
        """Return the placeholder node of a dotted string namespace, creating it if needed."""
        with self._lock:
            return self._placeholder_chain(dotted)

    def has_namespace(self, target: type) -> bool:
        return target in self._nodes

    def qualified_name_of(self, target: type | Namespace) -> str:
        """Return the dotted qualified name of a type.

        A type that was never placed is named after itself, except exception
        types that fall in the ``error`` namespace.
        """
        if isinstance(target, Namespace):
            with self._lock:
                return target.path()
        with self._lock:
            node = self._nodes.get(target)
            if node is not None:
                return node.path()
        if issubclass(target, BaseException):
            return f"{ERROR_NAMESPACE}.{target.__name__}"
        return target.__name__

    def resolve(self, name: str) -> type:
        """Return the single type registered under *name*.

        Unregistered names of the ``error`` namespace degrade to
        :attr:`base_error`.

        Raises:
            NameConflictError: If more than one type owns *name*.
            NameNotFoundError: If *name* is unknown.
        """
        found = self.lookup(name)
        if found is not None:
            return found
        if name == ERROR_NAMESPACE or name.startswith(ERROR_NAMESPACE + "."):
            return self.base_error
        raise NameNotFoundError(name)

    def lookup(self, name: str) -> type | None:
        """Like :meth:`resolve` without the error fallback; return ``None`` if absent."""
        with self._lock:
            types = self._names.get(name)
            if not types:
                return None
            if len(types) > 1:
                raise NameConflictError(name, len(types))
            return types[0]

    def dedup(self, name: str) -> type:
        """Keep only the first type registered under *name* and return it.

        The other types keep their node but stop answering to *name* until
        they are explicitly relocated.

        Raises:
            NameNotFoundError: If *name* is unknown.
        """
        with self._lock:
            types = self._names.get(name)
            if not types:
                raise NameNotFoundError(name)
            kept, dropped = types[0], types[1:]
            for other in dropped:
                self._nodes[other].shadowed = True
            self._names[name] = [kept]
        if dropped:
            logger.warning("Name %r owned by %d types; kept %r", name, len(dropped) + 1, kept)
        return kept

    def names(self) -> dict[str, int]:
        """Return every registered name with the number of types that own it."""
        with self._lock:
            return {name: len(types) for name, types in sorted(self._names.items())}

    # Bindings

    def bind(self, target: type, reviver: Any, to_json: Callable[[Any], Any] | None = None) -> None:
        """Bind a reviver (and optionally a to-plain-form hook) to *target*.

        A type without a namespace is placed in its default namespace.
        """
        with self._lock:
            if target not in self._nodes:
                self.register(_default_namespace(target), target)
            self._revivers[target] = reviver
            if to_json is not None:
                self._hooks[target] = to_json

    def reviver_of(self, target: type) -> Any | None:
        """Return the reviver bound to *target* or to its closest base class."""
        for klass in getattr(target, "__mro__", (target,)):
            reviver = self._revivers.get(klass)
            if reviver is not None:
                return reviver
        return None

    def bound_name_of(self, target: type) -> str | None:
        """Return the name a captured mapper uses for instances of *target*.

        This is the qualified name of *target* when it has a namespace (or is
        an exception type), otherwise the name of the base class owning the
        inherited reviver. ``None`` means no reviver applies.
        """
        for klass in getattr(target, "__mro__", (target,)):
            if klass in self._revivers:
                if target in self._nodes or issubclass(target, BaseException):
                    return self.qualified_name_of(target)
                return self.qualified_name_of(klass)
        return None

    def json_hook_of(self, target: type) -> Callable[[Any], Any] | None:
        """Return the to-plain-form hook bound to *target* or to its closest base class."""
        for klass in getattr(target, "__mro__", (target,)):
            hook = self._hooks.get(klass)
            if hook is not None:
                return hook
        return None

    # ################
    # Implementation
    # ################

    def _parent_node(self, namespace: NamespaceRef) -> Namespace:
        if isinstance(namespace, Namespace):
            return namespace
        if isinstance(namespace, str):
            return self._placeholder_chain(namespace)
        node = self._nodes.get(namespace)
        if node is None:
            self.register(_default_namespace(namespace), namespace)
            node = self._nodes[namespace]
        return node

    def _placeholder_chain(self, dotted: str) -> Namespace:
        node = self._root
        for segment in (s for s in dotted.split(".") if s):
            child = next((c for c in node.children if c.is_placeholder and c.segment == segment), None)
            if child is None:
                child = Namespace(segment)
                child.parent = node
                node.children.append(child)
            node = child
        return node

    def _check_acyclic(self, node: Namespace, parent: Namespace) -> None:
        ancestor: Namespace | None = parent
        while ancestor is not None:
            if ancestor is node:
                raise IllegalAccessError(f"Can't place {node.path()!r} under itself")
            ancestor = ancestor.parent

    def _detach(self, node: Namespace) -> None:
        self._unindex(node)
        if node.parent is not None:
            node.parent.children.remove(node)
            node.parent = None

    def _index(self, node: Namespace) -> None:
        for n in node.walk():
            if n.target is not None and not n.shadowed:
                types = self._names.setdefault(n.path(), [])
                if n.target not in types:
                    types.append(n.target)

    def _unindex(self, node: Namespace) -> None:
        for n in node.walk():
            if n.target is None:
                continue
            name = n.path()
            types = self._names.get(name, [])
            if n.target in types:
                types.remove(n.target)
            if not types:
                self._names.pop(name, None)


def _default_namespace(target: type) -> str:
    return ERROR_NAMESPACE if issubclass(target, BaseException) else DEFAULT_NAMESPACE


default_registry = Registry()


def register(namespace: NamespaceRef, target: Any, *, name: str | None = None) -> Any:
    """Place *target* under *namespace* in the default registry."""
    return default_registry.register(namespace, target, name=name)


def namespace(dotted: str) -> Namespace:
    """Return the placeholder of a dotted string namespace in the default registry."""
    return default_registry.namespace(dotted)


def qualified_name_of(target: type | Namespace) -> str:
    """Return the qualified name of *target* in the default registry."""
    return default_registry.qualified_name_of(target)


def resolve(name: str) -> type:
    """Resolve *name* in the default registry."""
    return default_registry.resolve(name)


def dedup(name: str) -> type:
    """Collapse a name conflict in the default registry."""
    return default_registry.dedup(name)
