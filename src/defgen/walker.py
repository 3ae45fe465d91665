"""
Export Walker: shared traversal skeleton for the definitions backends.

Iterates the root exports of an ExportGraph in declaration order and
dispatches every reachable element to a kind-specific visit method.

Generic prototypes have no runtime shape of their own: the walker never
renders a FunctionPrototype/ClassPrototype directly, only those of its
instances that were actually compiled.

IMPORTANT:
    A walker owns mutable per-build state (the visited set). Subclasses
    reset it at the start of every build via reset_visited().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Set

from defgen.model import (
    Class,
    Element,
    ElementKind,
    Enum,
    ExportGraph,
    Function,
    Global,
    Interface,
    Namespace,
)
from defgen.types import Type, TypeKind


logger = logging.getLogger(__name__)


class DefinitionsError(Exception):
    """Base class for rendering failures. Always a contract violation upstream."""
    pass


class UnsupportedElementError(DefinitionsError):
    """Raised when an element kind outside the renderable set reaches the dispatcher."""
    pass


class UnsupportedTypeError(DefinitionsError):
    """Raised when a type has no spelling in a backend's type table."""
    pass


class ExportsWalker(ABC):
    """
    Walks the exports of one graph.

    Properties:
        graph: The export graph being rendered (never mutated)
    """

    def __init__(self, graph: ExportGraph):
        self.graph = graph
        self._visited: Set[int] = set()

    # =========================================================================
    # VISITED SET
    # =========================================================================

    def reset_visited(self) -> None:
        self._visited = set()

    def mark_visited(self, element: Element) -> bool:
        """
        Record element as emitted.

        Returns:
            True the first time an element is seen, False afterwards
        """
        if element.handle in self._visited:
            return False
        self._visited.add(element.handle)
        return True

    # =========================================================================
    # TRAVERSAL
    # =========================================================================

    def walk(self) -> None:
        for name, element in self.graph.exports.items():
            logger.debug("Walking export %s (%s)", name, element.kind.value)
            self.visit_element(element)

    def visit_element(self, element: Element) -> None:
        kind = element.kind

        if kind == ElementKind.GLOBAL:
            if self._compiled(element):
                self.visit_global(element)

        elif kind == ElementKind.ENUM:
            if self._compiled(element):
                self.visit_enum(element)

        elif kind == ElementKind.FUNCTION_PROTOTYPE:
            for instance in element.instances:
                if self._compiled(instance):
                    self.visit_function(instance)

        elif kind == ElementKind.FUNCTION:
            if self._compiled(element):
                self.visit_function(element)

        elif kind == ElementKind.CLASS_PROTOTYPE:
            for instance in element.instances:
                if self._compiled(instance):
                    self._visit_class_like(instance)

        elif kind in (ElementKind.CLASS, ElementKind.INTERFACE):
            if self._compiled(element):
                self._visit_class_like(element)

        elif kind == ElementKind.NAMESPACE:
            if self._compiled(element):
                self.visit_namespace(element)

        else:
            raise UnsupportedElementError(
                f"Cannot render element '{element.simple_name}' of kind {kind.value}"
            )

    def _visit_class_like(self, element: Class) -> None:
        if element.kind == ElementKind.INTERFACE:
            self.visit_interface(element)
        else:
            self.visit_class(element)

    @staticmethod
    def _compiled(element: Element) -> bool:
        if element.is_compiled:
            return True
        logger.debug("Skipping uncompiled %s %s", element.kind.value, element.simple_name)
        return False

    # =========================================================================
    # TYPES
    # =========================================================================

    def resolve_type(self, t: Type) -> TypeKind:
        """
        Resolve a type to the kind used for table lookup.

        Raises:
            UnsupportedTypeError: For function- or class-typed values
        """
        if t.is_reference:
            raise UnsupportedTypeError(f"Reference-typed value '{t}' has no primitive spelling")
        return t.resolve(self.graph.is_64bit)

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    @abstractmethod
    def visit_global(self, element: Global) -> None: ...

    @abstractmethod
    def visit_enum(self, element: Enum) -> None: ...

    @abstractmethod
    def visit_function(self, element: Function) -> None: ...

    @abstractmethod
    def visit_class(self, element: Class) -> None: ...

    @abstractmethod
    def visit_interface(self, element: Interface) -> None: ...

    @abstractmethod
    def visit_namespace(self, element: Namespace) -> None: ...


__all__ = [
    "DefinitionsError",
    "UnsupportedElementError",
    "UnsupportedTypeError",
    "ExportsWalker",
]
