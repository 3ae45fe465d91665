"""
TypeScript ambient definitions generator.

Renders the export graph as an ambient module declaration, preceded by
aliases for the short primitive type names used throughout:

    declare module ASModule {
      type i8 = number;
      ...
      type bool = any;
      const X: i32;
      function max(a: i32, b: i32): i32;
    }

Member exports of globals, functions and enums are rendered as a
namespace of the same name following the declaration (declaration
merging). Namespaces without members are elided.
"""

import logging
from typing import Dict

from defgen.model import (
    Class,
    CommonFlags,
    Element,
    ElementKind,
    Enum,
    ExportGraph,
    Function,
    Global,
    Interface,
    Namespace,
)
from defgen.text import TextBuilder, format_integer
from defgen.types import Type, TypeKind
from defgen.walker import ExportsWalker, UnsupportedTypeError


logger = logging.getLogger(__name__)

MODULE_NAME = "ASModule"

PRIMITIVE_ALIASES = [
    ("i8", "number"),
    ("i16", "number"),
    ("i32", "number"),
    ("u8", "number"),
    ("u16", "number"),
    ("u32", "number"),
    ("f32", "number"),
    ("f64", "number"),
    ("bool", "any"),
]

# Pointer-sized kinds are resolved before lookup.
TS_TYPE_NAMES: Dict[TypeKind, str] = {
    TypeKind.I8: "i8",
    TypeKind.I16: "i16",
    TypeKind.I32: "i32",
    TypeKind.I64: "I64",
    TypeKind.U8: "u8",
    TypeKind.U16: "u16",
    TypeKind.U32: "u32",
    TypeKind.U64: "U64",
    TypeKind.BOOL: "bool",
    TypeKind.F32: "f32",
    TypeKind.F64: "f64",
    TypeKind.VOID: "void",
}


class TSDBuilder(ExportsWalker):
    """Builds TypeScript definitions for one export graph."""

    def __init__(self, graph: ExportGraph):
        super().__init__(graph)
        self.sb = TextBuilder()

    @classmethod
    def render(cls, graph: ExportGraph) -> str:
        return cls(graph).build()

    def visit_global(self, element: Global) -> None:
        if not self.mark_visited(element):
            return
        sb = self.sb
        sb.indent()
        if element.has(CommonFlags.INLINED):
            sb.push("const ")
        sb.push(element.simple_name, ": ", self.type_to_string(element.type), ";\n")
        self._visit_members_namespace(element)

    def visit_enum(self, element: Enum) -> None:
        if not self.mark_visited(element):
            return
        sb = self.sb
        remaining = []
        sb.open_block("enum ", element.simple_name)
        for name, member in element.member_items():
            if member.kind != ElementKind.ENUM_VALUE:
                remaining.append(member)
                continue
            self.mark_visited(member)
            sb.indent()
            sb.push(name)
            if member.has(CommonFlags.INLINED):
                sb.push(" = ", format_integer(member.constant_value))
            sb.push(",\n")
        sb.close_block()
        if remaining:
            sb.open_block("namespace ", element.simple_name)
            for member in remaining:
                self.visit_element(member)
            sb.close_block()

    def visit_function(self, element: Function) -> None:
        if not self.mark_visited(element):
            return
        sb = self.sb
        signature = element.signature
        sb.indent()
        sb.push("function ", element.simple_name, "(")
        for i, parameter_type in enumerate(signature.parameter_types):
            if i:
                sb.push(", ")
            sb.push(signature.parameter_name(i), ": ", self.type_to_string(parameter_type))
        sb.push("): ", self.type_to_string(signature.return_type), ";\n")
        self._visit_members_namespace(element)

    def visit_class(self, element: Class) -> None:
        if not self.mark_visited(element):
            return
        header = []
        if element.kind == ElementKind.INTERFACE:
            header.append("interface ")
        else:
            if element.has(CommonFlags.ABSTRACT):
                header.append("abstract ")
            header.append("class ")
        header.append(element.simple_name)
        if element.base is not None:
            # simple name only, bases are not qualified
            header += [" extends ", element.base.simple_name]
        self.sb.open_block(*header)
        self.sb.close_block()

    def visit_interface(self, element: Interface) -> None:
        self.visit_class(element)

    def visit_namespace(self, element: Namespace) -> None:
        if not self.mark_visited(element):
            return
        self._visit_members_namespace(element)

    def _visit_members_namespace(self, element: Element) -> None:
        if not element.members:
            return
        sb = self.sb
        sb.open_block("namespace ", element.simple_name)
        for _, member in element.member_items():
            self.visit_element(member)
        sb.close_block()

    def type_to_string(self, t: Type) -> str:
        kind = self.resolve_type(t)
        try:
            return TS_TYPE_NAMES[kind]
        except KeyError:
            raise UnsupportedTypeError(f"No TypeScript spelling for type {kind.value}") from None

    def build(self) -> str:
        self.reset_visited()
        self.sb = sb = TextBuilder()
        sb.open_block("declare module ", MODULE_NAME)
        for alias, target in PRIMITIVE_ALIASES:
            sb.line("type ", alias, " = ", target, ";")
        self.walk()
        sb.close_block()
        logger.debug("Built TypeScript definitions: %d fragments, %d elements", len(sb.fragments), len(self._visited))
        return sb.build()


def generate_typescript(graph: ExportGraph) -> str:
    """
    Generate TypeScript ambient definitions for an export graph.

    Args:
        graph: Fully resolved, dead-code-pruned export graph

    Returns:
        TypeScript declaration text

    Raises:
        UnsupportedElementError: If an element kind cannot be rendered
        UnsupportedTypeError: If a type has no TypeScript spelling
    """
    return TSDBuilder.render(graph)


__all__ = ["TSDBuilder", "generate_typescript", "TS_TYPE_NAMES", "PRIMITIVE_ALIASES"]
