"""
WebIDL definitions generator.

Renders the export graph as a single top-level interface:

    interface ASModule {
      const long X = 7;
      long max(long a, long b);
    }

Enums, namespaces and functions carrying member exports become nested
interfaces. Class and interface bodies are emitted empty.
"""

import logging
from typing import Dict

from defgen.model import (
    Class,
    CommonFlags,
    ConstantValueKind,
    ElementKind,
    Enum,
    ExportGraph,
    Function,
    Global,
    Interface,
    Namespace,
)
from defgen.text import TextBuilder, format_float, format_integer
from defgen.types import Type, TypeKind
from defgen.walker import ExportsWalker, UnsupportedTypeError


logger = logging.getLogger(__name__)

MODULE_NAME = "ASModule"

# Pointer-sized kinds are resolved before lookup.
WEBIDL_TYPE_NAMES: Dict[TypeKind, str] = {
    TypeKind.I8: "byte",
    TypeKind.I16: "short",
    TypeKind.I32: "long",
    TypeKind.I64: "long long",
    TypeKind.U8: "octet",
    TypeKind.U16: "unsigned short",
    TypeKind.U32: "unsigned long",
    TypeKind.U64: "unsigned long long",
    TypeKind.BOOL: "boolean",
    TypeKind.F32: "unrestricted float",
    TypeKind.F64: "unrestricted double",
    TypeKind.VOID: "void",
}


class WebIDLBuilder(ExportsWalker):
    """Builds WebIDL definitions for one export graph."""

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
        is_const = element.has(CommonFlags.INLINED)
        sb.indent()
        if is_const:
            sb.push("const ")
        sb.push(self.type_to_string(element.type), " ", element.simple_name)
        constant = element.constant_value
        if is_const and constant is not None:
            if constant.kind == ConstantValueKind.INTEGER:
                sb.push(" = ", format_integer(constant.value))
            else:
                sb.push(" = ", format_float(constant.value))
        sb.push(";\n")

    def visit_enum(self, element: Enum) -> None:
        if not self.mark_visited(element):
            return
        sb = self.sb
        sb.open_block("interface ", element.simple_name)
        for name, member in element.member_items():
            if member.kind != ElementKind.ENUM_VALUE:
                continue
            if member.has(CommonFlags.INLINED):
                sb.line("const unsigned long ", name, " = ", format_integer(member.constant_value), ";")
            else:
                sb.line("readonly unsigned long ", name, ";")
        for _, member in element.member_items():
            if member.kind != ElementKind.ENUM_VALUE:
                self.visit_element(member)
        sb.close_block()

    def visit_function(self, element: Function) -> None:
        if not self.mark_visited(element):
            return
        sb = self.sb
        signature = element.signature
        sb.indent()
        sb.push(self.type_to_string(signature.return_type), " ", element.simple_name, "(")
        for i, parameter_type in enumerate(signature.parameter_types):
            if i:
                sb.push(", ")
            sb.push(self.type_to_string(parameter_type), " ", signature.parameter_name(i))
        sb.push(");\n")
        if element.members:
            sb.open_block("interface ", element.simple_name)
            for _, member in element.member_items():
                self.visit_element(member)
            sb.close_block()

    def visit_class(self, element: Class) -> None:
        if not self.mark_visited(element):
            return
        self.sb.open_block("interface ", element.simple_name)
        self.sb.close_block()

    def visit_interface(self, element: Interface) -> None:
        self.visit_class(element)

    def visit_namespace(self, element: Namespace) -> None:
        if not self.mark_visited(element):
            return
        sb = self.sb
        sb.open_block("interface ", element.simple_name)
        for _, member in element.member_items():
            self.visit_element(member)
        sb.close_block()

    def type_to_string(self, t: Type) -> str:
        kind = self.resolve_type(t)
        try:
            return WEBIDL_TYPE_NAMES[kind]
        except KeyError:
            raise UnsupportedTypeError(f"No WebIDL spelling for type {kind.value}") from None

    def build(self) -> str:
        self.reset_visited()
        self.sb = sb = TextBuilder()
        sb.open_block("interface ", MODULE_NAME)
        self.walk()
        sb.close_block()
        logger.debug("Built WebIDL definitions: %d fragments, %d elements", len(sb.fragments), len(self._visited))
        return sb.build()


def generate_webidl(graph: ExportGraph) -> str:
    """
    Generate WebIDL definitions for an export graph.

    Args:
        graph: Fully resolved, dead-code-pruned export graph

    Returns:
        WebIDL text

    Raises:
        UnsupportedElementError: If an element kind cannot be rendered
        UnsupportedTypeError: If a type has no WebIDL spelling
    """
    return WebIDLBuilder.render(graph)


__all__ = ["WebIDLBuilder", "generate_webidl", "WEBIDL_TYPE_NAMES"]
