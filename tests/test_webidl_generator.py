"""
Tests for the WebIDL definitions generator.

These tests verify that export graphs are rendered as a single
`interface ASModule { ... }` block with the expected declarations.

Tests cover:
    - Module wrapper
    - Globals and constant literals
    - Enums as nested interfaces
    - Functions and generic instantiations
    - Classes, interfaces and namespaces
    - Type spelling (incl. pointer-sized kinds)
"""

import pytest

from defgen.backends.webidl import WebIDLBuilder, generate_webidl
from defgen.examples import build_example_module
from defgen.model import (
    Class,
    ClassPrototype,
    CommonFlags,
    ConstantValue,
    ConstantValueKind,
    Enum,
    EnumValue,
    ExportGraph,
    Function,
    FunctionPrototype,
    Global,
    Interface,
    Namespace,
    Signature,
)
from defgen.types import Type, TypeKind
from defgen.walker import UnsupportedTypeError


COMPILED = CommonFlags.COMPILED
CONST = CommonFlags.COMPILED | CommonFlags.INLINED


def int_const(name, value, kind=TypeKind.I32):
    return Global(name, CONST, type=Type(kind),
                  constant_value=ConstantValue(ConstantValueKind.INTEGER, value))


def function(name, params, return_kind, flags=COMPILED):
    return Function(name, flags, signature=Signature(
        parameter_types=[Type(k) for _, k in params],
        parameter_names=[n for n, _ in params],
        return_type=Type(return_kind),
    ))


def lines_of(text):
    return text.splitlines()


class TestWebIDLModuleStructure:
    """Test the module wrapper."""

    def test_empty_graph_renders_empty_module(self):
        """Should render only the wrapper for an empty graph."""
        assert generate_webidl(ExportGraph()) == "interface ASModule {\n}\n"

    def test_declarations_are_indented_inside_module(self):
        graph = ExportGraph()
        graph.add(int_const("X", 7))
        assert generate_webidl(graph) == "interface ASModule {\n  const long X = 7;\n}\n"

    def test_order_preserved(self):
        """Exports declared as A, B, C render in that order."""
        graph = ExportGraph()
        for name in ("C", "A", "B"):
            graph.add(int_const(name, 1))
        out = generate_webidl(graph)
        assert out.index(" C ") < out.index(" A ") < out.index(" B ")


class TestWebIDLGlobals:
    """Test global rendering."""

    def test_inlined_integer_constant(self):
        graph = ExportGraph()
        graph.add(int_const("X", 7))
        assert "  const long X = 7;" in lines_of(generate_webidl(graph))

    def test_negative_integer_is_signed_decimal(self):
        graph = ExportGraph()
        graph.add(int_const("MIN", -128, TypeKind.I8))
        assert "  const byte MIN = -128;" in lines_of(generate_webidl(graph))

    def test_inlined_float_constant(self):
        graph = ExportGraph()
        graph.add(Global("HALF", CONST, type=Type(TypeKind.F32),
                         constant_value=ConstantValue(ConstantValueKind.FLOAT, 0.5)))
        assert "  const unrestricted float HALF = 0.5;" in lines_of(generate_webidl(graph))

    def test_integral_float_drops_fraction(self):
        graph = ExportGraph()
        graph.add(Global("TWO", CONST, type=Type(TypeKind.F64),
                         constant_value=ConstantValue(ConstantValueKind.FLOAT, 2.0)))
        assert "  const unrestricted double TWO = 2;" in lines_of(generate_webidl(graph))

    def test_float_constant_with_int_payload(self):
        graph = ExportGraph()
        graph.add(Global("TWO", CONST, type=Type(TypeKind.F64),
                         constant_value=ConstantValue(ConstantValueKind.FLOAT, 2)))
        graph.add(Global("TINY", CONST, type=Type(TypeKind.F64),
                         constant_value=ConstantValue(ConstantValueKind.FLOAT, 1e-07)))
        lines = lines_of(generate_webidl(graph))
        assert "  const unrestricted double TWO = 2;" in lines
        assert "  const unrestricted double TINY = 1e-7;" in lines

    def test_non_finite_float_literals(self):
        graph = ExportGraph()
        graph.add(Global("INF", CONST, type=Type(TypeKind.F64),
                         constant_value=ConstantValue(ConstantValueKind.FLOAT, float("inf"))))
        graph.add(Global("NAN", CONST, type=Type(TypeKind.F64),
                         constant_value=ConstantValue(ConstantValueKind.FLOAT, float("nan"))))
        lines = lines_of(generate_webidl(graph))
        assert "  const unrestricted double INF = Infinity;" in lines
        assert "  const unrestricted double NAN = NaN;" in lines

    def test_mutable_global_has_no_literal(self):
        """Globals without INLINED render without const and without literal."""
        graph = ExportGraph()
        graph.add(Global("counter", COMPILED, type=Type(TypeKind.U32)))
        assert "  unsigned long counter;" in lines_of(generate_webidl(graph))

    def test_uncompiled_global_is_skipped(self):
        graph = ExportGraph()
        graph.add(Global("dead", CommonFlags.INLINED, type=Type(TypeKind.I32)))
        assert "dead" not in generate_webidl(graph)


class TestWebIDLEnums:
    """Test enum rendering."""

    def test_enum_becomes_nested_interface(self):
        graph = ExportGraph()
        graph.add(Enum("Color", COMPILED, members={
            "RED": EnumValue("RED", CONST, constant_value=0),
            "GREEN": EnumValue("GREEN", CONST, constant_value=1),
        }))
        assert generate_webidl(graph) == (
            "interface ASModule {\n"
            "  interface Color {\n"
            "    const unsigned long RED = 0;\n"
            "    const unsigned long GREEN = 1;\n"
            "  }\n"
            "}\n"
        )

    def test_non_inlined_enum_value_is_readonly(self):
        graph = ExportGraph()
        graph.add(Enum("Flags", COMPILED, members={
            "DYNAMIC": EnumValue("DYNAMIC", COMPILED, constant_value=5),
        }))
        lines = lines_of(generate_webidl(graph))
        assert "    readonly unsigned long DYNAMIC;" in lines
        assert "5" not in generate_webidl(graph)

    def test_enum_non_value_members_recurse(self):
        """Non-value members follow the values inside the enum interface."""
        graph = ExportGraph()
        graph.add(Enum("Mode", COMPILED, members={
            "parse": FunctionPrototype("parse", instances=[
                function("parse", [("s", TypeKind.USIZE)], TypeKind.I32),
            ]),
            "A": EnumValue("A", CONST, constant_value=0),
        }))
        lines = lines_of(generate_webidl(graph))
        assert lines[1:5] == [
            "  interface Mode {",
            "    const unsigned long A = 0;",
            "    long parse(unsigned long s);",
            "  }",
        ]


class TestWebIDLFunctions:
    """Test function rendering."""

    def test_function_signature(self):
        graph = ExportGraph()
        graph.add(FunctionPrototype("add", instances=[
            function("add", [("a", TypeKind.I32), ("b", TypeKind.I32)], TypeKind.I32),
        ]))
        assert "  long add(long a, long b);" in lines_of(generate_webidl(graph))

    def test_function_without_parameters(self):
        graph = ExportGraph()
        graph.add(FunctionPrototype("tick", instances=[function("tick", [], TypeKind.VOID)]))
        assert "  void tick();" in lines_of(generate_webidl(graph))

    def test_missing_parameter_names_fall_back(self):
        graph = ExportGraph()
        graph.add(Function("f", COMPILED, signature=Signature(
            parameter_types=[Type(TypeKind.BOOL)], return_type=Type(TypeKind.VOID))))
        assert "  void f(boolean arg0);" in lines_of(generate_webidl(graph))

    def test_generic_instances_render_independently(self):
        """Two compiled instantiations yield two declarations sharing the name."""
        graph = ExportGraph()
        graph.add(FunctionPrototype("max", instances=[
            function("max", [("a", TypeKind.I32), ("b", TypeKind.I32)], TypeKind.I32),
            function("max", [("a", TypeKind.F64), ("b", TypeKind.F64)], TypeKind.F64),
        ]))
        lines = lines_of(generate_webidl(graph))
        assert lines[1:3] == [
            "  long max(long a, long b);",
            "  unrestricted double max(unrestricted double a, unrestricted double b);",
        ]

    def test_prototype_without_compiled_instances_emits_nothing(self):
        graph = ExportGraph()
        graph.add(FunctionPrototype("unused", instances=[
            function("unused", [], TypeKind.VOID, flags=CommonFlags.NONE),
        ]))
        assert generate_webidl(graph) == "interface ASModule {\n}\n"

    def test_function_members_become_nested_interface(self):
        graph = ExportGraph()
        fn = function("parse", [("x", TypeKind.I32)], TypeKind.I32)
        fn.members = {"STRICT": int_const("STRICT", 1)}
        graph.add(fn)
        assert generate_webidl(graph) == (
            "interface ASModule {\n"
            "  long parse(long x);\n"
            "  interface parse {\n"
            "    const long STRICT = 1;\n"
            "  }\n"
            "}\n"
        )


class TestWebIDLClassesAndNamespaces:
    """Test classes, interfaces and namespaces."""

    def test_class_has_empty_body(self):
        graph = ExportGraph()
        base = Class("Base", COMPILED)
        graph.add(ClassPrototype("Derived", instances=[Class("Derived", COMPILED, base=base)]))
        assert "  interface Derived {\n  }\n" in generate_webidl(graph)

    def test_interface_renders_like_class(self):
        graph = ExportGraph()
        graph.add(ClassPrototype("Drawable", instances=[Interface("Drawable", COMPILED)]))
        assert "  interface Drawable {\n  }\n" in generate_webidl(graph)

    def test_namespace_members_recurse(self):
        graph = ExportGraph()
        graph.add(Namespace("util", COMPILED, members={
            "inner": Namespace("inner", COMPILED, members={"K": int_const("K", 3)}),
        }))
        assert generate_webidl(graph) == (
            "interface ASModule {\n"
            "  interface util {\n"
            "    interface inner {\n"
            "      const long K = 3;\n"
            "    }\n"
            "  }\n"
            "}\n"
        )

    def test_empty_namespace_still_emitted(self):
        graph = ExportGraph()
        graph.add(Namespace("empty", COMPILED, members={}))
        assert "  interface empty {\n  }\n" in generate_webidl(graph)


class TestWebIDLTypes:
    """Test type spelling."""

    @pytest.mark.parametrize("kind,expected", [
        (TypeKind.I8, "byte"),
        (TypeKind.I16, "short"),
        (TypeKind.I64, "long long"),
        (TypeKind.U8, "octet"),
        (TypeKind.U16, "unsigned short"),
        (TypeKind.U64, "unsigned long long"),
        (TypeKind.BOOL, "boolean"),
        (TypeKind.F64, "unrestricted double"),
    ])
    def test_primitive_names(self, kind, expected):
        assert WebIDLBuilder(ExportGraph()).type_to_string(Type(kind)) == expected

    @pytest.mark.parametrize("is_64bit,isize,usize", [
        (False, "long", "unsigned long"),
        (True, "long long", "unsigned long long"),
    ])
    def test_pointer_sized_follow_addressing_width(self, is_64bit, isize, usize):
        builder = WebIDLBuilder(ExportGraph(is_64bit=is_64bit))
        assert builder.type_to_string(Type(TypeKind.ISIZE)) == isize
        assert builder.type_to_string(Type(TypeKind.USIZE)) == usize

    def test_v128_is_fatal(self):
        graph = ExportGraph()
        graph.add(Global("vec", COMPILED, type=Type(TypeKind.V128)))
        with pytest.raises(UnsupportedTypeError):
            generate_webidl(graph)

    def test_class_typed_value_is_fatal(self):
        graph = ExportGraph()
        graph.add(Global("obj", COMPILED, type=Type(TypeKind.USIZE, class_reference="Foo")))
        with pytest.raises(UnsupportedTypeError):
            generate_webidl(graph)


class TestWebIDLExampleModule:
    """Full rendering of the example module."""

    def test_example_module(self):
        assert generate_webidl(build_example_module()) == (
            "interface ASModule {\n"
            "  const long VERSION = 7;\n"
            "  const unrestricted double EPSILON = 0.5;\n"
            "  unsigned long counter;\n"
            "  unsigned long heapBase;\n"
            "  interface Color {\n"
            "    const unsigned long RED = 0;\n"
            "    const unsigned long GREEN = 1;\n"
            "    const unsigned long BLUE = 2;\n"
            "  }\n"
            "  long max(long a, long b);\n"
            "  unrestricted double max(unrestricted double a, unrestricted double b);\n"
            "  void reset();\n"
            "  interface math {\n"
            "    const unrestricted double PI = 3.141592653589793;\n"
            "    unrestricted double abs(unrestricted double x);\n"
            "  }\n"
            "  interface empty {\n"
            "  }\n"
            "  interface Shape {\n"
            "  }\n"
            "  interface Circle {\n"
            "  }\n"
            "  interface Drawable {\n"
            "  }\n"
            "}\n"
        )

    def test_64bit_changes_pointer_sized_global(self):
        out = generate_webidl(build_example_module(is_64bit=True))
        assert "  unsigned long long heapBase;" in lines_of(out)
