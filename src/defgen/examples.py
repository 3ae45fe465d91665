"""
Example export graph for demos and tests.

Builds a small module surface touching every renderable kind:
constants, a plain global, an enum, a generic function with two compiled
instantiations (and one dead one), namespaces (one empty), classes with
a base, an abstract class and an interface.
"""
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
from defgen.types import TypeKind, type_of


COMPILED = CommonFlags.COMPILED
CONST = CommonFlags.COMPILED | CommonFlags.INLINED


def _function(name: str, params, return_kind: TypeKind, flags=COMPILED) -> Function:
    return Function(
        name,
        flags,
        signature=Signature(
            parameter_types=[type_of(kind) for _, kind in params],
            parameter_names=[param for param, _ in params],
            return_type=type_of(return_kind),
        ),
    )


def build_example_module(is_64bit: bool = False) -> ExportGraph:
    graph = ExportGraph(is_64bit=is_64bit)

    graph.add(Global("VERSION", CONST, type=type_of(TypeKind.I32),
                     constant_value=ConstantValue(ConstantValueKind.INTEGER, 7)))
    graph.add(Global("EPSILON", CONST, type=type_of(TypeKind.F64),
                     constant_value=ConstantValue(ConstantValueKind.FLOAT, 0.5)))
    graph.add(Global("counter", COMPILED, type=type_of(TypeKind.U32)))
    graph.add(Global("heapBase", COMPILED, type=type_of(TypeKind.USIZE)))
    # never referenced, pruned from output
    graph.add(Global("unused", CommonFlags.NONE, type=type_of(TypeKind.I32)))

    graph.add(Enum("Color", COMPILED, members={
        "RED": EnumValue("RED", CONST, constant_value=0),
        "GREEN": EnumValue("GREEN", CONST, constant_value=1),
        "BLUE": EnumValue("BLUE", CONST, constant_value=2),
    }))

    graph.add(FunctionPrototype("max", instances=[
        _function("max", [("a", TypeKind.I32), ("b", TypeKind.I32)], TypeKind.I32),
        _function("max", [("a", TypeKind.F64), ("b", TypeKind.F64)], TypeKind.F64),
        _function("max", [("a", TypeKind.I64), ("b", TypeKind.I64)], TypeKind.I64, flags=CommonFlags.NONE),
    ]))
    graph.add(FunctionPrototype("reset", instances=[
        _function("reset", [], TypeKind.VOID),
    ]))

    graph.add(Namespace("math", COMPILED, members={
        "PI": Global("PI", CONST, type=type_of(TypeKind.F64),
                     constant_value=ConstantValue(ConstantValueKind.FLOAT, 3.141592653589793)),
        "abs": FunctionPrototype("abs", instances=[
            _function("abs", [("x", TypeKind.F64)], TypeKind.F64),
        ]),
    }))
    graph.add(Namespace("empty", COMPILED, members={}))

    shape = Class("Shape", COMPILED | CommonFlags.ABSTRACT)
    graph.add(ClassPrototype("Shape", instances=[shape]))
    graph.add(ClassPrototype("Circle", instances=[Class("Circle", COMPILED, base=shape)]))
    graph.add(ClassPrototype("Drawable", instances=[Interface("Drawable", COMPILED)]))

    return graph
