"""
Serialization helpers for export graphs.

Provides JSON/YAML round-trip via an intermediate dict representation,
so graphs produced by a compiler front end can be fed to the backends
from files. This module intentionally keeps the structure explicit.

Shared elements:
    An element reachable through more than one path is encoded once.
    Encoding memoizes per element handle, so YAML output carries an
    anchor/alias pair. Decoding memoizes per decoded mapping, so an
    alias yields one shared element with one handle.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from defgen.model import (
    Class,
    ClassPrototype,
    CommonFlags,
    ConstantValue,
    ConstantValueKind,
    Element,
    ElementKind,
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


class GraphFormatError(ValueError):
    """Raised when a serialized graph cannot be decoded."""
    pass


FLAG_NAMES: Dict[str, CommonFlags] = {
    "compiled": CommonFlags.COMPILED,
    "inlined": CommonFlags.INLINED,
    "abstract": CommonFlags.ABSTRACT,
}


# =============================================================================
# TYPES AND FLAGS
# =============================================================================

def type_to_dict(t: Type | None) -> Any:
    if t is None:
        return None
    if not t.is_reference:
        return t.kind.value
    d: Dict[str, Any] = {"kind": t.kind.value}
    if t.class_reference is not None:
        d["class"] = t.class_reference
    if t.signature_reference is not None:
        d["signature"] = t.signature_reference
    return d


def type_from_dict(d: Any) -> Type | None:
    if d is None:
        return None
    if isinstance(d, str):
        return Type(_type_kind(d))
    if isinstance(d, dict):
        return Type(
            _type_kind(d.get("kind")),
            class_reference=d.get("class"),
            signature_reference=d.get("signature"),
        )
    raise GraphFormatError(f"Unsupported type value: {d!r}")


def _type_kind(name: Any) -> TypeKind:
    try:
        return TypeKind(name)
    except ValueError:
        raise GraphFormatError(f"Unknown type kind: {name!r}") from None


def flags_to_list(flags: CommonFlags) -> List[str]:
    return [name for name, flag in FLAG_NAMES.items() if flag in flags]


def flags_from_list(names: List[str] | None) -> CommonFlags:
    if names is not None and not isinstance(names, list):
        raise GraphFormatError(f"Flags must be a list, got {type(names).__name__}")
    flags = CommonFlags.NONE
    for name in names or []:
        try:
            flags |= FLAG_NAMES[name]
        except (KeyError, TypeError):
            raise GraphFormatError(f"Unknown flag: {name!r}") from None
    return flags


def signature_to_dict(s: Signature) -> Dict[str, Any]:
    return {
        "parameters": [
            {"name": s.parameter_name(i), "type": type_to_dict(t)}
            for i, t in enumerate(s.parameter_types)
        ],
        "return_type": type_to_dict(s.return_type),
    }


def signature_from_dict(d: Dict[str, Any] | None) -> Signature:
    d = d or {}
    if not isinstance(d, dict):
        raise GraphFormatError(f"Signature must be a mapping, got {type(d).__name__}")
    parameters = d.get("parameters", [])
    try:
        return Signature(
            parameter_types=[type_from_dict(p["type"]) for p in parameters],
            parameter_names=[p["name"] for p in parameters],
            return_type=type_from_dict(d.get("return_type", "void")),
        )
    except (KeyError, TypeError) as e:
        raise GraphFormatError(f"Malformed signature parameter: {e}") from e


# =============================================================================
# ELEMENTS
# =============================================================================

class _Encoder:
    """Element -> dict, one dict per handle."""

    def __init__(self):
        self.memo: Dict[int, Dict[str, Any]] = {}

    def members(self, members: Dict[str, Element] | None) -> Dict[str, Any] | None:
        if members is None:
            return None
        return {name: self.element(member) for name, member in members.items()}

    def element(self, e: Element) -> Dict[str, Any]:
        if e.handle in self.memo:
            return self.memo[e.handle]
        d: Dict[str, Any] = {"kind": e.kind.value, "name": e.simple_name}
        self.memo[e.handle] = d
        flags = flags_to_list(e.flags)
        if flags:
            d["flags"] = flags

        if isinstance(e, Global):
            d["type"] = type_to_dict(e.type)
            if e.constant_value is not None:
                d["constant"] = {"kind": e.constant_value.kind.value, "value": e.constant_value.value}
        elif isinstance(e, EnumValue):
            d["value"] = e.constant_value
        elif isinstance(e, Function):
            d["signature"] = signature_to_dict(e.signature)
        elif isinstance(e, (FunctionPrototype, ClassPrototype)):
            d["instances"] = [self.element(i) for i in e.instances]
        elif isinstance(e, Class):
            if e.base is not None:
                d["base"] = self.element(e.base)
            if e.static_members is not None:
                d["static_members"] = self.members(e.static_members)
            if e.instance_members is not None:
                d["instance_members"] = self.members(e.instance_members)

        if e.members is not None:
            d["members"] = self.members(e.members)
        return d


class _Decoder:
    """dict -> Element, one Element per decoded mapping."""

    def __init__(self):
        self.memo: Dict[int, Element] = {}

    def members(self, d: Dict[str, Any] | None) -> Dict[str, Element] | None:
        if d is None:
            return None
        if not isinstance(d, dict):
            raise GraphFormatError(f"Member map must be a mapping, got {type(d).__name__}")
        return {name: self.element(value, name) for name, value in d.items()}

    def element(self, d: Dict[str, Any], default_name: str | None = None) -> Element:
        if not isinstance(d, dict):
            raise GraphFormatError(f"Element must be a mapping, got {type(d).__name__}")
        if id(d) in self.memo:
            return self.memo[id(d)]

        try:
            kind = ElementKind(d.get("kind"))
        except ValueError:
            raise GraphFormatError(f"Unknown element kind: {d.get('kind')!r}") from None
        name = d.get("name", default_name)
        if not name:
            raise GraphFormatError(f"Element of kind {kind.value} has no name")
        flags = flags_from_list(d.get("flags"))

        e = self._construct(kind, name, flags, d)
        self.memo[id(d)] = e
        e.members = self.members(d.get("members"))
        self._link(e, d)
        return e

    @staticmethod
    def _construct(kind: ElementKind, name: str, flags: CommonFlags, d: Dict[str, Any]) -> Element:
        if kind == ElementKind.GLOBAL:
            constant = None
            if d.get("constant") is not None:
                c = d["constant"]
                if not isinstance(c, dict):
                    raise GraphFormatError(f"Constant of global '{name}' must be a mapping")
                try:
                    constant_kind = ConstantValueKind(c.get("kind", "integer"))
                except ValueError:
                    raise GraphFormatError(f"Unknown constant kind: {c.get('kind')!r}") from None
                convert = int if constant_kind == ConstantValueKind.INTEGER else float
                try:
                    value = convert(c["value"])
                except (KeyError, TypeError, ValueError) as e:
                    raise GraphFormatError(f"Malformed constant of global '{name}': {e}") from e
                constant = ConstantValue(constant_kind, value)
            if "type" not in d:
                raise GraphFormatError(f"Global '{name}' has no type")
            return Global(name, flags, type=type_from_dict(d["type"]), constant_value=constant)
        if kind == ElementKind.ENUM:
            return Enum(name, flags)
        if kind == ElementKind.ENUM_VALUE:
            try:
                value = int(d.get("value", 0))
            except (TypeError, ValueError) as e:
                raise GraphFormatError(f"Malformed value of enum value '{name}': {e}") from e
            return EnumValue(name, flags, constant_value=value)
        if kind == ElementKind.FUNCTION:
            return Function(name, flags, signature=signature_from_dict(d.get("signature")))
        if kind == ElementKind.FUNCTION_PROTOTYPE:
            return FunctionPrototype(name, flags)
        if kind == ElementKind.CLASS:
            return Class(name, flags)
        if kind == ElementKind.INTERFACE:
            return Interface(name, flags)
        if kind == ElementKind.CLASS_PROTOTYPE:
            return ClassPrototype(name, flags)
        if kind == ElementKind.NAMESPACE:
            return Namespace(name, flags)
        raise GraphFormatError(f"Unsupported element kind: {kind.value}")

    def _link(self, e: Element, d: Dict[str, Any]) -> None:
        """Resolve nested references once e itself is memoized."""
        if isinstance(e, FunctionPrototype):
            e.instances = [self._instance(i, e.simple_name, Function) for i in self._instance_list(d)]
        elif isinstance(e, ClassPrototype):
            e.instances = [self._instance(i, e.simple_name, Class) for i in self._instance_list(d)]
        elif isinstance(e, Class):
            if d.get("base") is not None:
                e.base = self._instance(d["base"], None, Class)
            e.static_members = self.members(d.get("static_members"))
            e.instance_members = self.members(d.get("instance_members"))

    @staticmethod
    def _instance_list(d: Dict[str, Any]) -> List[Any]:
        instances = d.get("instances") or []
        if not isinstance(instances, list):
            raise GraphFormatError(f"Instances must be a list, got {type(instances).__name__}")
        return instances

    def _instance(self, d: Dict[str, Any], default_name: str | None, expected: type) -> Any:
        e = self.element(d, default_name)
        if not isinstance(e, expected):
            raise GraphFormatError(
                f"Expected {expected.__name__.lower()} instance, got {e.kind.value} '{e.simple_name}'"
            )
        return e


# =============================================================================
# GRAPH
# =============================================================================

def graph_to_dict(g: ExportGraph) -> Dict[str, Any]:
    encoder = _Encoder()
    return {
        "is_64bit": g.is_64bit,
        "exports": {name: encoder.element(e) for name, e in g.exports.items()},
    }


def graph_from_dict(d: Dict[str, Any]) -> ExportGraph:
    if not isinstance(d, dict):
        raise GraphFormatError("Graph root must be a mapping")
    decoder = _Decoder()
    exports = d.get("exports") or {}
    if not isinstance(exports, dict):
        raise GraphFormatError(f"Exports must be a mapping, got {type(exports).__name__}")
    return ExportGraph(
        exports={name: decoder.element(value, name) for name, value in exports.items()},
        is_64bit=bool(d.get("is_64bit", False)),
    )


def graph_to_json(g: ExportGraph) -> str:
    return json.dumps(graph_to_dict(g))


def graph_from_json(s: str) -> ExportGraph:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise GraphFormatError(f"Invalid JSON: {e}") from e
    return graph_from_dict(d)


def graph_to_yaml(g: ExportGraph) -> str:
    return yaml.safe_dump(graph_to_dict(g), sort_keys=False)


def graph_from_yaml(s: str) -> ExportGraph:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise GraphFormatError(f"Invalid YAML: {e}") from e
    return graph_from_dict(d)
