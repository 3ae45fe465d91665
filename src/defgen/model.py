"""
Core Export Graph Objects

Defines the data structures describing the public surface of a compiled module.

These are plain data classes representing:
    - Globals (module-level values and constants)
    - Enums and their values
    - Function prototypes and their compiled instances
    - Class prototypes and their compiled instances (classes, interfaces)
    - Namespaces
    - The export graph (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about WebIDL/TypeScript/target formats
        - Are built once upstream and never mutated while rendering
        - Represent structure, not behavior

The graph is assumed well-formed and already pruned of dead code.
Nothing here validates it.
"""

import enum
import itertools
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator, List, Optional, Union

from .types import Type, TypeKind


_handles = itertools.count(1)


def _next_handle() -> int:
    return next(_handles)


class ElementKind(enum.Enum):
    """Closed set of declaration kinds that can appear in an export graph."""

    GLOBAL = "global"
    ENUM = "enum"
    ENUM_VALUE = "enum_value"
    FUNCTION_PROTOTYPE = "function_prototype"
    FUNCTION = "function"
    CLASS_PROTOTYPE = "class_prototype"
    CLASS = "class"
    INTERFACE = "interface"
    NAMESPACE = "namespace"


class CommonFlags(enum.Flag):
    """
    Per-element flags, checked individually.

    COMPILED: reachable and actually used in the compiled module
    INLINED:  value is a compile-time constant
    ABSTRACT: class cannot be instantiated
    """

    NONE = 0
    COMPILED = enum.auto()
    INLINED = enum.auto()
    ABSTRACT = enum.auto()


class ConstantValueKind(enum.Enum):
    """Tag of a constant payload."""

    INTEGER = "integer"
    FLOAT = "float"


@dataclass(frozen=True)
class ConstantValue:
    """
    Compile-time constant of a global.

    Properties:
        kind: INTEGER or FLOAT
        value: The literal payload (int for INTEGER, float for FLOAT)
    """

    kind: ConstantValueKind
    value: Union[int, float]


@dataclass
class Element:
    """
    Base class for every declaration in the export graph.

    Properties:
        simple_name:
            Unqualified declaration name (e.g., "max", "Color")

        flags:
            CommonFlags bit set

        members:
            Optional ordered mapping name -> Element of exports attached
            to this element (a function or global acting as a namespace)

        handle:
            Stable integer identity assigned at construction.
            Renderers de-duplicate on it, never on object identity.
    """

    kind: ClassVar[ElementKind]

    simple_name: str
    flags: CommonFlags = CommonFlags.NONE
    members: Optional[Dict[str, "Element"]] = None
    handle: int = field(default_factory=_next_handle, init=False, repr=False, compare=False)

    def has(self, flag: CommonFlags) -> bool:
        """Check a single flag."""
        return flag in self.flags

    @property
    def is_compiled(self) -> bool:
        return self.has(CommonFlags.COMPILED)

    def member_items(self) -> Iterator:
        """Iterate (name, member) pairs in declaration order."""
        if self.members:
            yield from self.members.items()


@dataclass
class Global(Element):
    """
    A module-level value.

    Properties:
        type: Resolved value type
        constant_value: Payload when the global is INLINED
    """

    kind: ClassVar[ElementKind] = ElementKind.GLOBAL

    type: Optional[Type] = None
    constant_value: Optional[ConstantValue] = None


@dataclass
class EnumValue(Element):
    """A single enum member. constant_value is only meaningful when INLINED."""

    kind: ClassVar[ElementKind] = ElementKind.ENUM_VALUE

    constant_value: int = 0


@dataclass
class Enum(Element):
    """
    An enum declaration.

    members holds EnumValue entries and, possibly, further nested
    declarations merged into the enum's namespace.
    """

    kind: ClassVar[ElementKind] = ElementKind.ENUM


@dataclass
class Signature:
    """
    A concrete function signature.

    Properties:
        parameter_types: Ordered parameter types
        parameter_names: Ordered parameter names (may be shorter than the types)
        return_type: Return type (VOID for no result)
    """

    parameter_types: List[Type] = field(default_factory=list)
    parameter_names: List[str] = field(default_factory=list)
    return_type: Type = field(default_factory=lambda: Type(TypeKind.VOID))

    def parameter_name(self, index: int) -> str:
        """Name of the parameter at index, falling back to argN."""
        if index < len(self.parameter_names):
            return self.parameter_names[index]
        return f"arg{index}"


@dataclass
class Function(Element):
    """A compiled function instance (one per generic instantiation)."""

    kind: ClassVar[ElementKind] = ElementKind.FUNCTION

    signature: Signature = field(default_factory=Signature)


@dataclass
class FunctionPrototype(Element):
    """
    A function declaration as written in source.

    A generic prototype has no runtime shape of its own. Only its
    instances are ever rendered.
    """

    kind: ClassVar[ElementKind] = ElementKind.FUNCTION_PROTOTYPE

    instances: List[Function] = field(default_factory=list)


@dataclass
class Class(Element):
    """
    A compiled class instance.

    Properties:
        base: Base class, rendered by simple name only
        static_members: Members declared static on the prototype
        instance_members: Members of each instance

    Member maps are carried for completeness. Renderers emit empty bodies.
    """

    kind: ClassVar[ElementKind] = ElementKind.CLASS

    base: Optional["Class"] = None
    static_members: Optional[Dict[str, Element]] = None
    instance_members: Optional[Dict[str, Element]] = None


@dataclass
class Interface(Class):
    kind: ClassVar[ElementKind] = ElementKind.INTERFACE


@dataclass
class ClassPrototype(Element):
    """A class declaration as written in source; see FunctionPrototype."""

    kind: ClassVar[ElementKind] = ElementKind.CLASS_PROTOTYPE

    instances: List[Class] = field(default_factory=list)


@dataclass
class Namespace(Element):
    kind: ClassVar[ElementKind] = ElementKind.NAMESPACE


@dataclass
class ExportGraph:
    """
    Root container: the public surface of one compiled module.

    Properties:
        exports:
            Ordered mapping export name -> Element

        is_64bit:
            Module-wide addressing-width flag. Selects the representation
            of pointer-sized types (ISIZE/USIZE).

    INVARIANTS:
        - Insertion order of every mapping is declaration order
        - Containment via members is acyclic
        - The graph is not mutated while a builder renders it
    """

    exports: Dict[str, Element] = field(default_factory=dict)
    is_64bit: bool = False

    def get_export(self, name: str) -> Optional[Element]:
        """
        Retrieve a root export by name.

        Returns:
            Element or None if not exported
        """
        return self.exports.get(name)

    def add(self, element: Element, name: Optional[str] = None) -> Element:
        """Export an element under name (defaults to its simple name)."""
        self.exports[name or element.simple_name] = element
        return element
