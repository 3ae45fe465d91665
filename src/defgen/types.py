"""
Type System for Export Definitions

Every value that crosses the module boundary (globals, parameters, return
values) carries a Type drawn from a fixed, closed set of primitive kinds.

Pointer-sized kinds (ISIZE, USIZE) have no fixed width of their own.
They resolve to their 32-bit or 64-bit counterparts through the
module-wide addressing-width flag.

ARCHITECTURAL RULE:
    Types know nothing about WebIDL or TypeScript spelling.
    Spelling tables live in the backends.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TypeKind(Enum):
    """
    Primitive type kinds known to the compiled module.

    V128 exists in the type system but has no spelling in either
    definitions format.
    """

    # Signed integers
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    ISIZE = "isize"

    # Unsigned integers
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"

    # Other
    BOOL = "bool"
    F32 = "f32"
    F64 = "f64"
    V128 = "v128"
    VOID = "void"


@dataclass(frozen=True)
class Type:
    """
    A resolved type.

    Properties:
        kind:
            Primitive TypeKind

        class_reference:
            Name of the class when this is a class-typed (pointer) value

        signature_reference:
            Textual signature when this is a function-typed (table index) value

    IMPORTANT:
        Class- and function-typed values share their kind with plain
        integers (USIZE and U32 respectively). The references are what
        tell them apart.
    """

    kind: TypeKind
    class_reference: Optional[str] = None
    signature_reference: Optional[str] = None

    @property
    def is_reference(self) -> bool:
        """True for class- or function-typed values."""
        return self.class_reference is not None or self.signature_reference is not None

    def resolve(self, is_64bit: bool) -> TypeKind:
        """
        Resolve pointer-sized kinds to a fixed-width kind.

        Args:
            is_64bit: Module-wide addressing-width flag

        Returns:
            The concrete TypeKind (ISIZE/USIZE mapped, everything else unchanged)
        """
        if self.kind == TypeKind.ISIZE:
            return TypeKind.I64 if is_64bit else TypeKind.I32
        if self.kind == TypeKind.USIZE:
            return TypeKind.U64 if is_64bit else TypeKind.U32
        return self.kind

    def __str__(self) -> str:
        if self.class_reference is not None:
            return self.class_reference
        if self.signature_reference is not None:
            return self.signature_reference
        return self.kind.value


def type_of(kind: TypeKind) -> Type:
    """Shorthand for a plain (non-reference) type of the given kind."""
    return Type(kind)
