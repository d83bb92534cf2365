from dataclasses import dataclass
from enum import Enum
from typing import Union

# pylint: disable=invalid-name

SMALL_ARRAY_CEILING = 10
"""
Largest fixed array length that resolves to a distinct fixed-size container.  Longer fixed arrays resolve to the
generic bounded container, and keep their length on the descriptor only.  Changing this value changes the
signatures of generated wrappers.
"""


class WireKind(Enum):
    """Elementary wire categories of the contract ABI"""

    uint = "uint"
    int = "int"
    bool = "bool"
    address = "address"
    fixed_bytes = "fixed_bytes"
    dynamic_bytes = "dynamic_bytes"
    string = "string"


@dataclass(frozen=True)
class Primitive:
    """
    Elementary ABI type.

    ``size`` holds the bit width for ``uint`` and ``int`` kinds, the byte length for ``fixed_bytes``, and is
    ``None`` for every other kind.
    """

    kind: WireKind
    size: int | None = None

    @property
    def abi_type(self) -> str:
        """Canonical ABI type string, ie ``uint256`` or ``bytes32``"""
        match self.kind:
            case WireKind.uint | WireKind.int:
                return f"{self.kind.value}{self.size}"
            case WireKind.fixed_bytes:
                return f"bytes{self.size}"
            case WireKind.dynamic_bytes:
                return "bytes"
            case _:
                return self.kind.value

    @property
    def is_reference_type(self) -> bool:
        """True for types that are hashed when emitted as an indexed event topic"""
        return self.kind in (WireKind.dynamic_bytes, WireKind.string)

    def __str__(self) -> str:
        return self.abi_type


@dataclass(frozen=True)
class FixedArray:
    """Fixed length array of ``element`` with ``length`` items"""

    element: "TypeDescriptor"
    length: int

    @property
    def is_generic(self) -> bool:
        """
        True if the length exceeds ``SMALL_ARRAY_CEILING``.  Generic fixed arrays do not encode their
        length in the caller facing type, and rely on the encoder to check it.
        """
        return self.length > SMALL_ARRAY_CEILING

    @property
    def container_name(self) -> str:
        """Name of the container shape, ie ``StaticArray3`` or ``StaticArray`` for generic arrays"""
        if self.is_generic:
            return "StaticArray"
        return f"StaticArray{self.length}"

    @property
    def abi_type(self) -> str:
        return f"{self.element.abi_type}[{self.length}]"

    @property
    def is_reference_type(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.abi_type


@dataclass(frozen=True)
class DynamicArray:
    """Variable length array of ``element``"""

    element: "TypeDescriptor"

    @property
    def container_name(self) -> str:
        return "DynamicArray"

    @property
    def abi_type(self) -> str:
        return f"{self.element.abi_type}[]"

    @property
    def is_reference_type(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.abi_type


TypeDescriptor = Union[Primitive, FixedArray, DynamicArray]


class NativeKind(Enum):
    """Caller facing scalar types exposed by generated wrappers"""

    text = "str"
    boolean = "bool"
    integer = "int"
    byte_sequence = "bytes"


@dataclass(frozen=True)
class NativeScalar:
    """Native type of an elementary ABI value"""

    kind: NativeKind

    @property
    def hint(self) -> str:
        """Python type hint used in generated source"""
        return self.kind.value


@dataclass(frozen=True)
class NativeSequence:
    """
    Native type of an ABI array.  ``length`` is set for small fixed arrays, which render as a fixed arity tuple.
    Dynamic and generic fixed arrays render as lists.
    """

    element: "NativeType"
    length: int | None = None

    @property
    def hint(self) -> str:
        if self.length is None:
            return f"list[{self.element.hint}]"
        return f"tuple[{', '.join([self.element.hint] * self.length)}]"


NativeType = Union[NativeScalar, NativeSequence]

TEXT = NativeScalar(NativeKind.text)
BOOLEAN = NativeScalar(NativeKind.boolean)
INTEGER = NativeScalar(NativeKind.integer)
BYTE_SEQUENCE = NativeScalar(NativeKind.byte_sequence)
