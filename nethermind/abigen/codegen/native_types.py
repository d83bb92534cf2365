from typing import Any

from nethermind.abigen.exceptions import UnsupportedWireType
from nethermind.abigen.types.descriptors import (
    BOOLEAN,
    BYTE_SEQUENCE,
    INTEGER,
    TEXT,
    DynamicArray,
    FixedArray,
    NativeSequence,
    NativeType,
    Primitive,
    WireKind,
)

NATIVE_TYPES: dict[WireKind, NativeType] = {
    WireKind.address: TEXT,
    WireKind.uint: INTEGER,
    WireKind.int: INTEGER,
    WireKind.bool: BOOLEAN,
    WireKind.string: TEXT,
    WireKind.fixed_bytes: BYTE_SEQUENCE,
    WireKind.dynamic_bytes: BYTE_SEQUENCE,
}
""" Mapping from elementary wire kinds to the Python types handed to wrapper callers """


def project(type_descriptor: Any) -> NativeType:
    """
    Returns the caller facing type of a resolved ABI type.

    :param type_descriptor: Primitive, FixedArray or DynamicArray instance
    :return: NativeType
    :raises UnsupportedWireType: if ``type_descriptor`` is not a resolved descriptor instance
    """
    match type_descriptor:
        case Primitive(kind=kind):
            native = NATIVE_TYPES.get(kind)
            if native is None:
                raise UnsupportedWireType(f"No native type is defined for wire kind {kind}")
            return native
        case FixedArray(element=element, length=length) if not type_descriptor.is_generic:
            return NativeSequence(project(element), length)
        case FixedArray(element=element) | DynamicArray(element=element):
            return NativeSequence(project(element))
        case _:
            raise UnsupportedWireType(f"Unable to convert {type_descriptor!r} to a native type")


def project_for_event_field(type_descriptor: Any) -> NativeType:
    """
    Returns the native type of an indexed event field.  Reference types (strings, dynamic bytes and arrays) are
    stored in log topics as the keccak hash of their encoding, so they are exposed as raw 32 byte digests.
    """
    match type_descriptor:
        case Primitive() | FixedArray() | DynamicArray() if type_descriptor.is_reference_type:
            return BYTE_SEQUENCE
        case _:
            return project(type_descriptor)
