from .abi import AbiEntry, AbiParameter, EntryKind, StateMutability, parse_abi
from .descriptors import (
    SMALL_ARRAY_CEILING,
    DynamicArray,
    FixedArray,
    NativeScalar,
    NativeSequence,
    NativeType,
    Primitive,
    TypeDescriptor,
    WireKind,
)
