import logging
import re

from nethermind.abigen.exceptions import InvalidTypeGrammar
from nethermind.abigen.types.descriptors import (
    DynamicArray,
    FixedArray,
    Primitive,
    TypeDescriptor,
    WireKind,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("codegen")

STORAGE_LOCATIONS = ("storage", "memory", "calldata")

_ARRAY_SUFFIX = re.compile(r"^(?P<rest>.+)\[(?P<length>[0-9]*)\]$")
_SIZED_BASE = re.compile(r"^(?P<base>uint|int|bytes)(?P<size>[0-9]+)$")


def strip_storage_location(declared: str) -> str:
    """
    Removes a trailing data location from a declared type.  Locations carry no type information.

    >>> strip_storage_location("uint256[] memory")
    'uint256[]'
    """
    parts = declared.strip().split()
    if len(parts) == 2 and parts[1] in STORAGE_LOCATIONS:
        return parts[0]
    if len(parts) != 1:
        raise InvalidTypeGrammar(f"Cannot parse type {declared!r}")
    return parts[0]


def resolve_primitive(base: str) -> Primitive:
    """
    Resolves a base type token without array suffixes.

    :param base: base token, ie ``uint256``, ``address`` or ``bytes32``
    :return: Primitive descriptor
    """
    match base:
        case "uint":
            return Primitive(WireKind.uint, 256)
        case "int":
            return Primitive(WireKind.int, 256)
        case "bool":
            return Primitive(WireKind.bool)
        case "address":
            return Primitive(WireKind.address)
        case "string":
            return Primitive(WireKind.string)
        case "bytes":
            return Primitive(WireKind.dynamic_bytes)

    sized = _SIZED_BASE.match(base)
    if sized is None or sized.group("size").startswith("0"):
        raise InvalidTypeGrammar(f"Unsupported base type {base!r}")

    size = int(sized.group("size"))
    if sized.group("base") == "bytes":
        if not 1 <= size <= 32:
            raise InvalidTypeGrammar(f"bytes<M> requires 0 < M <= 32, got {base!r}")
        return Primitive(WireKind.fixed_bytes, size)

    if size % 8 != 0 or not 8 <= size <= 256:
        raise InvalidTypeGrammar(f"Integer width must be a multiple of 8 between 8 and 256, got {base!r}")
    return Primitive(WireKind(sized.group("base")), size)


def _resolve_stripped(declared: str) -> TypeDescriptor:
    array_match = _ARRAY_SUFFIX.match(declared)
    if array_match is None:
        if "[" in declared or "]" in declared:
            raise InvalidTypeGrammar(f"Malformed array suffix in {declared!r}")
        return resolve_primitive(declared)

    element = _resolve_stripped(array_match.group("rest"))
    length = array_match.group("length")
    if length == "":
        return DynamicArray(element)

    if int(length) == 0 or length.startswith("0"):
        raise InvalidTypeGrammar(f"Fixed array length must be a positive decimal, got {declared!r}")
    return FixedArray(element, int(length))


def resolve(declared: str) -> TypeDescriptor:
    """
    Resolves a declared ABI type into a type descriptor.  Array suffixes are stripped from the right, so
    ``uint256[10][3]`` resolves to an array of 3 arrays of 10 uint256.

    >>> resolve("uint256[2][]")
    DynamicArray(element=FixedArray(element=Primitive(kind=<WireKind.uint: 'uint'>, size=256), length=2))

    :param declared: type string from the ABI, optionally followed by a storage location
    :return: TypeDescriptor
    :raises InvalidTypeGrammar: if the string does not match the supported grammar
    """
    if not isinstance(declared, str) or not declared.strip():
        raise InvalidTypeGrammar(f"Cannot parse type {declared!r}")

    return _resolve_stripped(strip_storage_location(declared))
