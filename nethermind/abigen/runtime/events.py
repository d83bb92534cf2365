import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Sequence

from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_utils import to_bytes, to_checksum_address
from eth_utils.abi import event_signature_to_log_topic
from web3.types import LogReceipt

from nethermind.abigen.codegen.type_resolver import resolve
from nethermind.abigen.exceptions import DecodingError
from nethermind.abigen.types.descriptors import (
    DynamicArray,
    FixedArray,
    Primitive,
    TypeDescriptor,
    WireKind,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("runtime")


@dataclass(frozen=True)
class TypeReference:
    """ABI type of a single event field, along with whether the field is stored in the log topics"""

    abi_type: str
    indexed: bool = False

    @cached_property
    def type_descriptor(self) -> TypeDescriptor:
        return resolve(self.abi_type)


class Event:
    """
    Describes a contract event.  Parameters are kept in declaration order, which is the order in which
    indexed values appear in the log topics and non-indexed values appear in the log data.
    """

    name: str
    parameters: tuple[TypeReference, ...]

    def __init__(self, name: str, parameters: Sequence[TypeReference]):
        self.name = name
        self.parameters = tuple(parameters)

    @property
    def indexed_parameters(self) -> list[TypeReference]:
        return [param for param in self.parameters if param.indexed]

    @property
    def non_indexed_parameters(self) -> list[TypeReference]:
        return [param for param in self.parameters if not param.indexed]

    @property
    def signature(self) -> str:
        """Event signature, ie ``Transfer(address,address,uint256)``"""
        return f"{self.name}({','.join(param.abi_type for param in self.parameters)})"

    @cached_property
    def topic(self) -> bytes:
        """Keccak hash of the signature, emitted as the first topic of every non-anonymous log"""
        return event_signature_to_log_topic(self.signature)

    def __repr__(self) -> str:
        return f"Event({self.signature})"


@dataclass
class EventValuesWithLog:
    """Decoded values of a single log, split into topic values and data values"""

    indexed_values: list[Any]
    non_indexed_values: list[Any]
    log: LogReceipt


@dataclass
class BaseEventResponse:
    """Base class of generated event response records"""

    log: LogReceipt


def format_value(type_descriptor: TypeDescriptor, value: Any) -> Any:
    """
    Converts a value returned by eth_abi into the native type exposed by generated wrappers.  Addresses are
    checksummed, small fixed arrays are returned as tuples, and all other arrays as lists.
    """
    match type_descriptor:
        case Primitive(kind=WireKind.address):
            return to_checksum_address(value)
        case FixedArray(element=element) if not type_descriptor.is_generic:
            return tuple(format_value(element, item) for item in value)
        case FixedArray(element=element) | DynamicArray(element=element):
            return [format_value(element, item) for item in value]
        case _:
            return value


def decode_values(types: Sequence[str], data: bytes) -> list[Any]:
    """
    Decodes ABI encoded data, and formats each value

    :raises DecodingError: if data cannot be decoded with the given types
    """
    try:
        decoded = eth_abi_decode(list(types), data)
    except (AbiDecodingError, OverflowError) as e:
        raise DecodingError(f"Could not decode 0x{data.hex()} as {list(types)}: {e}") from e

    return [format_value(resolve(typ), value) for typ, value in zip(types, decoded, strict=True)]


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return to_bytes(hexstr=value)
    return bytes(value)


def decode_log(event: Event, log: LogReceipt) -> EventValuesWithLog | None:
    """
    Decodes a single log with the types of ``event``.

    :param event: Event descriptor
    :param log: Log entry as returned by the node
    :return: EventValuesWithLog, or None if the log was not emitted by this event
    """
    topics = [_as_bytes(topic) for topic in log["topics"]]
    indexed = event.indexed_parameters

    if not topics or topics[0] != event.topic:
        return None

    if len(topics) != len(indexed) + 1:
        # Same signature with a different set of indexed fields, ie ERC20 & ERC721 Transfer
        logger.debug(f"Log with {len(topics) - 1} indexed values does not match {event} with {len(indexed)}")
        return None

    indexed_values = []
    for param, topic in zip(indexed, topics[1:], strict=True):
        if param.type_descriptor.is_reference_type:
            indexed_values.append(topic)
        else:
            indexed_values.extend(decode_values([param.abi_type], topic))

    non_indexed_values = decode_values(
        [param.abi_type for param in event.non_indexed_parameters],
        _as_bytes(log["data"]),
    )

    return EventValuesWithLog(indexed_values=indexed_values, non_indexed_values=non_indexed_values, log=log)
