import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from nethermind.abigen.exceptions import AbiParseError

# pylint: disable=invalid-name

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("types")


class EntryKind(Enum):
    """Kind of ABI element, taken from the ``type`` key of the ABI JSON"""

    function = "function"
    event = "event"
    constructor = "constructor"
    fallback = "fallback"
    receive = "receive"
    error = "error"


class StateMutability(Enum):
    """Mutability of an ABI function.  Drives the call shape of the generated wrapper"""

    pure = "pure"
    view = "view"
    nonpayable = "nonpayable"
    payable = "payable"

    @property
    def is_read_only(self) -> bool:
        """True for functions that can be executed with eth_call"""
        return self in (StateMutability.pure, StateMutability.view)


@dataclass(frozen=True)
class AbiParameter:
    """Input or output parameter of a function, or field of an event"""

    name: str
    declared_type: str
    indexed: bool = False


@dataclass(frozen=True)
class AbiEntry:
    """Single element of a contract ABI"""

    kind: EntryKind
    name: str
    inputs: tuple[AbiParameter, ...] = field(default_factory=tuple)
    outputs: tuple[AbiParameter, ...] = field(default_factory=tuple)
    state_mutability: StateMutability = StateMutability.nonpayable
    anonymous: bool = False

    @property
    def signature(self) -> str:
        """
        Returns the canonical signature of the entry.

        >>> AbiEntry(EntryKind.function, "transfer", (AbiParameter("to", "address"),)).signature
        'transfer(address)'
        """
        return f"{self.name}({','.join(param.declared_type for param in self.inputs)})"


def resolve_state_mutability(abi_element: dict[str, Any]) -> StateMutability:
    """
    Resolves the mutability of an ABI element.  Solidity compilers before 0.4.16 do not emit
    ``stateMutability``, and mark functions with the ``constant`` and ``payable`` flags instead.
    """
    if "stateMutability" in abi_element:
        try:
            return StateMutability(abi_element["stateMutability"])
        except ValueError as e:
            raise AbiParseError(
                f"Unknown stateMutability {abi_element['stateMutability']!r} for {abi_element.get('name')}"
            ) from e

    if abi_element.get("constant", False):
        return StateMutability.view
    if abi_element.get("payable", False):
        return StateMutability.payable
    return StateMutability.nonpayable


def _parse_parameters(params: Sequence[dict[str, Any]] | None, entry_name: str) -> tuple[AbiParameter, ...]:
    parsed = []
    for param in params or []:
        if "type" not in param:
            raise AbiParseError(f"Parameter {param.get('name')!r} of {entry_name} is missing a type")

        declared_type = param["type"]
        if declared_type.startswith("tuple"):
            # Structs are carried as their collapsed component list, which the type resolver rejects
            components = ",".join(c["type"] for c in param.get("components", []))
            declared_type = f"({components}){declared_type[5:]}"

        parsed.append(
            AbiParameter(
                name=param.get("name") or "",
                declared_type=declared_type,
                indexed=bool(param.get("indexed", False)),
            )
        )
    return tuple(parsed)


def parse_abi(contract_abi: Sequence[dict[str, Any]]) -> list[AbiEntry]:
    """
    Converts a JSON ABI into a list of AbiEntry.  Elements without a ``type`` key are functions, as defined by
    the Solidity ABI specification.

    :param contract_abi: List of ABI elements, as loaded from the compiler output
    :return: list of AbiEntry in ABI order
    """
    entries = []
    for abi_element in contract_abi:
        if not isinstance(abi_element, dict):
            raise AbiParseError(f"ABI elements must be JSON objects, got {type(abi_element).__name__}")

        try:
            kind = EntryKind(abi_element.get("type", "function"))
        except ValueError as e:
            raise AbiParseError(f"Unknown ABI element type {abi_element['type']!r}") from e

        name = abi_element.get("name", "")
        entries.append(
            AbiEntry(
                kind=kind,
                name=name,
                inputs=_parse_parameters(abi_element.get("inputs"), name),
                outputs=_parse_parameters(abi_element.get("outputs"), name),
                state_mutability=resolve_state_mutability(abi_element),
                anonymous=bool(abi_element.get("anonymous", False)),
            )
        )

    logger.debug(f"Parsed {len(entries)} ABI entries")
    return entries
