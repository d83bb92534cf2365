import logging
from typing import Any, Sequence

from nethermind.abigen.codegen.event_wrapper import EventSynthesizer, EventWrapperSpec
from nethermind.abigen.codegen.function_wrapper import FunctionSynthesizer, FunctionWrapperSpec
from nethermind.abigen.codegen.identifiers import (
    CONTRACT_MEMBER_NAMES,
    MODULE_NAMES,
    avoid_reserved,
    func_name_constant,
    sanitize,
)
from nethermind.abigen.codegen.reporter import GenerationReporter, LoggingReporter
from nethermind.abigen.codegen.source import ClassSpec, FieldSpec
from nethermind.abigen.types.abi import AbiEntry, EntryKind, parse_abi

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("codegen")

MODULE_HEADER = '''"""
{contract_name} contract wrapper.

Generated by nethermind-abigen.  Do not edit by hand.
"""

from collections.abc import Iterator
from contextlib import closing
from dataclasses import dataclass

from web3.types import BlockIdentifier, FilterParams, TxReceipt

from nethermind.abigen.exceptions import NoReturnValue
from nethermind.abigen.runtime import BaseEventResponse, Contract, Event, Function, TypeReference
'''


def is_translatable(entry: AbiEntry) -> bool:
    """
    Returns True for entries the generator translates.  Constructors, fallback & receive functions, errors,
    anonymous events, and entries with tuple parameters are skipped.
    """
    if entry.kind not in (EntryKind.function, EntryKind.event):
        return False
    if entry.kind == EntryKind.event and entry.anonymous:
        return False
    return not any(param.declared_type.startswith("(") for param in (*entry.inputs, *entry.outputs))


class ContractWrapperGenerator:
    """
    Generates the Python wrapper module of a single contract ABI.  Each ABI entry is translated
    independently; the generator only tracks the name constants and method names already emitted.
    """

    contract_name: str
    reporter: GenerationReporter

    def __init__(self, contract_name: str, reporter: GenerationReporter | None = None):
        self.contract_name = avoid_reserved(sanitize(contract_name, 0), MODULE_NAMES)
        self.reporter = reporter or LoggingReporter()
        self.function_synthesizer = FunctionSynthesizer(self.reporter)
        self.event_synthesizer = EventSynthesizer()

    def build_func_name_constants(self, entries: Sequence[AbiEntry]) -> list[FieldSpec]:
        """Returns one name constant per distinct function name, in ABI order"""
        constants: dict[str, FieldSpec] = {}
        for entry in entries:
            if entry.kind != EntryKind.function or entry.name in constants:
                continue
            constants[entry.name] = FieldSpec(func_name_constant(entry.name), value=f'"{entry.name}"')
        return list(constants.values())

    def synthesize(self, entries: Sequence[AbiEntry]) -> tuple[list[FunctionWrapperSpec], list[EventWrapperSpec]]:
        """
        Translates every supported entry into a wrapper spec

        :raises InvalidTypeGrammar: if an entry declares a type outside the supported grammar
        """
        translated = []
        for entry in entries:
            if is_translatable(entry):
                translated.append(entry)
                continue

            match entry.kind:
                case EntryKind.event if entry.anonymous:
                    logger.warning(f"Skipping anonymous event {entry.signature}: anonymous logs cannot be matched")
                case EntryKind.function | EntryKind.event:
                    logger.warning(
                        f"Skipping {entry.kind.value} {entry.signature}: tuple parameters are not supported"
                    )
                case _:
                    logger.debug(f"Skipping {entry.kind.value} {entry.signature}")

        events = [self.event_synthesizer.synthesize(e) for e in translated if e.kind == EntryKind.event]

        # Function wrappers must not shadow the Contract base class or the generated event methods
        reserved_methods = set(CONTRACT_MEMBER_NAMES)
        reserved_methods.update(method.name for event in events for method in event.methods())

        functions: list[FunctionWrapperSpec] = []
        for entry in translated:
            if entry.kind != EntryKind.function:
                continue
            function = self.function_synthesizer.synthesize(entry, reserved_methods)
            overloaded = next((f for f in functions if f.method_name == function.method_name), None)
            if overloaded is not None:
                self.reporter.report(
                    f"Function {function.selector_signature} overloads {overloaded.selector_signature}. Only the "
                    f"last definition is reachable as {function.method_name}"
                )
            functions.append(function)

        return functions, events

    def build_contract_class(
        self,
        entries: Sequence[AbiEntry],
        functions: list[FunctionWrapperSpec],
        events: list[EventWrapperSpec],
    ) -> ClassSpec:
        translated = [entry for entry in entries if is_translatable(entry)]
        contract_class = ClassSpec(
            name=self.contract_name,
            bases=["Contract"],
            docstring=f"Wrapper for the {self.contract_name} contract",
            fields=self.build_func_name_constants(translated) + [event.event_constant() for event in events],
        )
        contract_class.methods.extend(function.method_spec() for function in functions)
        for event in events:
            contract_class.methods.extend(event.methods())
        return contract_class

    def generate(self, entries: Sequence[AbiEntry]) -> str:
        """
        Generates the source of the wrapper module

        :param entries: parsed ABI entries
        :return: Python source text
        """
        functions, events = self.synthesize(entries)
        logger.info(
            f"Generating {self.contract_name} with {len(functions)} function wrappers and {len(events)} event wrappers"
        )

        sections = [MODULE_HEADER.format(contract_name=self.contract_name)]
        sections.extend(event.response_class().render() for event in events)
        sections.append(self.build_contract_class(entries, functions, events).render())
        return "\n\n".join(sections)

    def generate_from_json(self, contract_abi: Sequence[dict[str, Any]]) -> str:
        """Parses a JSON ABI and generates the source of the wrapper module"""
        return self.generate(parse_abi(contract_abi))
