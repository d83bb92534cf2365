import logging
from dataclasses import dataclass

from nethermind.abigen.codegen.identifiers import (
    MODULE_NAMES,
    avoid_reserved,
    event_constant,
    method_name,
    unique_names,
)
from nethermind.abigen.codegen.native_types import project, project_for_event_field
from nethermind.abigen.codegen.source import ClassSpec, FieldSpec, MethodSpec, ParameterSpec, indent_lines
from nethermind.abigen.codegen.type_resolver import resolve
from nethermind.abigen.types.abi import AbiEntry, EntryKind
from nethermind.abigen.types.descriptors import NativeType, TypeDescriptor
from nethermind.abigen.utils import pascal_case

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("codegen")


@dataclass(frozen=True)
class EventField:
    """Single event field.  ``position`` is the index within the indexed or non-indexed sub-sequence"""

    name: str
    type_descriptor: TypeDescriptor
    native_type: NativeType
    indexed: bool
    position: int

    @property
    def value_expression(self) -> str:
        source = "indexed_values" if self.indexed else "non_indexed_values"
        return f"event_values.{source}[{self.position}]"


@dataclass(frozen=True)
class EventWrapperSpec:
    """
    Everything needed to render the wrappers of a single ABI event: the Event constant, the receipt extraction
    method, the live stream methods and the response record.
    """

    name: str
    constant_name: str
    response_name: str
    method_stem: str
    fields: tuple[EventField, ...]
    """ Fields in declaration order """

    @property
    def indexed_fields(self) -> list[EventField]:
        return [f for f in self.fields if f.indexed]

    @property
    def non_indexed_fields(self) -> list[EventField]:
        return [f for f in self.fields if not f.indexed]

    @property
    def response_fields(self) -> list[EventField]:
        """Fields in population order: indexed fields first, then non-indexed fields"""
        return self.indexed_fields + self.non_indexed_fields

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(f.type_descriptor.abi_type for f in self.fields)})"

    def event_constant(self) -> FieldSpec:
        references = ", ".join(
            f'TypeReference("{f.type_descriptor.abi_type}", indexed=True)'
            if f.indexed
            else f'TypeReference("{f.type_descriptor.abi_type}")'
            for f in self.fields
        )
        return FieldSpec(self.constant_name, value=f'Event("{self.name}", [{references}])')

    def _response_construction(self, log_expression: str) -> list[str]:
        lines = [f"{self.response_name}(", f"    log={log_expression},"]
        lines.extend(f"    {f.name}={f.value_expression}," for f in self.response_fields)
        lines.append(")")
        return lines

    def extraction_method(self) -> MethodSpec:
        construction = self._response_construction("event_values.log")
        construction[0] = "typed_response = " + construction[0]
        return MethodSpec(
            name=f"get_{self.method_stem}_events",
            parameters=[ParameterSpec("transaction_receipt", "TxReceipt")],
            return_hint=f"list[{self.response_name}]",
            body=[
                f"value_list = self.extract_event_parameters_with_log(self.{self.constant_name}, transaction_receipt)",
                "responses = []",
                "for event_values in value_list:",
                *indent_lines(construction),
                "    responses.append(typed_response)",
                "return responses",
            ],
        )

    def stream_method(self) -> MethodSpec:
        construction = self._response_construction("log")
        construction[0] = "yield " + construction[0]
        return MethodSpec(
            name=f"{self.method_stem}_event_stream",
            parameters=[ParameterSpec("filter_params", "FilterParams")],
            return_hint=f"Iterator[{self.response_name}]",
            body=[
                "with closing(self.eth_log_stream(filter_params)) as logs:",
                "    for log in logs:",
                f"        event_values = self.extract_event_values(self.{self.constant_name}, log)",
                "        if event_values is None:",
                "            continue",
                *indent_lines(construction, 2),
            ],
        )

    def block_range_stream_method(self) -> MethodSpec:
        return MethodSpec(
            name=f"{self.method_stem}_event_stream_for_blocks",
            parameters=[ParameterSpec("from_block", "BlockIdentifier"), ParameterSpec("to_block", "BlockIdentifier")],
            return_hint=f"Iterator[{self.response_name}]",
            body=[
                f"filter_params = self.build_event_filter(self.{self.constant_name}, from_block, to_block)",
                f"return self.{self.method_stem}_event_stream(filter_params)",
            ],
        )

    def methods(self) -> list[MethodSpec]:
        return [self.extraction_method(), self.stream_method(), self.block_range_stream_method()]

    def response_class(self) -> ClassSpec:
        return ClassSpec(
            name=self.response_name,
            bases=["BaseEventResponse"],
            decorators=["dataclass"],
            docstring=f"Decoded {self.signature} log",
            fields=[FieldSpec(f.name, hint=f.native_type.hint) for f in self.response_fields],
        )


class EventSynthesizer:
    """Builds wrapper specs for ABI events"""

    def synthesize(self, entry: AbiEntry) -> EventWrapperSpec:
        """
        Builds the wrapper spec of a single ABI event.  Indexed fields are typed with
        ``project_for_event_field``, since reference types are only available as topic hashes.

        :param entry: ABI entry of kind event
        :return: EventWrapperSpec
        :raises InvalidTypeGrammar: if any field type cannot be resolved
        """
        if entry.kind != EntryKind.event:
            raise ValueError(f"Cannot build an event wrapper for {entry.kind.value} {entry.name}")

        names = unique_names([param.name for param in entry.inputs], reserved=("log",))

        fields = []
        indexed_count, non_indexed_count = 0, 0
        for name, param in zip(names, entry.inputs, strict=True):
            type_descriptor = resolve(param.declared_type)
            if param.indexed:
                native_type, position = project_for_event_field(type_descriptor), indexed_count
                indexed_count += 1
            else:
                native_type, position = project(type_descriptor), non_indexed_count
                non_indexed_count += 1

            fields.append(
                EventField(
                    name=name,
                    type_descriptor=type_descriptor,
                    native_type=native_type,
                    indexed=param.indexed,
                    position=position,
                )
            )

        logger.debug(f"Event {entry.signature} -> {indexed_count} indexed, {non_indexed_count} non-indexed fields")
        return EventWrapperSpec(
            name=entry.name,
            constant_name=event_constant(entry.name),
            response_name=avoid_reserved(f"{pascal_case(entry.name)}EventResponse", MODULE_NAMES),
            method_stem=method_name(entry.name, reserved=()),
            fields=tuple(fields),
        )
