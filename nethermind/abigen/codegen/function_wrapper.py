import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from nethermind.abigen.codegen.identifiers import (
    CONTRACT_MEMBER_NAMES,
    MODULE_NAMES,
    func_name_constant,
    method_name,
    unique_names,
)
from nethermind.abigen.codegen.native_types import project
from nethermind.abigen.codegen.reporter import GenerationReporter
from nethermind.abigen.codegen.source import MethodSpec, ParameterSpec, quoted_list
from nethermind.abigen.codegen.type_resolver import resolve
from nethermind.abigen.types.abi import AbiEntry, AbiParameter, EntryKind, StateMutability
from nethermind.abigen.types.descriptors import DynamicArray, FixedArray, NativeType, TypeDescriptor

# pylint: disable=invalid-name

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("codegen")

WEI_VALUE_PARAM = "wei_value"
TRANSACTION_RECEIPT_HINT = "TxReceipt"
NO_RETURN_VALUE_MESSAGE = "cannot call constant function with void return type"


class CallShape(Enum):
    """How a generated wrapper invokes its function, and what it returns"""

    transaction = "transaction"
    transaction_payable = "transaction_payable"
    constant_void = "constant_void"
    constant_single = "constant_single"
    constant_raw_collection = "constant_raw_collection"
    constant_tuple = "constant_tuple"

    @property
    def is_transaction(self) -> bool:
        return self in (CallShape.transaction, CallShape.transaction_payable)


@dataclass(frozen=True)
class WrapperParameter:
    """Function input or output, along with its resolved wire type and caller facing type"""

    name: str
    abi_name: str
    type_descriptor: TypeDescriptor
    native_type: NativeType

    @property
    def abi_type(self) -> str:
        return self.type_descriptor.abi_type


def build_parameters(params: tuple[AbiParameter, ...], reserved: tuple[str, ...] = ()) -> tuple[WrapperParameter, ...]:
    """Resolves, projects and names a list of ABI parameters"""
    names = unique_names([param.name for param in params], reserved=reserved)
    wrapped = []
    for name, param in zip(names, params, strict=True):
        type_descriptor = resolve(param.declared_type)
        wrapped.append(
            WrapperParameter(
                name=name,
                abi_name=param.name,
                type_descriptor=type_descriptor,
                native_type=project(type_descriptor),
            )
        )
    return tuple(wrapped)


def select_call_shape(state_mutability: StateMutability, outputs: tuple[WrapperParameter, ...]) -> CallShape:
    """
    Selects the call shape of a function from its mutability and outputs.  Functions that are not view or pure
    are always sent as transactions, and their outputs are ignored.
    """
    if state_mutability == StateMutability.payable:
        return CallShape.transaction_payable
    if not state_mutability.is_read_only:
        return CallShape.transaction

    match len(outputs):
        case 0:
            return CallShape.constant_void
        case 1 if isinstance(outputs[0].type_descriptor, (FixedArray, DynamicArray)):
            return CallShape.constant_raw_collection
        case 1:
            return CallShape.constant_single
        case _:
            return CallShape.constant_tuple


@dataclass(frozen=True)
class FunctionWrapperSpec:
    """Everything needed to render the wrapper method of a single ABI function"""

    name: str
    method_name: str
    constant_name: str
    inputs: tuple[WrapperParameter, ...]
    outputs: tuple[WrapperParameter, ...]
    call_shape: CallShape

    @property
    def arity(self) -> int:
        return len(self.outputs)

    @property
    def selector_signature(self) -> str:
        return f"{self.name}({','.join(param.abi_type for param in self.inputs)})"

    @property
    def return_hint(self) -> str:
        match self.call_shape:
            case CallShape.transaction | CallShape.transaction_payable:
                return TRANSACTION_RECEIPT_HINT
            case CallShape.constant_void:
                return "None"
            case CallShape.constant_single:
                return self.outputs[0].native_type.hint
            case CallShape.constant_raw_collection:
                return "list"
            case CallShape.constant_tuple:
                return f"tuple[{', '.join(param.native_type.hint for param in self.outputs)}]"
        raise ValueError(f"Unknown call shape {self.call_shape}")

    @property
    def parameters(self) -> list[ParameterSpec]:
        params = [ParameterSpec(param.name, param.native_type.hint) for param in self.inputs]
        if self.call_shape == CallShape.transaction_payable:
            params.append(ParameterSpec(WEI_VALUE_PARAM, "int"))
        return params

    def _function_statement(self) -> str:
        output_types = [] if self.call_shape.is_transaction else [param.abi_type for param in self.outputs]
        return (
            f"function = Function(self.{self.constant_name}, "
            f"{quoted_list([param.abi_type for param in self.inputs])}, "
            f"[{', '.join(param.name for param in self.inputs)}], "
            f"{quoted_list(output_types)})"
        )

    def body(self) -> list[str]:
        """Returns the body lines of the wrapper method"""
        match self.call_shape:
            case CallShape.transaction:
                return [self._function_statement(), "return self.execute_transaction(function)"]
            case CallShape.transaction_payable:
                return [self._function_statement(), f"return self.execute_transaction(function, {WEI_VALUE_PARAM})"]
            case CallShape.constant_void:
                return [f'raise NoReturnValue("{NO_RETURN_VALUE_MESSAGE}")']
            case CallShape.constant_single:
                return [self._function_statement(), "return self.execute_call_single_value_return(function)"]
            case CallShape.constant_raw_collection:
                return [
                    self._function_statement(),
                    "result = self.execute_call_single_value_return(function)",
                    "return list(result)",
                ]
            case CallShape.constant_tuple:
                return [
                    self._function_statement(),
                    "results = self.execute_call_multiple_value_return(function)",
                    f"return ({', '.join(f'results[{index}]' for index in range(self.arity))})",
                ]
        raise ValueError(f"Unknown call shape {self.call_shape}")

    def method_spec(self) -> MethodSpec:
        return MethodSpec(
            name=self.method_name,
            parameters=self.parameters,
            return_hint=self.return_hint,
            body=self.body(),
            docstring=self.selector_signature,
        )


class FunctionSynthesizer:
    """
    Builds wrapper specs for ABI functions.  Warnings about functions whose return values cannot be read are
    sent to the reporter.
    """

    reporter: GenerationReporter

    def __init__(self, reporter: GenerationReporter):
        self.reporter = reporter

    def synthesize(
        self, entry: AbiEntry, reserved_methods: Iterable[str] = CONTRACT_MEMBER_NAMES
    ) -> FunctionWrapperSpec:
        """
        Builds the wrapper spec of a single ABI function.  Input names are kept clear of the names generated
        bodies reference, and the method name is kept clear of ``reserved_methods``.

        :param entry: ABI entry of kind function
        :param reserved_methods: method names already used by the wrapper class
        :return: FunctionWrapperSpec
        :raises InvalidTypeGrammar: if any input or output type cannot be resolved
        """
        if entry.kind != EntryKind.function:
            raise ValueError(f"Cannot build a function wrapper for {entry.kind.value} {entry.name}")

        reserved = ("self", *MODULE_NAMES)
        if entry.state_mutability == StateMutability.payable:
            reserved += (WEI_VALUE_PARAM,)
        inputs = build_parameters(entry.inputs, reserved=reserved)
        outputs = build_parameters(entry.outputs)
        call_shape = select_call_shape(entry.state_mutability, outputs)

        if outputs and not entry.state_mutability.is_read_only:
            self.reporter.report(
                f"Definition of the function {entry.name} returns a value but is not defined as a view function. "
                "Please ensure it contains the view modifier if you want to read the return value"
            )

        logger.debug(f"Function {entry.signature} -> {call_shape.value}")
        return FunctionWrapperSpec(
            name=entry.name,
            method_name=method_name(entry.name, reserved_methods),
            constant_name=func_name_constant(entry.name),
            inputs=inputs,
            outputs=outputs,
            call_shape=call_shape,
        )
