from .codegen import ContractWrapperGenerator
from .exceptions import InvalidTypeGrammar, NoReturnValue, UnsupportedWireType
from .types import AbiEntry, AbiParameter, parse_abi
