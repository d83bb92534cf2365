import keyword
import re
from typing import Iterable

from nethermind.abigen.utils import camel_to_snake

_ILLEGAL_CHARACTERS = re.compile(r"[^0-9A-Za-z_]")

CONTRACT_MEMBER_NAMES = frozenset(
    {
        "w3",
        "contract_address",
        "default_account",
        "poll_interval",
        "_call",
        "execute_call_single_value_return",
        "execute_call_multiple_value_return",
        "execute_transaction",
        "extract_event_values",
        "extract_event_parameters_with_log",
        "build_event_filter",
        "eth_log_stream",
    }
)
""" Attributes and methods of the runtime Contract base class.  Generated methods must not shadow them """

MODULE_NAMES = frozenset(
    {
        "Iterator",
        "closing",
        "dataclass",
        "BlockIdentifier",
        "FilterParams",
        "TxReceipt",
        "NoReturnValue",
        "BaseEventResponse",
        "Contract",
        "Event",
        "Function",
        "TypeReference",
    }
)
""" Names imported by every generated module, and referenced from generated method bodies """


def sanitize(name: str, positional_index: int) -> str:
    """
    Returns a legal Python identifier for an ABI parameter name.  Unnamed parameters are named from their
    position, ie ``param0``, ``param1``.  Uniqueness across a parameter list is not checked.

    >>> sanitize("param", 1)
    'param'
    >>> sanitize("", 1)
    'param1'
    >>> sanitize("from", 0)
    'from_'

    :param name: parameter name as declared in the ABI
    :param positional_index: index of the parameter within its list
    """
    if not name or not name.strip():
        return f"param{positional_index}"

    if name.isidentifier() and not keyword.iskeyword(name):
        return name

    legal = _ILLEGAL_CHARACTERS.sub("_", name.strip())
    if legal[0].isdigit():
        legal = "_" + legal
    if keyword.iskeyword(legal):
        legal += "_"
    return legal


def unique_names(names: Iterable[str], reserved: Iterable[str] = ()) -> list[str]:
    """
    Sanitizes a list of parameter names, and suffixes the positional index onto names that were already used
    by an earlier parameter or are reserved by the wrapper

    >>> unique_names(["amount", "", "amount"])
    ['amount', 'param1', 'amount2']
    """
    taken = set(reserved)
    result = []
    for index, name in enumerate(names):
        identifier = sanitize(name, index)
        while identifier in taken:
            identifier = f"{identifier}{index}"
        taken.add(identifier)
        result.append(identifier)
    return result


def avoid_reserved(identifier: str, reserved: Iterable[str]) -> str:
    """
    Appends underscores to an identifier until it no longer collides with a reserved name.  Dunder names get
    one extra underscore so they never override special methods.

    >>> avoid_reserved("execute_transaction", CONTRACT_MEMBER_NAMES)
    'execute_transaction_'
    """
    taken = set(reserved)
    if identifier.startswith("__") and identifier.endswith("__"):
        identifier += "_"
    while identifier in taken:
        identifier += "_"
    return identifier


def method_name(name: str, reserved: Iterable[str] = CONTRACT_MEMBER_NAMES) -> str:
    """
    Returns the snake case Python method name for an ABI function or event name.  Names that would shadow a
    member of the Contract base class are suffixed with an underscore.

    >>> method_name("balanceOf")
    'balance_of'
    >>> method_name("contractAddress")
    'contract_address_'
    """
    return avoid_reserved(sanitize(camel_to_snake(name), 0), reserved)


def func_name_constant(name: str) -> str:
    """
    Returns the class constant bound to a function name

    >>> func_name_constant("functionName")
    'FUNC_FUNCTIONNAME'
    """
    return "FUNC_" + sanitize(name, 0).upper()


def event_constant(name: str) -> str:
    """
    Returns the class constant holding an Event descriptor

    >>> event_constant("Transfer")
    'TRANSFER_EVENT'
    """
    return camel_to_snake(sanitize(name, 0)).upper() + "_EVENT"
