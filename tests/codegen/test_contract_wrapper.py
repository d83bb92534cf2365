import json
import logging

import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, keccak

from nethermind.abigen.codegen import CollectingReporter, ContractWrapperGenerator
from nethermind.abigen.codegen.contract_wrapper import MODULE_HEADER, is_translatable
from nethermind.abigen.codegen.identifiers import CONTRACT_MEMBER_NAMES, MODULE_NAMES
from nethermind.abigen.exceptions import InvalidTypeGrammar, NoReturnValue
from nethermind.abigen.runtime import Contract
from nethermind.abigen.types.abi import AbiEntry, AbiParameter, EntryKind, StateMutability, parse_abi
from tests.resources.ABI import ERC20_ABI_JSON, REGISTRY_ABI_JSON


@pytest.fixture(name="registry_entries")
def fixture_registry_entries():
    return parse_abi(json.loads(REGISTRY_ABI_JSON))


@pytest.fixture(name="registry_module")
def fixture_registry_module(load_generated_module):
    source = ContractWrapperGenerator("Registry", CollectingReporter()).generate_from_json(
        json.loads(REGISTRY_ABI_JSON)
    )
    return load_generated_module(source, "registry_wrapper")


def test_untranslatable_entries(registry_entries):
    translated = [entry.name for entry in registry_entries if is_translatable(entry)]
    assert translated == ["register", "lookup", "owners", "ping", "release", "Registered"]

    anonymous = AbiEntry(EntryKind.event, "Anon", (AbiParameter("x", "uint256"),), anonymous=True)
    assert not is_translatable(anonymous)


def test_build_func_name_constants(registry_entries):
    generator = ContractWrapperGenerator("Registry")
    constants = generator.build_func_name_constants(registry_entries)

    assert [c.render() for c in constants] == [
        'FUNC_REGISTER = "register"\n',
        'FUNC_LOOKUP = "lookup"\n',
        'FUNC_OWNERS = "owners"\n',
        'FUNC_PING = "ping"\n',
        'FUNC_RELEASE = "release"\n',
        'FUNC_REGISTERENTRY = "registerEntry"\n',
    ]


def test_overloaded_functions_share_name_constant():
    entries = [
        AbiEntry(EntryKind.function, "safeTransferFrom", (AbiParameter("from", "address"),)),
        AbiEntry(
            EntryKind.function,
            "safeTransferFrom",
            (AbiParameter("from", "address"), AbiParameter("data", "bytes")),
        ),
    ]
    constants = ContractWrapperGenerator("Token").build_func_name_constants(entries)

    assert [c.name for c in constants] == ["FUNC_SAFETRANSFERFROM"]


def test_generated_erc20_source():
    reporter = CollectingReporter()
    source = ContractWrapperGenerator("ERC20", reporter).generate_from_json(json.loads(ERC20_ABI_JSON))

    assert source.startswith('"""\nERC20 contract wrapper.')
    assert "class ERC20(Contract):" in source
    assert "class TransferEventResponse(BaseEventResponse):" in source
    assert "class ApprovalEventResponse(BaseEventResponse):" in source
    assert "    def balance_of(self, account: str) -> int:\n" in source
    assert "    def transfer_from(self, sender: str, recipient: str, amount: int) -> TxReceipt:\n" in source
    assert "    def get_transfer_events(self, transaction_receipt: TxReceipt) -> list[TransferEventResponse]:" in source

    # approve, transfer & transferFrom return bool without being view functions
    assert len(reporter.messages) == 3
    assert reporter.messages[0].startswith("Definition of the function approve returns a value")


def test_response_classes_precede_contract_class():
    source = ContractWrapperGenerator("ERC20").generate_from_json(json.loads(ERC20_ABI_JSON))

    assert source.index("class ApprovalEventResponse") < source.index("class TransferEventResponse")
    assert source.index("class TransferEventResponse") < source.index("class ERC20(Contract)")


def test_generated_module_is_importable(registry_module):
    registry = registry_module.Registry

    assert registry.FUNC_LOOKUP == "lookup"
    assert registry.REGISTERED_EVENT.signature == "Registered(bytes32,string,address)"
    assert not hasattr(registry, "register_entry")
    for method in ["register", "lookup", "owners", "ping", "release", "get_registered_events"]:
        assert callable(getattr(registry, method))


def test_void_constant_function_fails_at_call_time(registry_module, mock_w3, random_address):
    registry = registry_module.Registry(mock_w3, random_address())

    with pytest.raises(NoReturnValue, match="cannot call constant function with void return type"):
        registry.ping()

    mock_w3.eth.call.assert_not_called()


def test_generated_multiple_value_call(registry_module, mock_w3, random_address):
    address, owner = random_address(), random_address()
    key = keccak(text="alice")
    mock_w3.eth.call.return_value = encode(["string", "address"], ["alice.eth", owner])

    registry = registry_module.Registry(mock_w3, address)
    assert registry.lookup(key) == ("alice.eth", owner)

    mock_w3.eth.call.assert_called_once_with(
        {"to": address, "data": function_signature_to_4byte_selector("lookup(bytes32)") + encode(["bytes32"], [key])}
    )


def test_generated_collection_call(registry_module, mock_w3, random_address):
    owners = [random_address(), random_address()]
    mock_w3.eth.call.return_value = encode(["address[]"], [owners])

    registry = registry_module.Registry(mock_w3, random_address())
    assert registry.owners() == owners


def test_generated_payable_transaction(registry_module, mock_w3, random_address):
    address = random_address()
    key = keccak(text="alice")
    mock_w3.eth.send_transaction.return_value = b"\x12" * 32
    mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "logs": []}

    registry = registry_module.Registry(mock_w3, address)
    receipt = registry.register(key, "alice.eth", 10**16)

    assert receipt == {"status": 1, "logs": []}
    mock_w3.eth.send_transaction.assert_called_once_with(
        {
            "to": address,
            "data": function_signature_to_4byte_selector("register(bytes32,string)")
            + encode(["bytes32", "string"], [key, "alice.eth"]),
            "value": 10**16,
        }
    )
    mock_w3.eth.wait_for_transaction_receipt.assert_called_once_with(b"\x12" * 32)


def test_generated_transaction_ignores_outputs(registry_module, mock_w3, random_address):
    mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "logs": []}

    registry = registry_module.Registry(mock_w3, random_address())
    assert registry.release(b"\x00" * 32) == {"status": 1, "logs": []}

    assert mock_w3.eth.send_transaction.call_args.args[0]["value"] == 0
    mock_w3.eth.call.assert_not_called()


def _registered_log(registry_module, address, key, owner, value):
    event = registry_module.Registry.REGISTERED_EVENT
    return {
        "address": address,
        "topics": [event.topic, key, b"\x00" * 12 + bytes.fromhex(owner[2:])],
        "data": encode(["string"], [value]),
        "logIndex": 0,
    }


def test_generated_event_extraction(registry_module, mock_w3, random_address):
    address, owner = random_address(), random_address()
    key = keccak(text="alice")
    log = _registered_log(registry_module, address, key, owner, "alice.eth")
    unrelated = {"address": address, "topics": [keccak(text="Other()")], "data": b""}

    registry = registry_module.Registry(mock_w3, address)
    responses = registry.get_registered_events({"logs": [unrelated, log]})

    assert len(responses) == 1
    assert responses[0].key == key
    assert responses[0].owner == owner
    assert responses[0].value == "alice.eth"
    assert responses[0].log is log


def test_generated_event_stream_uninstalls_filter(registry_module, mock_w3, random_address):
    address, owner = random_address(), random_address()
    log = _registered_log(registry_module, address, keccak(text="bob"), owner, "bob.eth")
    log_filter = mock_w3.eth.filter.return_value
    log_filter.filter_id = "0x1"
    log_filter.get_all_entries.return_value = [{"topics": [keccak(text="Other()")], "data": b""}, log]

    registry = registry_module.Registry(mock_w3, address, poll_interval=0)
    stream = registry.registered_event_stream_for_blocks(100, "latest")
    response = next(stream)

    assert response.value == "bob.eth"
    assert response.owner == owner
    filter_params = mock_w3.eth.filter.call_args.args[0]
    assert filter_params["fromBlock"] == 100
    assert filter_params["toBlock"] == "latest"
    assert filter_params["topics"] == ["0x" + registry_module.Registry.REGISTERED_EVENT.topic.hex()]

    stream.close()
    mock_w3.eth.uninstall_filter.assert_called_once_with("0x1")


def test_invalid_types_abort_generation():
    entries = [
        AbiEntry(
            EntryKind.function,
            "broken",
            (AbiParameter("value", "uint7"),),
            state_mutability=StateMutability.view,
        )
    ]

    with pytest.raises(InvalidTypeGrammar):
        ContractWrapperGenerator("Broken").generate(entries)


def test_skipped_entries_are_logged(registry_entries, caplog):
    caplog.set_level(logging.DEBUG, logger="nethermind")
    ContractWrapperGenerator("Registry").generate(registry_entries)

    assert "Skipping constructor" in caplog.text
    assert "Skipping function registerEntry((bytes32,string))" in caplog.text


def test_empty_abi_generates_empty_contract(load_generated_module):
    source = ContractWrapperGenerator("Empty").generate([])
    module = load_generated_module(source, "empty_wrapper")

    assert "class Empty(Contract):" in source
    assert module.Empty.__doc__ == "Wrapper for the Empty contract"


def test_reserved_method_names_cover_contract_members(mock_w3, random_address):
    contract = Contract(mock_w3, random_address())
    members = {name for name in dir(Contract) if not name.startswith("__")} | set(vars(contract))

    assert members == CONTRACT_MEMBER_NAMES


def test_reserved_module_names_cover_header_imports():
    namespace: dict = {}
    exec(MODULE_HEADER.format(contract_name="Header"), namespace)  # pylint: disable=exec-used

    assert {name for name in namespace if not name.startswith("__")} == MODULE_NAMES


SHADOWING_ABI = [
    {
        "type": "function",
        "name": "contractAddress",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "executeTransaction",
        "inputs": [{"name": "target", "type": "address"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {"type": "function", "name": "pause", "inputs": [], "outputs": [], "stateMutability": "nonpayable"},
    {
        "type": "function",
        "name": "setFunction",
        "inputs": [{"name": "Function", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "getPausedEvents",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {"type": "event", "name": "Paused", "inputs": [], "anonymous": False},
]


def test_functions_do_not_shadow_runtime_members(load_generated_module, mock_w3, random_address):
    source = ContractWrapperGenerator("Wallet").generate_from_json(SHADOWING_ABI)
    module = load_generated_module(source, "wallet_wrapper")
    address, owner = random_address(), random_address()
    mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "logs": []}

    wallet = module.Wallet(mock_w3, address)

    mock_w3.eth.call.return_value = encode(["address"], [owner])
    assert wallet.contract_address == address
    assert wallet.contract_address_() == owner

    assert wallet.pause() == {"status": 1, "logs": []}
    assert wallet.execute_transaction_(owner) == {"status": 1, "logs": []}
    assert mock_w3.eth.send_transaction.call_count == 2

    mock_w3.eth.call.return_value = encode(["uint256"], [4])
    assert wallet.get_paused_events_() == 4
    assert wallet.get_paused_events({"logs": []}) == []


def test_parameters_do_not_shadow_module_names(mock_w3, random_address, load_generated_module):
    source = ContractWrapperGenerator("Router").generate_from_json(SHADOWING_ABI)
    module = load_generated_module(source, "router_wrapper")
    mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "logs": []}

    assert "def set_function(self, Function0: int) -> TxReceipt:" in source
    assert module.Router(mock_w3, random_address()).set_function(3) == {"status": 1, "logs": []}
    assert mock_w3.eth.send_transaction.call_args.args[0]["data"] == function_signature_to_4byte_selector(
        "setFunction(uint256)"
    ) + encode(["uint256"], [3])


def test_class_names_do_not_shadow_module_names():
    source = ContractWrapperGenerator("Contract").generate(
        [AbiEntry(EntryKind.event, "Base", (AbiParameter("value", "uint256"),))]
    )

    assert "class Contract_(Contract):" in source
    assert "class BaseEventResponse_(BaseEventResponse):" in source
    compile(source, "contract_wrapper.py", "exec")


def test_overloaded_functions_are_reported():
    reporter = CollectingReporter()
    entries = [
        AbiEntry(
            EntryKind.function,
            "safeTransferFrom",
            (AbiParameter("from", "address"), AbiParameter("to", "address"), AbiParameter("tokenId", "uint256")),
        ),
        AbiEntry(
            EntryKind.function,
            "safeTransferFrom",
            (
                AbiParameter("from", "address"),
                AbiParameter("to", "address"),
                AbiParameter("tokenId", "uint256"),
                AbiParameter("data", "bytes"),
            ),
        ),
    ]

    functions, _ = ContractWrapperGenerator("Token", reporter).synthesize(entries)

    assert [f.method_name for f in functions] == ["safe_transfer_from", "safe_transfer_from"]
    assert reporter.messages == [
        "Function safeTransferFrom(address,address,uint256,bytes) overloads "
        "safeTransferFrom(address,address,uint256). Only the last definition is reachable as safe_transfer_from"
    ]


def test_dropped_entries_are_logged_as_warnings(registry_entries, caplog):
    anonymous = AbiEntry(EntryKind.event, "Anon", (AbiParameter("x", "uint256"),), anonymous=True)
    caplog.set_level(logging.INFO, logger="nethermind")

    ContractWrapperGenerator("Registry", CollectingReporter()).generate([*registry_entries, anonymous])

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings == [
        "Skipping function registerEntry((bytes32,string)): tuple parameters are not supported",
        "Skipping anonymous event Anon(uint256): anonymous logs cannot be matched",
    ]
    assert "Skipping constructor" not in caplog.text
