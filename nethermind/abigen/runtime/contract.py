import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterator

from eth_abi import encode as eth_abi_encode
from eth_typing import ChecksumAddress
from eth_utils import function_signature_to_4byte_selector, to_checksum_address
from web3 import Web3
from web3.types import BlockIdentifier, FilterParams, LogReceipt, TxParams, TxReceipt

from nethermind.abigen.runtime.events import Event, EventValuesWithLog, decode_log, decode_values

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("runtime")

DEFAULT_POLL_INTERVAL = 1.0
""" Seconds between filter polls of live event streams """


@dataclass(frozen=True)
class Function:
    """A single contract function invocation, with its input values and the types of its outputs"""

    name: str
    input_types: list[str] = field(default_factory=list)
    input_values: list[Any] = field(default_factory=list)
    output_types: list[str] = field(default_factory=list)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode(self) -> bytes:
        """Returns the calldata for this invocation"""
        return self.selector + eth_abi_encode(self.input_types, self.input_values)

    def decode_outputs(self, data: bytes) -> list[Any]:
        return decode_values(self.output_types, data)


class Contract:
    """
    Base class of generated contract wrappers.  Executes calls & transactions against a single deployed
    contract, and decodes the logs it emits.
    """

    w3: Web3
    contract_address: ChecksumAddress
    default_account: ChecksumAddress | None
    poll_interval: float

    def __init__(
        self,
        w3: Web3,
        contract_address: str,
        default_account: str | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.w3 = w3
        self.contract_address = to_checksum_address(contract_address)
        self.default_account = to_checksum_address(default_account) if default_account else None
        self.poll_interval = poll_interval

    def _call(self, function: Function) -> list[Any]:
        call_params: TxParams = {"to": self.contract_address, "data": function.encode()}
        if self.default_account:
            call_params["from"] = self.default_account

        result = self.w3.eth.call(call_params)
        return function.decode_outputs(bytes(result))

    def execute_call_single_value_return(self, function: Function) -> Any:
        """Executes a read only call, and returns its first decoded output"""
        values = self._call(function)
        return values[0] if values else None

    def execute_call_multiple_value_return(self, function: Function) -> list[Any]:
        """Executes a read only call, and returns every decoded output in declaration order"""
        return self._call(function)

    def execute_transaction(self, function: Function, wei_value: int = 0) -> TxReceipt:
        """
        Sends a transaction invoking ``function``, and waits for it to be mined

        :param function: Function invocation
        :param wei_value: Amount of wei transferred with the transaction
        :return: Transaction receipt
        """
        transaction: TxParams = {"to": self.contract_address, "data": function.encode(), "value": wei_value}
        if self.default_account:
            transaction["from"] = self.default_account

        tx_hash = self.w3.eth.send_transaction(transaction)
        logger.debug(f"Sent {function.signature} to {self.contract_address} in transaction 0x{bytes(tx_hash).hex()}")
        return self.w3.eth.wait_for_transaction_receipt(tx_hash)

    def extract_event_values(self, event: Event, log: LogReceipt) -> EventValuesWithLog | None:
        """Decodes a single log.  Returns None if the log was not emitted by ``event``"""
        return decode_log(event, log)

    def extract_event_parameters_with_log(
        self, event: Event, transaction_receipt: TxReceipt
    ) -> list[EventValuesWithLog]:
        """Decodes every log of a transaction receipt that was emitted by ``event``, in log order"""
        values = []
        for log in transaction_receipt["logs"]:
            decoded = decode_log(event, log)
            if decoded is not None:
                values.append(decoded)
        return values

    def build_event_filter(
        self, event: Event, from_block: BlockIdentifier, to_block: BlockIdentifier
    ) -> FilterParams:
        """Returns filter params matching every log of ``event`` emitted by this contract in a block range"""
        return {
            "fromBlock": from_block,
            "toBlock": to_block,
            "address": self.contract_address,
            "topics": ["0x" + event.topic.hex()],
        }

    def eth_log_stream(self, filter_params: FilterParams, poll_interval: float | None = None) -> Iterator[LogReceipt]:
        """
        Installs a log filter on the node, and yields logs in the order the node delivers them.  The stream never
        ends on its own.  Closing the generator uninstalls the filter, and a closed stream cannot be restarted.

        :param filter_params: eth_newFilter parameters
        :param poll_interval: seconds between polls.  Defaults to the poll interval of the contract
        """
        interval = self.poll_interval if poll_interval is None else poll_interval
        log_filter = self.w3.eth.filter(filter_params)
        logger.debug(f"Installed log filter {log_filter.filter_id} for {self.contract_address}")

        try:
            for log in log_filter.get_all_entries():
                yield log
            while True:
                for log in log_filter.get_new_entries():
                    yield log
                time.sleep(interval)
        finally:
            self.w3.eth.uninstall_filter(log_filter.filter_id)
            logger.debug(f"Uninstalled log filter {log_filter.filter_id}")
