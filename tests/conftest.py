import random
import sys
import types
from unittest.mock import MagicMock, Mock

import pytest
from eth_utils import to_checksum_address

from nethermind.abigen.codegen.reporter import GenerationReporter


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _generate_random_address


@pytest.fixture(name="reporter")
def fixture_reporter():
    return Mock(spec=GenerationReporter)


@pytest.fixture(name="mock_w3")
def fixture_mock_w3():
    return MagicMock()


@pytest.fixture(name="load_generated_module")
def fixture_load_generated_module(monkeypatch):
    """Executes generated source as a real module, and returns the module"""

    def _load(source: str, module_name: str = "generated_wrapper") -> types.ModuleType:
        module = types.ModuleType(module_name)
        monkeypatch.setitem(sys.modules, module_name, module)
        exec(compile(source, f"{module_name}.py", "exec"), module.__dict__)  # pylint: disable=exec-used
        return module

    return _load
