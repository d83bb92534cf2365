from .contract import Contract, Function
from .events import (
    BaseEventResponse,
    Event,
    EventValuesWithLog,
    TypeReference,
    decode_log,
)
