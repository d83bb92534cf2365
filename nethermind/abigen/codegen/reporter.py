import logging
from typing import Protocol

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("codegen")


class GenerationReporter(Protocol):
    """Receives human readable warnings raised while generating wrappers"""

    def report(self, message: str) -> None:
        """Report a single warning"""
        raise NotImplementedError()


class LoggingReporter:
    """Reporter that forwards warnings to the abigen logger"""

    def __init__(self, reporting_logger: logging.Logger | None = None):
        self.logger = reporting_logger or logger

    def report(self, message: str) -> None:
        self.logger.warning(message)


class CollectingReporter:
    """Reporter that keeps every warning in memory.  Used by callers that want to inspect warnings afterwards"""

    messages: list[str]

    def __init__(self):
        self.messages = []

    def report(self, message: str) -> None:
        self.messages.append(message)
