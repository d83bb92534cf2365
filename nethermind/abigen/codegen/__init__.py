from .contract_wrapper import ContractWrapperGenerator
from .event_wrapper import EventSynthesizer, EventWrapperSpec
from .function_wrapper import CallShape, FunctionSynthesizer, FunctionWrapperSpec
from .identifiers import sanitize
from .native_types import project, project_for_event_field
from .reporter import CollectingReporter, GenerationReporter, LoggingReporter
from .type_resolver import resolve
