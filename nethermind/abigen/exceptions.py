class AbiParseError(Exception):
    """

    Raised when an element of an ABI JSON document cannot be converted into an AbiEntry, ie the element is not
    a mapping, or a parameter is missing its ``type`` key

    """


class InvalidTypeGrammar(ValueError):
    """
    Raised when a declared ABI type string does not match the supported type grammar.  The following strings
    will raise this error:

        * Unknown base types, ie ``uint257``, ``bytes33``, ``fixed128x18``
        * Integer widths that are not a multiple of 8, ie ``uint12``
        * Malformed array suffixes, ie ``uint256[0]``, ``uint256[-1]``, ``uint256[``
        * Tuple types, ie ``(uint256,address)`` or ``tuple[]``

    Translation of the ABI entry is aborted, and no partial wrapper is produced.
    """


class UnsupportedWireType(TypeError):
    """
    Raised when a native type projection is requested for a value that is not a resolved type descriptor.

    This signals that the resolver and the projector are out of sync, and is never caused by user input.
    """


class NoReturnValue(RuntimeError):
    """
    Raised by generated wrappers when a view or pure function that declares no outputs is invoked.  Such a call
    can never return data, so the wrapper fails at call time instead of at generation time.
    """


class DecodingError(Exception):
    """

    Raised when event logs or call results returned by a node cannot be decoded with the types of the wrapper

    """
