"""Domain-specific errors for gomockgen."""

from __future__ import annotations


class MockGenError(Exception):
    """Base error for gomockgen."""


class GenerateError(MockGenError):
    """Base for errors reported back to the caller of a generation request."""


class ParameterDecodeError(GenerateError):
    """Raised when the generator parameter blob cannot be decoded."""


class DescriptorDecodeError(GenerateError):
    """Raised when a file/interface descriptor document is structurally invalid."""


class InterfaceNotFoundError(GenerateError):
    """Raised when the requested interface is absent from the supplied file."""


class FormatError(GenerateError):
    """Raised when the external Go formatter rejects or cannot format the output."""


class MalformedTypeGraphError(MockGenError):
    """Raised when a type descriptor is cyclic or has an unrenderable shape.

    This is an input-contract violation by the descriptor producer, not a
    user error; callers are expected to let it propagate.
    """


class ABIDecodeError(GenerateError):
    """Raised when a plugin request or response cannot be decoded from MessagePack."""
