"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class MalformedPayloadError(AdapterError):
    """The server answered with a payload that does not match the wire format."""

    pass
