class GatewayError(Exception):
    """
    Base class for failures of a single model round trip. These are raised to the
    caller; nothing in the gateway retries.
    """


class MissingCredentialError(GatewayError):
    pass


class TransportError(GatewayError):
    """The provider could not be reached or rejected the request."""


class EmptyResponseError(GatewayError):
    pass


class MalformedResponseError(GatewayError):
    """The model replied, but the cleaned text is not valid JSON."""
