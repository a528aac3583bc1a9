"""Error types raised by the transport, the server and routers."""

from __future__ import annotations

from typing import Any

from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    ErrorData,
)


class _DetailedError(Exception):
    """Exception whose message is built from a template and one detail."""

    template = "{}"

    def __init__(self, detail: Any = "") -> None:
        self.detail = detail
        super().__init__(self.template.format(detail))


# --- transport -------------------------------------------------------------


class TransportError(_DetailedError):
    """A failure while reading or writing framed messages."""


class TransportIoError(TransportError):
    template = "IO error: {}"


class TransportJsonError(TransportError):
    template = "JSON serialization error: {}"


class TransportUtf8Error(TransportError):
    template = "Invalid UTF-8 sequence: {}"


class TransportProtocolError(TransportError):
    template = "Protocol error: {}"


class InvalidMessageError(TransportError):
    template = "Invalid message format: {}"


# --- server ----------------------------------------------------------------


class ServerError(_DetailedError):
    """A failure that stops the server loop."""


class ServiceError(ServerError):
    template = "Service error: {}"


class ServerInternalError(ServerError):
    template = "Internal error: {}"


class ServerTimeoutError(ServerError):
    template = "Request timed out"


# --- router ----------------------------------------------------------------


class RouterError(_DetailedError):
    """A failure while routing a request; maps onto a JSON-RPC error."""

    code = INTERNAL_ERROR

    def to_error_data(self) -> ErrorData:
        """Return the JSON-RPC error object for this failure."""
        return ErrorData(code=self.code, message=str(self.detail))


class MethodNotFoundError(RouterError):
    template = "Method not found: {}"
    code = METHOD_NOT_FOUND


class InvalidParamsError(RouterError):
    template = "Invalid parameters: {}"
    code = INVALID_PARAMS


class RouterInternalError(RouterError):
    template = "Internal error: {}"
    code = INTERNAL_ERROR


class ToolNotFoundError(RouterError):
    template = "Tool not found: {}"
    code = INVALID_REQUEST


class ResourceNotFoundError(RouterError):
    template = "Resource not found: {}"
    code = INVALID_REQUEST


class PromptNotFoundError(RouterError):
    template = "Not found: {}"
    code = INVALID_REQUEST


# --- handler errors --------------------------------------------------------


class ToolError(_DetailedError):
    """A tool could not be run."""


class ToolExecutionError(ToolError):
    template = "Execution failed: {}"


class InvalidToolParametersError(ToolError):
    template = "Invalid parameters: {}"


class UnknownToolError(ToolError):
    template = "Tool not found: {}"


class ResourceError(_DetailedError):
    """A resource could not be read."""


class UnknownResourceError(ResourceError):
    template = "Resource not found: {}"


class PromptError(_DetailedError):
    """A prompt could not be produced."""


class UnknownPromptError(PromptError):
    template = "Prompt not found: {}"


def router_error_from_resource_error(err: ResourceError) -> RouterError:
    """Map a resource failure onto the router error reported to the client."""
    if isinstance(err, UnknownResourceError):
        return ResourceNotFoundError(err.detail)
    return RouterInternalError("Unknown resource error")