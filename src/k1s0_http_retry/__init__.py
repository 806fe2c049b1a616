"""k1s0 http_retry library."""

from .config import RetrySection, load_retry_options
from .context import MiddlewareContext
from .control import MiddlewareControl, OptionKey
from .delay import exponential_backoff, get_delay, parse_retry_after
from .exceptions import RetryCancelledError, RetryHandlerError, RetryHandlerErrorCodes
from .handler import RetryHandler
from .middleware import HttpxTransport, Middleware, MiddlewareChain
from .options import DEFAULT_RETRY_OPTIONS, RetryHandlerOptions, merge_options

__all__ = [
    "DEFAULT_RETRY_OPTIONS",
    "HttpxTransport",
    "Middleware",
    "MiddlewareChain",
    "MiddlewareContext",
    "MiddlewareControl",
    "OptionKey",
    "RetryCancelledError",
    "RetryHandler",
    "RetryHandlerError",
    "RetryHandlerErrorCodes",
    "RetryHandlerOptions",
    "RetrySection",
    "exponential_backoff",
    "get_delay",
    "load_retry_options",
    "merge_options",
    "parse_retry_after",
]
