"""cardfed server glue - start-up, credentials and error responses for starlette apps."""

from .auth_helpers import (
    correlation_id_from_request,
    credential_from_request,
    parse_basic_auth,
    system_address_book_for_request,
)
from .errors import error_response, exception_response
from .setup import configure_server

__all__ = [
    "configure_server",
    "correlation_id_from_request",
    "credential_from_request",
    "parse_basic_auth",
    "system_address_book_for_request",
    "error_response",
    "exception_response",
]
