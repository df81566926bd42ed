"""HTTP middleware: CORS, request logging and error handling"""
from .cors import CORSAllowlistMiddleware
from .error_handler import ErrorHandlerMiddleware, build_error_response, register_error_handlers
from .request_logging import RequestLoggingMiddleware

__all__ = [
    'CORSAllowlistMiddleware',
    'ErrorHandlerMiddleware',
    'RequestLoggingMiddleware',
    'build_error_response',
    'register_error_handlers',
]
