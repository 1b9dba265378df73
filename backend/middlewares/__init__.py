from middlewares.exception_handler import exception_handler
from middlewares.process_time import add_process_time_header
from middlewares.validation_exception_handler import validation_exception_handler

__all__ = [
    "add_process_time_header",
    "exception_handler",
    "validation_exception_handler",
]
