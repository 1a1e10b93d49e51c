"""Platform abstraction layer."""

from .files import atomic_write_text, remove_file
from .process import ProcessError, run

__all__ = [
    # files
    "atomic_write_text",
    "remove_file",
    # process
    "ProcessError",
    "run",
]
