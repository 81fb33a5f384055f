"""bgztail - follow the decompressed content of a growing BGZF file."""
from .config import TailConfig, Verbosity
from .engine import TailEngine, Step, tail_file, find_last_header
from .errors import ConfigurationError, FormatError, NotFoundError, TailError

__all__ = [
    "TailConfig",
    "Verbosity",
    "TailEngine",
    "Step",
    "tail_file",
    "find_last_header",
    "ConfigurationError",
    "FormatError",
    "NotFoundError",
    "TailError",
]
