__version__ = "0.1.0"

from .config import Settings
from .errors import GroupIndexOutOfRange, InvalidPattern, NotText
from .runner import BatchRunner

__all__ = ["Settings", "BatchRunner", "InvalidPattern", "GroupIndexOutOfRange", "NotText"]
