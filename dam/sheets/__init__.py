from .base import TabularSource
from .memory import MemorySheetSource

__all__ = ["TabularSource", "MemorySheetSource"]
