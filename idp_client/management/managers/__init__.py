from .keys import KeysManager
from .logs import LogsManager

__all__ = ["KeysManager", "LogsManager"]
