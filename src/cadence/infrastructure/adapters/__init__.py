# Infrastructure Adapters Package
from .deck_configs import StaticDeckConfigProvider, YamlDeckConfigProvider
from .fsrs_model import FsrsMemoryModel
from .memory_store import InMemoryCardStore

__all__ = [
    "FsrsMemoryModel",
    "InMemoryCardStore",
    "StaticDeckConfigProvider",
    "YamlDeckConfigProvider",
]
