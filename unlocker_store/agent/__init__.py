"""
Agent module for Unlocker Store.

Contains the pipeline agent and CLI interface.
"""

from .main import UnlockerStoreCLI, main
from .pipeline_agent import UnlockerStoreAgent

__all__ = [
    "UnlockerStoreAgent",
    "UnlockerStoreCLI",
    "main",
]
