"""Chat platform adapters.

Adapters connect the chat service to messaging platforms.
Each adapter implements the BaseAdapter interface.
"""

from chatllm.adapters.base import BaseAdapter
from chatllm.adapters.command import parse_command

__all__ = ["BaseAdapter", "parse_command"]
