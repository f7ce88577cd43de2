"""Declarative CLI command references for network device features."""
from .command_reference import CommandReference, CommandRef
from .node import Node, CommandClient

__version__ = "0.1.0"

__all__ = ["CommandReference", "CommandRef", "Node", "CommandClient"]
