"""Node - reads and writes feature attributes through the command reference.

Feature wrappers call config_get / config_set with a (feature, name)
pair and the template arguments; the node renders the commands and
parses the output. Talking to the device is left to a CommandClient.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from .command_reference import CommandRef, CommandReference

logger = logging.getLogger(__name__)


class CommandClient(ABC):
    """Transport used by a Node to reach the device."""

    @abstractmethod
    def show(self, command: str) -> str:
        """Run a show command and return its output."""
        pass

    @abstractmethod
    def config(self, commands: list[str]) -> None:
        """Apply configuration commands in order."""
        pass


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _match_line(token: Any, line: str) -> Any:
    """Match one token against one line, returning None on no match."""
    line = line.strip()
    if isinstance(token, re.Pattern):
        return token.search(line)
    return line if line == str(token).strip() else None


def _match_value(match: Any) -> Any:
    """Value extracted from a successful line match."""
    if not isinstance(match, re.Match):
        return match.strip()
    groups = match.groups()
    if not groups:
        return match.group(0)
    if len(groups) == 1:
        return groups[0]
    return groups


def _narrow(token: Any, lines: list[str]) -> list[str]:
    """
    Lines nested under the first line matching token.

    Nesting is by indentation, as in running-config output:

        router bgp 55
          address-family ipv4 unicast
            client-to-client reflection
    """
    for i, line in enumerate(lines):
        if _match_line(token, line) is None:
            continue
        parent_indent = _indent(line)
        children = []
        for child in lines[i + 1:]:
            if child.strip() and _indent(child) <= parent_indent:
                break
            children.append(child)
        return children
    return []


class Node:
    """
    Device node backed by a command reference.

    Usage:
        node = Node(client, CommandReference(product="N9K-C9396PX", platform="nexus"))
        node.config_get("tacacs_server_host", "timeout", ip="10.1.1.1")
        node.config_set("tacacs_server_host", "timeout", state="", ip="10.1.1.1", timeout=5)
    """

    def __init__(self, client: CommandClient, cmd_ref: CommandReference):
        self.client = client
        self.cmd_ref = cmd_ref

    def lookup(self, feature: str, name: str) -> CommandRef:
        """Get the reference entry for a feature attribute."""
        return self.cmd_ref.lookup(feature, name)

    def config_get_default(self, feature: str, name: str) -> Any:
        """Get the default value of a feature attribute."""
        return self.lookup(feature, name).default_value

    def config_get(self, feature: str, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Read the current value of a feature attribute.

        Runs the config_get command and applies the config_get_token
        patterns, rendered with the given arguments, to its output.

        Returns:
            First match, or default_value (None if undefined) when nothing matched

        Raises:
            ResolutionError: If the attribute or its fields aren't defined
            InvocationError: If the arguments don't fit the token template
        """
        ref = self.lookup(feature, name)
        matches = self._matches(ref, args, kwargs)
        if matches:
            return matches[0]
        return ref.default_value if "default_value" in ref.values else None

    def config_get_all(self, feature: str, name: str, *args: Any, **kwargs: Any) -> list:
        """Read every value of a multi-valued feature attribute."""
        return self._matches(self.lookup(feature, name), args, kwargs)

    def config_set(self, feature: str, name: str, *args: Any, **kwargs: Any) -> list[str]:
        """
        Apply a feature attribute.

        Returns:
            The commands sent to the device
        """
        ref = self.lookup(feature, name)
        commands = [str(line) for line in ref.config_set(*args, **kwargs)]
        if not commands:
            logger.warning(f"No commands rendered for {feature}, {name} with {kwargs}")
            return commands
        logger.debug(f"config_set {feature}, {name}: {commands}")
        self.client.config(commands)
        return commands

    def _matches(self, ref: CommandRef, args: tuple, kwargs: dict) -> list:
        tokens = ref.config_get_token(*args, **kwargs)
        if not tokens:
            return []

        command = ref.config_get
        output = self.client.show(command)
        lines = output.splitlines()

        *parents, last = tokens
        for token in parents:
            lines = _narrow(token, lines)
            if not lines:
                logger.debug(f"No '{token}' context in output of '{command}'")
                return []

        matches = []
        for line in lines:
            match = _match_line(last, line)
            if match is not None:
                matches.append(_match_value(match))
        return matches
