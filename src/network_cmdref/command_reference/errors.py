"""Error taxonomy for the command reference engine.

LoadError aborts catalog construction. ResolutionError and InvocationError
are raised to whoever called lookup() or invoked a field.
"""


class CommandReferenceError(Exception):
    """Base class for all command reference errors."""
    pass


class LoadError(CommandReferenceError):
    """A command reference document could not be loaded."""
    pass


class ResolutionError(CommandReferenceError, LookupError):
    """A feature, name or field is not defined."""
    pass


class InvocationError(CommandReferenceError, TypeError):
    """A template field was invoked with the wrong arguments."""
    pass


class ConstructionError(CommandReferenceError, ValueError):
    """A reference entry was constructed from invalid input."""
    pass
