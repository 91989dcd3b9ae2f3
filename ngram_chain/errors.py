"""
Exceptions raised by the n-gram chains.

The classes also derive from the builtin exception a caller would expect
(``ValueError`` for bad input, ``RuntimeError`` for a walk that cannot go on),
so existing ``except ValueError`` blocks keep working.
"""


class ChainError(Exception):
    """Base class for every error raised by ngram_chain."""


class InvalidArgumentError(ChainError, ValueError):
    """An operation received input of the wrong type or out of range."""


class SnapshotError(ChainError, ValueError):
    """A snapshot could not be parsed or does not describe a valid chain."""


class GenerationStalledError(ChainError, RuntimeError):
    """
    Generation reached a token with no stored continuation, or ran past the
    configured step limit.

    Attributes:
        token: The token (or dictionary index) the walk stopped on.
        steps (int): Number of walk steps taken before stopping.
    """

    def __init__(self, message, token=None, steps=0):
        super().__init__(message)
        self.token = token
        self.steps = steps
