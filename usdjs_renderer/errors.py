"""Error types raised by the renderer tools."""

from __future__ import annotations


class UsdjsRendererError(Exception):
    """Base class for every error the CLI reports as a fatal failure."""


class RootNotFoundError(UsdjsRendererError, FileNotFoundError):
    pass


class MissingDependencyError(UsdjsRendererError, ImportError):
    pass


class InvalidArgumentError(UsdjsRendererError, ValueError):
    pass


class EntryOutOfBoundsError(UsdjsRendererError, ValueError):
    pass


class EntryNotFoundError(UsdjsRendererError, FileNotFoundError):
    pass


class EmptyCorpusError(UsdjsRendererError, ValueError):
    pass


class RenderFailureError(UsdjsRendererError, RuntimeError):
    """Navigation, evaluation or screenshot failed inside the browser."""
