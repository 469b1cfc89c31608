#!/usr/bin/env python3
"""Errors raised while rebuilding documents from a token stream.

All of them mean the token source broke its contract. None are recoverable
locally; callers decide whether to re-run against a fresh source.
"""


class ReconstructionError(Exception):
    """Base class for token stream protocol violations."""


class EmptyPathError(ReconstructionError):
    """A value was placed at the tree root without an enclosing container."""


class InvalidPathError(ReconstructionError):
    """Path step does not fit the container it addresses."""


class MissingBoundaryKeyError(ReconstructionError):
    """The stream ended before the boundary key was seen."""


class UnbalancedContainerError(ReconstructionError):
    """A container closed without being opened, or never closed."""


class DetachedReconstructorError(ReconstructionError):
    """A token reached a reconstructor that has already finished."""
