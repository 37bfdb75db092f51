from __future__ import annotations


class EximgpdfError(Exception):
    """Base class for every error this tool raises on its own."""


class PathResolutionError(EximgpdfError, OSError):
    """An input path could not be resolved to a canonical form."""


class TraversalError(EximgpdfError, OSError):
    """Walking a root directory failed."""


class RelativePathError(EximgpdfError, ValueError):
    """Ancestry between two paths could not be computed."""


class DocumentError(EximgpdfError, RuntimeError):
    """A PDF could not be opened, decrypted or decoded."""
