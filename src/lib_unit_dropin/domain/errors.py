"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the application layer and
consuming applications. The hierarchy lives in the domain layer so outer rings
may depend on it without the reverse being true.

Contents
--------
* :class:`DropInError` – umbrella base class for all drop-in related issues.
* :class:`InvalidName` – an escaped fragment name is not a legal filename.
* :class:`InvalidLevel` – a priority level is negative.
* :class:`InvalidUnitName` – a unit name was rejected by the naming rules.
* :class:`TemplateDerivationError` – an instance name yielded no template.
* :class:`ListingError` – fragment files could not be listed.

System Role
-----------
Per-candidate filesystem failures (missing directories, over-long paths) are
absorbed during discovery and never surface as exceptions. The errors below
are raised only when the *requested* result cannot be produced. Allocation
failures surface as the built-in :class:`MemoryError` and are not wrapped.
"""

from __future__ import annotations


class DropInError(Exception):
    """Base type for all exceptions emitted by ``lib_unit_dropin``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidName(DropInError, ValueError):
    """Raised when an escaped drop-in fragment name is not a valid filename.

    Why
    ----
    Callers pass arbitrary logical keys as fragment names. After escaping, the
    value must still be usable as a single path component; otherwise no file
    can be generated for it. Subclasses :class:`ValueError` so generic
    argument validation code keeps working.
    """


class InvalidLevel(InvalidName):
    """Raised when a priority level is negative."""


class InvalidUnitName(DropInError, ValueError):
    """Raised when a unit name does not satisfy the unit naming rules."""


class TemplateDerivationError(DropInError):
    """Signals that an instance unit name produced no template form.

    Why
    ----
    A name that validates as an instance always has a template. Failing to
    derive it indicates a programming error, so discovery aborts instead of
    silently skipping the template directories.
    """


class ListingError(DropInError):
    """Raised when the fragment files of discovered directories cannot be listed.

    The underlying :class:`OSError` is chained as ``__cause__``.
    """
