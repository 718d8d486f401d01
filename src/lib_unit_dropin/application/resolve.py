"""Drop-in directory discovery.

Purpose
-------
Find every override directory that applies to a set of unit names across an
ordered list of lookup directories, then hand the merged directory list to the
fragment lister. Remains free of direct filesystem access: canonicalization
and listing go through ports so the algorithm can run against fakes.

Contents
    - ``DropInSearchResult``: ``(files, found)`` result of a search.
    - ``DropInResolver``: holds the collaborators and exposes
      ``find_unit_dropin_dirs`` (one name, one lookup directory) and
      ``find_dropin_paths`` (all names, all lookup directories).

System Role
-----------
Wired by :mod:`lib_unit_dropin.core` with the filesystem adapters and the
logging diagnostic sink. For an instance unit such as ``getty@tty1.service``
both ``getty@tty1.service.d`` and the template directory ``getty@.service.d``
are considered, so one override can apply to every instance.
"""

from __future__ import annotations

import errno
from typing import Iterable, NamedTuple, Sequence

from ..domain import unit_name
from ..domain.errors import InvalidUnitName, ListingError, TemplateDerivationError
from .ports import ConfigFileLister, DiagnosticSink, PathCanonicalizer, UnitPathCache


class DropInSearchResult(NamedTuple):
    """Outcome of :meth:`DropInResolver.find_dropin_paths`.

    ``found`` is ``False`` when no override directory exists at all, which
    callers treat differently from directories that exist but hold no
    fragments (``found`` is ``True``, ``files`` empty).
    """

    files: list[str]
    found: bool


class DropInResolver:
    """Discover override directories and the fragments inside them."""

    def __init__(
        self,
        *,
        canonicalizer: PathCanonicalizer,
        lister: ConfigFileLister,
        sink: DiagnosticSink,
    ) -> None:
        self.canonicalizer = canonicalizer
        self.lister = lister
        self.sink = sink

    def find_unit_dropin_dirs(
        self,
        original_root: str | None,
        unit_path_cache: UnitPathCache | None,
        unit_path: str,
        name: str,
        suffix: str,
        dirs: list[str],
    ) -> None:
        """Append the override directories of *name* below *unit_path* to *dirs*.

        Why
        ----
        Most units have no override directory at all, so absence is silent.
        Other per-candidate failures are reported to the sink but never abort
        the scan: one unreadable directory must not hide the others.

        What
        ----
        Checks ``<unit_path>/<name><suffix>``; when *name* is an instance,
        checks its template as well. A *unit_path_cache* that lacks a
        candidate skips only that candidate's canonicalization, never the
        template step.

        Raises
        ------
        TemplateDerivationError
            When an instance name yields no template.
        """

        current = name
        while True:
            candidate = f"{unit_path}/{current}{suffix}"
            if unit_path_cache is None or candidate in unit_path_cache:
                self._find_dir(original_root, candidate, dirs)

            if not unit_name.is_instance(current):
                return
            try:
                current = unit_name.template_of(current)
            except InvalidUnitName as exc:
                self.sink.error("dropin_template_failed", unit=current, path=unit_path, error=str(exc))
                raise TemplateDerivationError(f"Failed to generate template from unit name {current!r}") from exc

    def find_dropin_paths(
        self,
        original_root: str | None,
        lookup_paths: Sequence[str],
        unit_path_cache: UnitPathCache | None,
        dir_suffix: str,
        file_suffix: str | None,
        names: Iterable[str],
    ) -> DropInSearchResult:
        """Return the fragment files of every override directory for *names*.

        Parameters
        ----------
        original_root:
            Root directory used to confine symlink resolution, or ``None``.
        lookup_paths:
            Unit search directories, highest priority first.
        unit_path_cache:
            Optional set of known search entries gating canonicalization.
        dir_suffix / file_suffix:
            Override directory suffix (``".d"``) and fragment suffix
            (``".conf"``).
        names:
            Unit names (a unit and its aliases).

        Returns
        -------
        DropInSearchResult
            ``([], False)`` when no directory was found, without calling the
            lister; otherwise the lister's output and ``True``.

        Raises
        ------
        ListingError
            When listing the discovered directories fails. A name whose
            template cannot be derived is reported by
            :meth:`find_unit_dropin_dirs` and skipped; directories already
            found for it are kept.

        Examples
        --------
        >>> class _Nothing:
        ...     def resolve(self, path, root=None):
        ...         raise FileNotFoundError(path)
        >>> from lib_unit_dropin.observability import LoggingDiagnosticSink
        >>> resolver = DropInResolver(canonicalizer=_Nothing(), lister=None, sink=LoggingDiagnosticSink())
        >>> resolver.find_dropin_paths(None, ["/etc/systemd/system"], None, ".d", ".conf", ["a.service"])
        DropInSearchResult(files=[], found=False)
        """

        dirs: list[str] = []
        for name in names:
            for unit_path in lookup_paths:
                try:
                    self.find_unit_dropin_dirs(original_root, unit_path_cache, unit_path, name, dir_suffix, dirs)
                except TemplateDerivationError:
                    continue

        if not dirs:
            return DropInSearchResult([], False)

        try:
            files = self.lister.list(file_suffix, dirs)
        except OSError as exc:
            self.sink.warning("dropin_listing_failed", unit=None, path=None, dirs=len(dirs), error=str(exc))
            raise ListingError(f"Failed to create the list of configuration files: {exc}") from exc
        self.sink.debug("dropin_paths_found", unit=None, path=None, dirs=len(dirs), files=len(files))
        return DropInSearchResult(files, True)

    def _find_dir(self, original_root: str | None, path: str, dirs: list[str]) -> None:
        """Canonicalize *path* and append it to *dirs*, absorbing per-candidate failures."""

        try:
            chased = self.canonicalizer.resolve(path, original_root)
        except OSError as exc:
            if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
                return
            if exc.errno == errno.ENAMETOOLONG:
                self.sink.debug("dropin_path_too_long", unit=None, path=path, error=str(exc))
                return
            self.sink.warning("dropin_canonicalize_failed", unit=None, path=path, error=str(exc))
            return
        except ValueError as exc:
            self.sink.warning("dropin_canonicalize_failed", unit=None, path=path, error=str(exc))
            return
        dirs.append(chased)
        self.sink.debug("dropin_dir_found", unit=None, path=chased)
