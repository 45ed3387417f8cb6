"""Locale neutralization — force the canonical locale around a capture.

snapshot_and_force_canonical() switches the host locale, reloads every
loaded text domain from canonical-language catalogs and forces the
C-runtime locale; restore() reverses all three. Restoring deliberately
does not reload the original catalogs: the host loads them again in the
restored locale the next time they are used.
"""

import contextlib
import logging
import os
from dataclasses import dataclass
from typing import Callable

from daily_error_log.context import CANONICAL_LOCALE
from daily_error_log.models import LocaleSnapshot

logger = logging.getLogger(__name__)

WINDOWS_LOCALE_NAMES = {"en_US": "English_United States.1252"}

_HOST_OPERATIONS = (
    "get_current_locale",
    "switch_locale",
    "restore_previous_locale",
    "list_loaded_text_domains",
    "unload_text_domain",
    "load_text_domain",
    "is_text_domain_loaded",
)


@dataclass(frozen=True)
class HostCapabilities:
    """Bound host operations, or None for each one the host lacks."""

    get_current_locale: Callable | None = None
    switch_locale: Callable | None = None
    restore_previous_locale: Callable | None = None
    list_loaded_text_domains: Callable | None = None
    unload_text_domain: Callable | None = None
    load_text_domain: Callable | None = None
    is_text_domain_loaded: Callable | None = None

    @classmethod
    def resolve(cls, host) -> "HostCapabilities":
        found = {}
        for name in _HOST_OPERATIONS:
            op = getattr(host, name, None) if host is not None else None
            found[name] = op if callable(op) else None
        return cls(**found)


def process_locale_candidates_for(canonical_locale: str) -> tuple[str, ...]:
    """C-runtime spellings of a locale: bare, UTF-8, then the Windows name if known."""
    candidates = [canonical_locale, f"{canonical_locale}.UTF-8"]
    if canonical_locale in WINDOWS_LOCALE_NAMES:
        candidates.append(WINDOWS_LOCALE_NAMES[canonical_locale])
    return tuple(candidates)


def _attempt(step: str, op, *args, default=None):
    """Run one host operation; a missing or failing operation yields default."""
    if op is None:
        return default
    try:
        return op(*args)
    except Exception as e:
        logger.debug("Locale step %s failed: %r", step, e)
        return default


class LocaleNeutralizer:
    def __init__(self, host=None, process_locale=None,
                 canonical_locale: str = CANONICAL_LOCALE,
                 languages_dir: str | None = None,
                 package_languages_dir: str | None = None,
                 process_locale_candidates: tuple[str, ...] | None = None):
        self._caps = HostCapabilities.resolve(host)
        self._process_locale = process_locale
        self._canonical = canonical_locale
        self._languages_dir = languages_dir
        self._package_languages_dir = package_languages_dir
        self._candidates = process_locale_candidates or process_locale_candidates_for(canonical_locale)

    @property
    def canonical_locale(self) -> str:
        return self._canonical

    def catalog_candidates(self, domain: str) -> list[str]:
        """Canonical catalog paths for a domain, in search order."""
        filename = f"{domain}-{self._canonical}.mo"
        paths = []
        if self._languages_dir:
            paths.append(os.path.join(self._languages_dir, "plugins", filename))
            paths.append(os.path.join(self._languages_dir, filename))
        if self._package_languages_dir:
            paths.append(os.path.join(self._package_languages_dir, filename))
        return paths

    def _load_canonical(self, domain: str):
        caps = self._caps
        for path in self.catalog_candidates(domain):
            _attempt("load_text_domain", caps.load_text_domain, domain, path)
            if _attempt("is_text_domain_loaded", caps.is_text_domain_loaded, domain, default=False):
                return
        logger.debug("No %s catalog for text domain %s, using source strings",
                     self._canonical, domain)

    def _force_process_locale(self) -> str | None:
        if self._process_locale is None:
            return None
        original = _attempt("process_locale.get", self._process_locale.get)
        if original is None:
            logger.debug("Process locale unreadable, leaving it unchanged")
            return None
        for candidate in self._candidates:
            try:
                self._process_locale.set(candidate)
                break
            except Exception:
                continue
        else:
            logger.debug("No process locale variant of %s accepted", self._canonical)
        return original

    def snapshot_and_force_canonical(self) -> LocaleSnapshot:
        caps = self._caps
        current = _attempt("get_current_locale", caps.get_current_locale) or self._canonical

        domains = _attempt("list_loaded_text_domains", caps.list_loaded_text_domains, default=None) or []
        domains = tuple(dict.fromkeys(domains))
        for domain in domains:
            _attempt("unload_text_domain", caps.unload_text_domain, domain)

        switched = _attempt("switch_locale", caps.switch_locale, self._canonical, default=False) is not False

        for domain in domains:
            self._load_canonical(domain)

        process_locale = self._force_process_locale()

        return LocaleSnapshot(
            locale=current,
            text_domains=domains,
            process_locale=process_locale,
            switched=switched,
        )

    def restore(self, snapshot: LocaleSnapshot):
        caps = self._caps
        if caps.restore_previous_locale is not None:
            if snapshot.switched:
                _attempt("restore_previous_locale", caps.restore_previous_locale)
        else:
            _attempt("switch_locale", caps.switch_locale, snapshot.locale)

        for domain in snapshot.text_domains:
            _attempt("unload_text_domain", caps.unload_text_domain, domain)

        if self._process_locale is not None and snapshot.process_locale is not None:
            _attempt("process_locale.set", self._process_locale.set, snapshot.process_locale)

    @contextlib.contextmanager
    def neutralized(self):
        snapshot = self.snapshot_and_force_canonical()
        try:
            yield snapshot
        finally:
            self.restore(snapshot)
