"""Host collaborators — locale/translation service, C-runtime locale, last error.

The capture pipeline only talks to these through the LocaleHost protocol
and the two small classes below, so an embedding application can supply
its own translation layer. GettextHost is a complete default built on the
standard gettext catalogs.
"""

import gettext
import locale
import logging
import os
import threading
from typing import Protocol, runtime_checkable

from daily_error_log.context import CANONICAL_LOCALE, filter_gettext, filter_locale
from daily_error_log.models import LastError

logger = logging.getLogger(__name__)


@runtime_checkable
class LocaleHost(Protocol):
    def get_current_locale(self) -> str: ...
    def switch_locale(self, locale_id: str) -> bool: ...
    def restore_previous_locale(self) -> str | None: ...
    def list_loaded_text_domains(self) -> list[str]: ...
    def unload_text_domain(self, domain: str) -> bool: ...
    def load_text_domain(self, domain: str, path: str) -> bool: ...
    def is_text_domain_loaded(self, domain: str) -> bool: ...


class NullLocaleHost:
    """Host without a translation layer; every operation is a no-op."""

    def get_current_locale(self) -> str:
        return CANONICAL_LOCALE

    def switch_locale(self, locale_id: str) -> bool:
        return False

    def restore_previous_locale(self) -> str | None:
        return None

    def list_loaded_text_domains(self) -> list[str]:
        return []

    def unload_text_domain(self, domain: str) -> bool:
        return False

    def load_text_domain(self, domain: str, path: str) -> bool:
        return False

    def is_text_domain_loaded(self, domain: str) -> bool:
        return False


class GettextHost:
    """Locale stack plus gettext text domains with just-in-time loading.

    A domain bound with bind_text_domain() is loaded lazily, in whatever
    locale is current at the time, on the next access after it was bound
    or unloaded. Domains loaded directly from a file with
    load_text_domain() are not reloaded once unloaded.
    """

    def __init__(self, locale_id: str = CANONICAL_LOCALE):
        self._lock = threading.RLock()
        self._locale_stack = [locale_id]
        self._bindings: dict[str, str] = {}
        self._loaded: dict[str, gettext.NullTranslations] = {}
        self._pending: list[str] = []

    # -- locale ---------------------------------------------------------

    def get_current_locale(self) -> str:
        with self._lock:
            return self._locale_stack[-1]

    def get_locale(self) -> str:
        """Locale the application should render in, after error-context filtering."""
        return filter_locale(self.get_current_locale())

    def switch_locale(self, locale_id: str) -> bool:
        with self._lock:
            self._locale_stack.append(locale_id)
        return True

    def restore_previous_locale(self) -> str | None:
        """Pop the last switch. Returns the restored locale, or None if nothing was switched."""
        with self._lock:
            if len(self._locale_stack) < 2:
                return None
            self._locale_stack.pop()
            return self._locale_stack[-1]

    # -- text domains ---------------------------------------------------

    def bind_text_domain(self, domain: str, localedir: str):
        with self._lock:
            self._bindings[domain] = localedir
            if domain not in self._loaded and domain not in self._pending:
                self._pending.append(domain)

    def _load_pending(self):
        current = self._locale_stack[-1]
        # Unload order, so reloads come back in the order domains were loaded.
        for domain in [d for d in self._pending if d in self._bindings]:
            path = gettext.find(domain, self._bindings[domain], languages=[current])
            if path and self._load_file(domain, path):
                logger.debug("Loaded text domain %s for %s just in time", domain, current)

    def _load_file(self, domain: str, path: str) -> bool:
        try:
            with open(path, "rb") as f:
                translations = gettext.GNUTranslations(f)
        except Exception as e:
            logger.debug("Could not load %s from %s: %s", domain, path, e)
            return False
        self._loaded[domain] = translations
        if domain in self._pending:
            self._pending.remove(domain)
        return True

    def list_loaded_text_domains(self) -> list[str]:
        with self._lock:
            self._load_pending()
            return list(self._loaded)

    def load_text_domain(self, domain: str, path: str) -> bool:
        if not os.path.isfile(path):
            return False
        with self._lock:
            return self._load_file(domain, path)

    def unload_text_domain(self, domain: str) -> bool:
        with self._lock:
            was_loaded = self._loaded.pop(domain, None) is not None
            if domain in self._bindings:
                if domain in self._pending:
                    self._pending.remove(domain)
                self._pending.append(domain)
            return was_loaded

    def is_text_domain_loaded(self, domain: str) -> bool:
        with self._lock:
            self._load_pending()
            return domain in self._loaded

    def gettext(self, message: str, domain: str = "messages") -> str:
        with self._lock:
            self._load_pending()
            translations = self._loaded.get(domain)
        translated = translations.gettext(message) if translations else message
        return filter_gettext(translated, message, domain)


class ProcessLocale:
    """C-runtime locale (LC_ALL), shared by the whole process."""

    def __init__(self, category: int = locale.LC_ALL):
        self._category = category

    def get(self) -> str | None:
        return locale.setlocale(self._category)

    def set(self, value: str) -> str:
        return locale.setlocale(self._category, value)


class LastErrorTracker:
    """Remembers the most recent reported error, for inspection at shutdown."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last: LastError | None = None

    def record(self, severity: int, message: str, file: str, line: int | None = None):
        with self._lock:
            self._last = LastError(int(severity), message, file, line)

    def get_last_fatal_error(self) -> LastError | None:
        with self._lock:
            return self._last

    def clear(self):
        with self._lock:
            self._last = None
