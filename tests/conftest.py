import locale
import os
import struct
from array import array
from datetime import datetime

import pytest

from daily_error_log.context import CaptureContext, set_current_context

MO_HEADER = "Content-Type: text/plain; charset=UTF-8\n"


def write_mo(path, catalog: dict[str, str]):
    """Write a GNU .mo catalog (same layout msgfmt produces)."""
    entries = {"": MO_HEADER, **catalog}
    keys = sorted(entries)
    ids = b""
    strs = b""
    offsets = []
    for key in keys:
        kb = key.encode("utf-8")
        vb = entries[key].encode("utf-8")
        offsets.append((len(ids), len(kb), len(strs), len(vb)))
        ids += kb + b"\0"
        strs += vb + b"\0"

    keystart = 7 * 4 + 16 * len(keys)
    valuestart = keystart + len(ids)
    koffsets = []
    voffsets = []
    for o1, l1, o2, l2 in offsets:
        koffsets += [l1, o1 + keystart]
        voffsets += [l2, o2 + valuestart]

    output = struct.pack(
        "Iiiiiii",
        0x950412DE,
        0,
        len(keys),
        7 * 4,
        7 * 4 + len(keys) * 8,
        0,
        0,
    )
    output += array("i", koffsets).tobytes()
    output += array("i", voffsets).tobytes()
    output += ids + strs

    os.makedirs(os.path.dirname(str(path)), exist_ok=True)
    with open(path, "wb") as f:
        f.write(output)


class FakeProcessLocale:
    """Stand-in for the C-runtime locale that only accepts some names."""

    def __init__(self, value: str = "de_DE.UTF-8", accepted=("en_US.UTF-8",)):
        self.value = value
        self.accepted = set(accepted) | {value}
        self.attempts = []

    def get(self):
        return self.value

    def set(self, value):
        self.attempts.append(value)
        if value not in self.accepted:
            raise locale.Error("unsupported locale setting")
        self.value = value
        return value


@pytest.fixture
def process_locale():
    return FakeProcessLocale()


@pytest.fixture
def localedir(tmp_path):
    """gettext tree with French catalogs for two domains."""
    root = tmp_path / "locale"
    write_mo(root / "fr_FR" / "LC_MESSAGES" / "shop.mo", {"Cart": "Panier"})
    write_mo(root / "fr_FR" / "LC_MESSAGES" / "blog.mo", {"Post": "Article"})
    return str(root)


@pytest.fixture
def languages_dir(tmp_path):
    root = tmp_path / "languages"
    write_mo(root / "shop-en_US.mo", {"Cart": "Basket"})
    return str(root)


@pytest.fixture
def fixed_time():
    return lambda: datetime(2025, 1, 15, 12, 30, 45)


@pytest.fixture(autouse=True)
def fresh_capture_context():
    ctx = CaptureContext()
    set_current_context(ctx)
    yield ctx
    set_current_context(CaptureContext())
