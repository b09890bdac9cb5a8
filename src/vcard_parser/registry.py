from __future__ import annotations

from types import MappingProxyType

# ── Structured elements ────────────────────────────────────────────────────────
#
# Fixed, ordered part names. A structured value always carries exactly these
# parts; missing trailing parts are None and extra source parts are dropped.

STRUCTURED_ELEMENTS = MappingProxyType({
    "n": ("LastName", "FirstName", "AdditionalNames", "Prefixes", "Suffixes"),
    "adr": (
        "POBox", "ExtendedAddress", "StreetAddress", "Locality",
        "Region", "PostalCode", "Country",
    ),
    "geo": ("Latitude", "Longitude"),
    "org": ("Name", "Unit1", "Unit2"),
})

MULTI_VALUE_ELEMENTS = frozenset({"nickname", "categories"})

# Bare (TYPE-less) parameter tokens accepted as types, per element.
ELEMENT_TYPES = MappingProxyType({
    "email": frozenset({"internet", "x400", "pref", "other"}),
    "adr": frozenset({"dom", "intl", "postal", "parcel", "home", "work", "pref"}),
    "label": frozenset({"dom", "intl", "postal", "parcel", "home", "work", "pref"}),
    "tel": frozenset({
        "home", "msg", "work", "pref", "other", "fax", "cell", "video",
        "pager", "bbs", "modem", "car", "isdn", "pcs",
    }),
    "impp": frozenset({"personal", "business", "home", "work", "mobile", "pref"}),
})

FILE_ELEMENTS = frozenset({"photo", "logo", "sound"})

BASE64_ENCODINGS = frozenset({"b", "base64"})
KNOWN_ENCODINGS = frozenset({"quoted-printable", "b", "base64"})
UTF8_CHARSETS = frozenset({"utf-8", "utf8"})
