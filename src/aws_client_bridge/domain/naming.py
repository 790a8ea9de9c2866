"""Name normalization shared by the catalog, the builder and the marshaller."""

from __future__ import annotations

import keyword
import re

# Only a lowercase-to-uppercase transition starts a new word, so
# "getS3AccountOwner" becomes "get-s3account-owner".
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")
_ACCESSOR_PREFIX = re.compile(r"^(get|set|is)(?:_|(?=[A-Z0-9]))")
_KEY_SEPARATORS = re.compile(r"[-_?\s]")


class FieldKey(str):
    """A field-name token inside a flat key/value argument list.

    Plain strings passed positionally are values; keyword arguments and
    mapping keys are turned into ``FieldKey`` tokens by the interned functions.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"FieldKey({str.__repr__(self)})"


def hyphenate(name: str) -> str:
    """Rewrite a camelCase or snake_case name as lowercase hyphenated words."""
    words: list[str] = []
    for chunk in re.split(r"[_\-]+", name):
        words.extend(_CAMEL_BOUNDARY.split(chunk))
    return "-".join(word.lower() for word in words if word)


def to_identifier(name: str) -> str:
    """Python attribute name for a normalized operation name."""
    ident = name.replace("?", "").replace("-", "_")
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


def match_key(name: str) -> str:
    """Separator- and case-insensitive key used to pair input keys with fields."""
    return _KEY_SEPARATORS.sub("", str(name)).lower()


def strip_accessor_prefix(name: str) -> tuple[str | None, str]:
    """Split ``get_``/``set``/``is`` style prefixes off an accessor name.

    Returns ``(prefix, rest)``; ``prefix`` is ``None`` for plain names.
    """
    match = _ACCESSOR_PREFIX.match(name)
    if match is None or match.end() == len(name):
        return None, name
    return match.group(1), name[match.end():]
