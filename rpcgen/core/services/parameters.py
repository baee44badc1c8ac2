"""
Parameter parsing — turn the plugin parameter string into options.

Format: ``key1=value1,key2=value2,...``. Parsing is fail-fast: the
first unknown key or bad boolean raises, naming the entry verbatim.
"""

from __future__ import annotations

import logging
from typing import Any

from rpcgen.core.models.errors import InvalidParameterValue, UnknownParameter
from rpcgen.core.models.options import GeneratorOptions

logger = logging.getLogger(__name__)

_STRING_KEYS = frozenset({
    "services_namespace",
    "grpc_search_path",
    "gmock_search_path",
    "message_header_extension",
})

_BOOL_KEYS = frozenset({
    "use_system_headers",
    "generate_mock_code",
    "include_import_headers",
})

_LIST_KEYS = frozenset({
    "additional_header_includes",
})

KNOWN_KEYS = _STRING_KEYS | _BOOL_KEYS | _LIST_KEYS


def _split(text: str, sep: str) -> list[str]:
    """Split on ``sep`` and drop empty pieces."""
    return [piece for piece in text.split(sep) if piece]


def parse_parameters(raw: str) -> GeneratorOptions:
    """Parse a parameter string into ``GeneratorOptions``.

    Args:
        raw: The opaque parameter string from the host.

    Returns:
        Parsed options; defaults for an empty string.

    Raises:
        UnknownParameter: A key outside the recognized set.
        InvalidParameterValue: A boolean key with a value other than
            ``true`` or ``false``.
    """
    values: dict[str, Any] = {}

    for entry in _split(raw, ","):
        key, _, value = entry.partition("=")

        if key in _STRING_KEYS:
            values[key] = value
        elif key in _BOOL_KEYS:
            if value == "true":
                values[key] = True
            elif value == "false":
                values[key] = False
            else:
                raise InvalidParameterValue(entry)
        elif key in _LIST_KEYS:
            values[key] = tuple(_split(value, ":"))
        else:
            raise UnknownParameter(entry)

    if values:
        logger.debug("Parsed generator parameters: %s", sorted(values))
    return GeneratorOptions(**values)


def format_parameters(options: GeneratorOptions) -> str:
    """Render options back into a parameter string (non-default keys only)."""
    defaults = GeneratorOptions()
    entries: list[str] = []
    for key in sorted(KNOWN_KEYS):
        value = getattr(options, key)
        if value == getattr(defaults, key):
            continue
        if isinstance(value, bool):
            entries.append(f"{key}={'true' if value else 'false'}")
        elif isinstance(value, tuple):
            entries.append(f"{key}={':'.join(value)}")
        else:
            entries.append(f"{key}={value}")
    return ",".join(entries)
