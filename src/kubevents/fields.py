"""Field selectors over the involved object of an event.

A field selector is a set of equality clauses over server-known fields,
serialized as ``key1=value1,key2=value2``. It is passed as the
``field_selector`` argument of list and watch calls.
"""

import logging
from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)

INVOLVED_OBJECT_NAME = "involvedObject.name"
INVOLVED_OBJECT_NAMESPACE = "involvedObject.namespace"
INVOLVED_OBJECT_KIND = "involvedObject.kind"
INVOLVED_OBJECT_UID = "involvedObject.uid"

# Field label for the involved object name, per API version.
_INVOLVED_OBJECT_NAME_FIELD_LABELS: dict[str, str] = {
    "v1": INVOLVED_OBJECT_NAME,
    "events.k8s.io/v1beta1": INVOLVED_OBJECT_NAME,
}

_ESCAPES = {"\\": "\\\\", ",": "\\,", "=": "\\="}


def involved_object_name_field_label(version: str) -> str:
    """Return the field label for the involved object name in the given API version.

    Args:
        version: The API version used to talk to the server (e.g. ``v1``).

    Returns:
        The field path to use as the selector key.
    """
    return _INVOLVED_OBJECT_NAME_FIELD_LABELS.get(version, INVOLVED_OBJECT_NAME)


def escape_value(value: str) -> str:
    """Escape a value so it can be embedded in a selector string."""
    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape_value(value: str) -> str:
    """Reverse :func:`escape_value`.

    Raises:
        ValueError: If the value holds an invalid or dangling escape sequence.
    """
    result = []
    chars = iter(value)
    for char in chars:
        if char != "\\":
            result.append(char)
            continue
        escaped = next(chars, None)
        if escaped is None or escaped not in _ESCAPES:
            raise ValueError(f"Invalid escape sequence in field selector value: {value!r}")
        result.append(escaped)
    return "".join(result)


def _split_unescaped(text: str, separator: str, maxsplit: int = -1) -> list[str]:
    parts = []
    current = []
    escaped = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            current.append(char)
            escaped = True
        elif char == separator and maxsplit != 0:
            parts.append("".join(current))
            current = []
            maxsplit -= 1
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


class FieldSelector(Mapping[str, str]):
    """Ordered set of ``field=value`` equality clauses.

    Clauses keep their insertion order, so the serialized form is stable.
    An empty selector serializes to the empty string and matches everything.
    """

    def __init__(self, clauses: Mapping[str, str] | None = None):
        self._clauses: dict[str, str] = dict(clauses or {})

    def __getitem__(self, key: str) -> str:
        return self._clauses[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._clauses)

    def __len__(self) -> int:
        return len(self._clauses)

    def __str__(self) -> str:
        return ",".join(f"{key}={escape_value(value)}" for key, value in self._clauses.items())

    def __repr__(self) -> str:
        return f"FieldSelector({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldSelector):
            return list(self._clauses.items()) == list(other._clauses.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._clauses.items()))

    @classmethod
    def parse(cls, text: str) -> "FieldSelector":
        """Parse a selector string produced by ``str(selector)``.

        Args:
            text: A comma-separated list of ``field=value`` clauses.

        Returns:
            The parsed selector.

        Raises:
            ValueError: If a clause has no ``=`` or an empty field name.
        """
        clauses: dict[str, str] = {}
        if not text.strip():
            return cls()
        for clause in _split_unescaped(text, ","):
            parts = _split_unescaped(clause, "=", maxsplit=1)
            if len(parts) != 2 or not parts[0].strip():
                raise ValueError(f"Invalid field selector clause: {clause!r}")
            key, value = parts
            clauses[key.strip()] = unescape_value(value)
        logger.debug(f"Parsed field selector {text!r} into {len(clauses)} clauses")
        return cls(clauses)
