"""Quote-aware, accumulating list value for comma-delimited flags.

A flag such as ``--bootloader efi,variable-store=/tmp/store,create`` is
collected into a StringListValue.  Each flag occurrence is split on commas;
a comma inside a double-quoted span is not a separator, so
``--bootloader 'linux,cmdline="console=hvc0,115200"'`` keeps the kernel
command line in one element.

Splitting rules:
    - ``"`` toggles the "inside quotes" state; it is kept in the element
    - empty input yields no elements; otherwise every field is kept, so
      ``a,,b`` is ``["a", "", "b"]``
    - an element that is exactly one quoted span loses its two enclosing
      quotes; ``a="one"`` and ``"two"=b`` stay literal
    - an unterminated quote runs to end of input and is kept literally

Example:
    >>> value = StringListValue()
    >>> value.set('"one,two",three')
    >>> value.get_slice()
    ['one,two', 'three']
    >>> str(value)
    '"one,two",three'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

_QUOTE = '"'
_SEPARATOR = ","


def unquote(field: str) -> str:
    """Strip the enclosing quotes when the whole field is one quoted span."""
    if len(field) >= 2 and field[0] == _QUOTE and field[-1] == _QUOTE and _QUOTE not in field[1:-1]:  # noqa: PLR2004
        return field[1:-1]
    return field


def split_list(raw: str) -> list[str]:
    """Split one flag occurrence into its elements.

    Args:
        raw: Raw flag value, e.g. ``one,"two,three"``

    Returns:
        Ordered list of elements (empty for empty input)
    """
    if not raw:
        return []

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in raw:
        if char == _SEPARATOR and not in_quotes:
            fields.append("".join(current))
            current = []
            continue
        if char == _QUOTE:
            in_quotes = not in_quotes
        current.append(char)

    # Unterminated quote: the remainder is one literal element
    fields.append("".join(current))

    return [unquote(field) for field in fields]


def join_list(values: Iterable[str]) -> str:
    """Render elements back into a single flag value.

    Elements containing a comma are quoted so split_list() yields them back
    unchanged.
    """
    return _SEPARATOR.join(f"{_QUOTE}{value}{_QUOTE}" if _SEPARATOR in value else value for value in values)


class StringListValue:
    """Ordered string list bound to one repeatable command-line flag.

    The first set() replaces the current contents, so a default seeded with
    replace() only survives when the flag is never given; later set() calls
    append.  replace() discards everything and installs values verbatim
    without counting as a set().
    """

    def __init__(self, values: Iterable[str] | None = None) -> None:
        self._values: list[str] = list(values) if values is not None else []
        self._changed = False

    @classmethod
    def from_occurrences(cls, raws: Iterable[str], default: Iterable[str] | None = None) -> StringListValue:
        """Build a value from every occurrence of one flag, in command-line order."""
        value = cls()
        if default is not None:
            value.replace(default)
        for raw in raws:
            value.set(raw)
        return value

    @property
    def changed(self) -> bool:
        """Whether set() has run at least once."""
        return self._changed

    def set(self, raw: str) -> None:
        values = split_list(raw)
        if self._changed:
            self._values.extend(values)
        else:
            self._values = values
        self._changed = True

    def append(self, value: str) -> None:
        self._values.append(value)

    def replace(self, values: Iterable[str]) -> None:
        self._values = list(values)

    def get_slice(self) -> list[str]:
        return list(self._values)

    def type_name(self) -> str:
        return "stringSlice"

    def render(self) -> str:
        return join_list(self._values)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"StringListValue({self._values!r})"

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StringListValue):
            return self._values == other._values
        if isinstance(other, list):
            return self._values == other
        return NotImplemented
