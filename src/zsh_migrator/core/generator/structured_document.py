"""Typed builder for the generated starship.toml.

Only the subset of TOML the prompt config needs is produced: top-level
keys, tables and arrays of tables holding strings, booleans, integers and
flat arrays. A key set twice inside one table keeps its first value and the
repeat is recorded as a DuplicateKeyConflict, so no rendered table ever
carries the same key twice.
"""

import re

import orjson
import toml

from zsh_migrator.domain.types import DuplicateKeyConflict
from zsh_migrator.exceptions import ValidationError
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

TomlValue = str | bool | int | list[str] | list[int]

_BARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def encode_key(key: str) -> str:
    """Quote a key unless it is a valid bare key."""
    if _BARE_KEY_RE.match(key):
        return key
    return orjson.dumps(key).decode()


def encode_value(value: TomlValue) -> str:
    """Encode a value as TOML.

    Strings use JSON escaping, which is a subset of TOML basic strings.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return orjson.dumps(value).decode()
    if isinstance(value, list):
        return "[" + ", ".join(encode_value(item) for item in value) + "]"
    msg = f"Unsupported TOML value type: {type(value).__name__}"
    raise TypeError(msg)


class TomlTable:
    """Ordered key/value table that never holds a key twice."""

    def __init__(self, name: str, *, array: bool = False) -> None:
        """Initialize table.

        Args:
            name: Dotted table name, e.g. "battery" or "battery.display"
            array: Render as an array-of-tables entry (``[[name]]``)

        """
        self.name = name
        self.array = array
        self.entries: dict[str, TomlValue] = {}
        self.conflicts: list[DuplicateKeyConflict] = []

    def set(self, key: str, value: TomlValue) -> None:
        """Set ``key`` unless it is already present."""
        if key in self.entries:
            conflict = DuplicateKeyConflict(
                table=self.name,
                key=key,
                kept=self.entries[key],
                dropped=value,
            )
            self.conflicts.append(conflict)
            logger.warning(
                "Duplicate key '%s' in [%s] suppressed (kept %r, dropped %r)",
                key,
                self.name,
                conflict.kept,
                conflict.dropped,
            )
            return
        self.entries[key] = value

    def update(self, other: "TomlTable") -> None:
        """Merge another table's entries, first value wins per key."""
        for key, value in other.entries.items():
            self.set(key, value)

    def header(self) -> str:
        """Table header line."""
        if self.array:
            return f"[[{self.name}]]"
        return f"[{self.name}]"

    def render_entries(self) -> str:
        """Render ``key = value`` lines."""
        return "\n".join(
            f"{encode_key(key)} = {encode_value(value)}"
            for key, value in self.entries.items()
        )

    def render(self) -> str:
        """Render header plus entries."""
        return f"{self.header()}\n{self.render_entries()}"


class TomlDocument:
    """Top-level keys followed by tables, in insertion order.

    Plain tables with the same name are merged, so two fragments targeting
    one table still render a single header. Array-of-tables entries are
    always appended.
    """

    def __init__(self, comment: str = "") -> None:
        """Initialize document with an optional leading comment."""
        self.comment = comment
        self.root = TomlTable("")
        self.tables: list[TomlTable] = []

    def set(self, key: str, value: TomlValue) -> None:
        """Set a top-level key."""
        self.root.set(key, value)

    def add_table(self, table: TomlTable) -> None:
        """Add a table, merging into an existing one of the same name."""
        if not table.array:
            for existing in self.tables:
                if existing.name == table.name and not existing.array:
                    existing.update(table)
                    return
        self.tables.append(table)

    def get_table(self, name: str) -> TomlTable | None:
        """Return the plain table called ``name``, if present."""
        for table in self.tables:
            if table.name == name and not table.array:
                return table
        return None

    @property
    def conflicts(self) -> list[DuplicateKeyConflict]:
        """All suppressed duplicate keys across the document."""
        found = list(self.root.conflicts)
        for table in self.tables:
            found.extend(table.conflicts)
        return found

    def render(self) -> str:
        """Render the document text."""
        parts: list[str] = []
        if self.comment:
            parts.append(
                "\n".join(f"# {line}" for line in self.comment.splitlines())
            )
        if self.root.entries:
            parts.append(self.root.render_entries())
        parts.extend(table.render() for table in self.tables if table.entries)
        return "\n\n".join(parts) + "\n"

    def validate(self, unaffected: str) -> str:
        """Check document invariants and return the rendered text.

        Invariants:
            - no string value is empty
            - the top-level ``format`` references at least one module
            - no key appears twice in a table of the rendered text

        Args:
            unaffected: Note naming the live file left untouched on failure

        Returns:
            Rendered text

        Raises:
            ValidationError: If an invariant does not hold

        """
        for table in [self.root, *self.tables]:
            for key, value in table.entries.items():
                if value == "" or value == []:
                    where = f"[{table.name}]" if table.name else "top level"
                    msg = f"empty value for '{key}' at {where}"
                    raise ValidationError(msg, unaffected=unaffected)

        fmt = self.root.entries.get("format")
        if not isinstance(fmt, str) or "$" not in fmt:
            msg = "top-level format must reference at least one module"
            raise ValidationError(msg, unaffected=unaffected)

        rendered = self.render()
        try:
            toml.loads(rendered)
        except toml.TomlDecodeError as e:
            msg = f"rendered prompt config does not parse: {e}"
            raise ValidationError(msg, unaffected=unaffected) from e
        return rendered
