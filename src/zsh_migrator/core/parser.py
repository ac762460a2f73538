"""Extraction of user aliases, exports and functions from a zsh rc file.

The scan is a single forward pass over the lines with two states:

    Idle        function starts detected
    InFunction  lines are buffered and braces counted until depth is zero

Alias and export lines are collected in both states. A declaration line
without a brace is a one-line function unless the next non-blank line
opens the body with "{".

Malformed input never raises; an unterminated function is emitted as
buffered and reported as a ParseWarning.
"""

import re
from enum import Enum

from zsh_migrator.core.generator.templates import RESERVED_FUNCTION_NAMES
from zsh_migrator.domain.types import (
    AliasEntry,
    ExportEntry,
    FunctionDefinition,
    ParseResult,
    ParseWarning,
)
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

_NAME = r"[A-Za-z_][A-Za-z0-9_.:-]*"
# function NAME(  |  function NAME {  |  function NAME
_KEYWORD_START_RE = re.compile(rf"^function\s+(?P<name>{_NAME})\s*(?:\(|\{{|$)")
# NAME() {  |  NAME ()  (brace may be on the next line)
_PAREN_START_RE = re.compile(rf"^(?P<name>{_NAME})\s*\(\s*\)")
_ALIAS_RE = re.compile(r"^alias\s+")
_EXPORT_RE = re.compile(r"^export\s+")


class _ScanState(Enum):
    IDLE = "idle"
    IN_FUNCTION = "in_function"


def match_function_start(stripped: str) -> str | None:
    """Return the function name if the line opens a function definition.

    Args:
        stripped: Source line with indentation removed

    Returns:
        Function name, or None when the line is not a declaration

    """
    match = _KEYWORD_START_RE.match(stripped) or _PAREN_START_RE.match(
        stripped
    )
    return match.group("name") if match else None


def _next_code_line(lines: list[str], index: int) -> str:
    """First non-blank line after ``lines[index]``, stripped."""
    for line in lines[index + 1 :]:
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def _declared_name(stripped: str, keyword: str) -> str:
    """Name declared by an ``alias``/``export`` line.

    Option tokens such as ``-g`` are skipped and the name is cut at ``=``.
    """
    for token in stripped[len(keyword) :].split():
        if token.startswith("-"):
            continue
        return token.split("=", 1)[0]
    return ""


class ShellConfigParser:
    """Parser for the narrow alias/export/function grammar of a .zshrc."""

    def __init__(
        self, reserved_names: frozenset[str] = RESERVED_FUNCTION_NAMES
    ) -> None:
        """Initialize parser.

        Args:
            reserved_names: Function names supplied by the generated
                template; user functions with these names are dropped

        """
        self.reserved_names = reserved_names

    def parse(self, raw_text: str) -> ParseResult:
        """Extract aliases, exports and functions from raw shell text.

        Alias and export lines are collected wherever they appear, including
        inside function bodies, where they also stay part of the body.

        Args:
            raw_text: Full contents of the user's rc file

        Returns:
            ParseResult with entries in first-seen order

        """
        aliases: list[AliasEntry] = []
        exports: list[ExportEntry] = []
        functions: list[FunctionDefinition] = []
        warnings: list[ParseWarning] = []
        seen_lines: set[str] = set()
        seen_functions: set[str] = set()

        state = _ScanState.IDLE
        buffer: list[str] = []
        current_name = ""
        start_line = 0
        brace_depth = 0
        opened = False

        lines = raw_text.splitlines()
        for index, line in enumerate(lines):
            line_no = index + 1
            stripped = line.strip()

            if stripped and not stripped.startswith("#"):
                self._collect_entry(stripped, aliases, exports, seen_lines)

            if state is _ScanState.IN_FUNCTION:
                buffer.append(line)
                brace_depth += line.count("{") - line.count("}")
                opened = opened or "{" in line
                if opened and brace_depth <= 0:
                    self._emit_function(
                        FunctionDefinition(
                            name=current_name,
                            body="\n".join(buffer),
                            start_line=start_line,
                            end_line=line_no,
                        ),
                        functions,
                        seen_functions,
                    )
                    state = _ScanState.IDLE
                    buffer = []
                continue

            if not stripped or stripped.startswith("#"):
                continue

            name = match_function_start(stripped)
            if name is None:
                continue

            opens = line.count("{")
            closes = line.count("}")
            next_line = _next_code_line(lines, index)
            body_follows = opens > 0 or next_line.startswith("{")
            if not body_follows or (opens and closes >= opens):
                # foo() { ...; }  |  foo() echo hi
                self._emit_function(
                    FunctionDefinition(
                        name=name,
                        body=line,
                        start_line=line_no,
                        end_line=line_no,
                    ),
                    functions,
                    seen_functions,
                )
                continue

            state = _ScanState.IN_FUNCTION
            buffer = [line]
            current_name = name
            start_line = line_no
            brace_depth = opens - closes
            opened = opens > 0

        if state is _ScanState.IN_FUNCTION:
            message = (
                f"unterminated function '{current_name}' at EOF "
                f"(brace depth {brace_depth}); emitted as buffered"
            )
            logger.warning("Line %d: %s", start_line, message)
            warnings.append(ParseWarning(start_line, current_name, message))
            self._emit_function(
                FunctionDefinition(
                    name=current_name,
                    body="\n".join(buffer),
                    start_line=start_line,
                    end_line=len(lines),
                ),
                functions,
                seen_functions,
            )

        logger.debug(
            "Parsed %d aliases, %d exports, %d functions",
            len(aliases),
            len(exports),
            len(functions),
        )
        return ParseResult(
            aliases=tuple(aliases),
            exports=tuple(exports),
            functions=tuple(functions),
            warnings=tuple(warnings),
        )

    @staticmethod
    def _collect_entry(
        stripped: str,
        aliases: list[AliasEntry],
        exports: list[ExportEntry],
        seen_lines: set[str],
    ) -> None:
        if stripped in seen_lines:
            return
        if _ALIAS_RE.match(stripped):
            seen_lines.add(stripped)
            aliases.append(
                AliasEntry(_declared_name(stripped, "alias"), stripped)
            )
        elif _EXPORT_RE.match(stripped):
            seen_lines.add(stripped)
            exports.append(
                ExportEntry(_declared_name(stripped, "export"), stripped)
            )

    def _emit_function(
        self,
        definition: FunctionDefinition,
        functions: list[FunctionDefinition],
        seen: set[str],
    ) -> None:
        """Keep the first definition per name and drop reserved names."""
        if definition.name in seen:
            logger.debug(
                "Dropping duplicate function %s at line %d",
                definition.name,
                definition.start_line,
            )
            return
        seen.add(definition.name)

        if definition.name in self.reserved_names:
            logger.debug(
                "Dropping user function %s: provided by base template",
                definition.name,
            )
            return
        functions.append(definition)
