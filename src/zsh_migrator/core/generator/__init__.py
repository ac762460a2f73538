"""Generation and atomic commit of the shell rc and prompt config."""

from zsh_migrator.core.generator.commit import (
    SyntaxChecker,
    ZshSyntaxChecker,
    commit_shell_document,
    commit_structured_document,
)
from zsh_migrator.core.generator.fragments import (
    MODULE_FRAGMENTS,
    ModuleFragment,
    StarshipModule,
)
from zsh_migrator.core.generator.generator import ConfigGenerator
from zsh_migrator.core.generator.structured_document import (
    TomlDocument,
    TomlTable,
)
from zsh_migrator.core.generator.templates import RESERVED_FUNCTION_NAMES

__all__ = [
    "MODULE_FRAGMENTS",
    "RESERVED_FUNCTION_NAMES",
    "ConfigGenerator",
    "ModuleFragment",
    "StarshipModule",
    "SyntaxChecker",
    "TomlDocument",
    "TomlTable",
    "ZshSyntaxChecker",
    "commit_shell_document",
    "commit_structured_document",
]
