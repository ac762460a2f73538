"""Top-level package for zsh-migrator.

License: GPL-3.0
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("zsh-migrator")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
