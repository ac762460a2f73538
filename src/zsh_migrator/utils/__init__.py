"""Small shared helpers for zsh-migrator."""
