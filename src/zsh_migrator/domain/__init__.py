"""Domain types and feature definitions for zsh-migrator."""
