"""Core migration engine: parser, resolver, generator and backups."""
