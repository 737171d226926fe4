"""INI-backed application configuration."""
