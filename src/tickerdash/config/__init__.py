"""Configuration: constants, settings schema, YAML loader and logging setup."""
