"""Configuration: YAML loader, JSON schema and the column alias table."""
