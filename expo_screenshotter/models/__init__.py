"""Configuration data contracts."""
