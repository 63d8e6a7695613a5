"""YAML configuration loading and validation."""
