"""Option schema and license validation."""
