"""Core configuration, security primitives and error taxonomy."""
