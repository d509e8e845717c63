"""HTTP surface of the Tuiter service."""
