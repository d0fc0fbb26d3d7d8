"""Core configuration, exceptions and logging for the SMM Gateway."""
