"""Adapters for the external services the pipeline depends on."""
