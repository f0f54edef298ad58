"""Adapters that feed records into the pipeline."""
