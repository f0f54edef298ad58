"""Core domain: models, errors, codecs and reshaping."""
