"""Core infrastructure: configuration, logging, dataset loading and
canonical serialization."""
