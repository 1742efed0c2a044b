"""Serialization of extraction results."""
