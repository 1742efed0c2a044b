"""Colour math, theme derivation, data models and errors. No I/O."""
