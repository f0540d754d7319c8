"""Compatibility rules, one module per pipeline stage."""
