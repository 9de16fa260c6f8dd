"""Bundled data tables for the extraction engine."""
