"""Geometry and math helpers."""
