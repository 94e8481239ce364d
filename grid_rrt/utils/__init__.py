"""Geometry, rendering and configuration helpers."""
