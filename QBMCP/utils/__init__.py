"""Shared utilities for QBMCP."""
