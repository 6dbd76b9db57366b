"""Relationship orchestration: multi-step schema builds and integrity checks."""

from .orchestrator import RelationshipOrchestrator

__all__ = ["RelationshipOrchestrator"]
