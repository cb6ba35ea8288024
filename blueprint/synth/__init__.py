"""Synthesis of a finished graph into an artifact."""

from .artifact import Artifact
from .synthesizer import Synthesizer, make_logical_id, synthesize

__all__ = ["Artifact", "Synthesizer", "make_logical_id", "synthesize"]
