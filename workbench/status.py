"""Marker status transitions driven by text edits and the proof toggle."""
from __future__ import annotations

from workbench.models import Marker, MarkerStatus


def _has_text(text: str) -> bool:
    return bool(text and text.strip())


def set_translation_text(marker: Marker, text: str) -> MarkerStatus:
    """Store the translation; empty <-> translated follows the text, proofed is sticky."""
    marker.translation_text = text
    if marker.status is not MarkerStatus.PROOFED:
        marker.status = MarkerStatus.TRANSLATED if _has_text(text) else MarkerStatus.EMPTY
    return marker.status


def set_proof_text(marker: Marker, text: str) -> MarkerStatus:
    marker.proof_text = text
    return marker.status


def can_mark_proofed(marker: Marker) -> bool:
    return marker.status is not MarkerStatus.PROOFED and (
        _has_text(marker.proof_text) or _has_text(marker.translation_text)
    )


def toggle_proof(marker: Marker) -> bool:
    """
    Flip a marker in or out of the proofed state.

    Marking proofed freezes the proof text (or the translation when no proof text
    was entered) and mirrors it into the translation. Un-proofing clears the proof
    text and falls back to translated/empty depending on the translation.
    Returns False when the marker cannot be proofed yet.
    """
    if marker.status is MarkerStatus.PROOFED:
        marker.proof_text = ""
        marker.status = MarkerStatus.TRANSLATED if _has_text(marker.translation_text) else MarkerStatus.EMPTY
        return True

    if not can_mark_proofed(marker):
        return False
    accepted = marker.proof_text if _has_text(marker.proof_text) else marker.translation_text
    marker.proof_text = accepted
    marker.translation_text = accepted
    marker.status = MarkerStatus.PROOFED
    return True
