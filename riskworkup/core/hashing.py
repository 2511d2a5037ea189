"""
core/hashing.py
---------------
Deterministic SHA-256 fingerprinting of evidence packs.

The fingerprint is used to detect whether the evidence behind a workup
check has changed.  It is computed from an explicit canonical form:

1. ``assessmentId``, ``funnelSlug``, ``answers``, ``hasUploadedDocuments``,
   ``hasWearableData``, always in that order.
2. ``answers`` rebuilt from its keys sorted ascending.
3. Optional flags defaulted to ``false``.
4. Serialised as compact JSON (no whitespace, UTF-8, non-ASCII kept as-is).

The canonical string is assembled from ordered ``(key, value)`` pairs, so the
result never depends on how the caller's mapping happens to be ordered.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import math
from typing import TYPE_CHECKING, Any, List, Tuple

if TYPE_CHECKING:
    from riskworkup.workup.evidence import EvidencePack


def _canonical_scalar(value: Any) -> str:
    """
    Serialise a single answer value to its canonical JSON token.

    Integral floats collapse to integers (``3.0`` → ``3``) so that a value
    read back from storage as a float hashes like the original integer.

    Raises:
        ValueError: For NaN / infinite numbers, which have no JSON form.
        TypeError:  For values that are not str, bool, int, float or None.
    """
    if value is None or isinstance(value, (bool, str)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Evidence values must be finite numbers, got {value!r}")
        if value.is_integer():
            return str(int(value))
        return repr(value)
    raise TypeError(
        f"Unsupported evidence value type {type(value).__name__!r}; "
        "expected number, string, or boolean."
    )


def _serialise_pairs(pairs: List[Tuple[str, str]]) -> str:
    """Join already-serialised ``(key, token)`` pairs into a JSON object string."""
    body = ",".join(f"{json.dumps(k, ensure_ascii=False)}:{token}" for k, token in pairs)
    return "{" + body + "}"


def canonicalize_evidence_pack(pack: "EvidencePack") -> str:
    """
    Build the canonical JSON string for an evidence pack.

    Args:
        pack: The :class:`~riskworkup.workup.evidence.EvidencePack` to serialise.

    Returns:
        Compact, key-ordered JSON string.
    """
    answer_pairs = [
        (key, _canonical_scalar(pack.answers[key])) for key in sorted(pack.answers)
    ]
    top_level = [
        ("assessmentId", json.dumps(pack.assessment_id, ensure_ascii=False)),
        ("funnelSlug", json.dumps(pack.funnel_slug, ensure_ascii=False)),
        ("answers", _serialise_pairs(answer_pairs)),
        ("hasUploadedDocuments", json.dumps(bool(pack.has_uploaded_documents))),
        ("hasWearableData", json.dumps(bool(pack.has_wearable_data))),
    ]
    return _serialise_pairs(top_level)


def generate_evidence_pack_hash(pack: "EvidencePack") -> str:
    """
    Compute a deterministic SHA-256 fingerprint of an evidence pack.

    Reordering answer keys never changes the digest, and omitting an optional
    flag is equivalent to passing ``False``.

    Args:
        pack: The evidence pack to fingerprint.

    Returns:
        A 64-character lowercase hexadecimal SHA-256 digest string.
    """
    canonical = canonicalize_evidence_pack(pack)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def verify_evidence_pack_hash(pack: "EvidencePack", expected_hash: str) -> bool:
    """
    Check whether *pack* still matches a previously stored fingerprint.

    Args:
        pack:          Evidence pack to re-hash.
        expected_hash: Digest produced earlier by :func:`generate_evidence_pack_hash`.

    Returns:
        ``True`` if the digests match.  Malformed input (wrong type, non-hex
        characters) never matches.
    """
    if not isinstance(expected_hash, str):
        return False
    return hmac.compare_digest(
        generate_evidence_pack_hash(pack).encode("ascii"),
        expected_hash.lower().encode("utf-8"),
    )
