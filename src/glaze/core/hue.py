"""
Workspace hue derivation.

The hash is a compatibility contract: changing it re-tints every existing
workspace. Bump HUE_HASH_VERSION if it ever has to change.
"""

from __future__ import annotations

HUE_HASH_VERSION = 1

_DJB2_INIT = 5381
_MASK_32 = 0xFFFFFFFF


def hash_string(text: str) -> int:
    """djb2-xor over the UTF-8 bytes of ``text``, as an unsigned 32-bit int."""
    h = _DJB2_INIT
    for byte in text.encode("utf-8"):
        h = (((h << 5) + h) ^ byte) & _MASK_32
    return h


def compute_base_hue(identifier: str, seed: int = 0) -> int:
    """Map a workspace identifier and seed to a hue in [0, 360).

    A zero seed leaves the identifier hash untouched so seedless installs
    keep their hue.
    """
    h = hash_string(identifier)
    if seed:
        h ^= hash_string(str(seed))
    return h % 360


def normalize_hue(hue: float) -> float:
    return ((hue % 360) + 360) % 360


def apply_hue_offset(hue: float, offset: float) -> float:
    """Rotate a hue by ``offset`` degrees, normalized to [0, 360)."""
    return normalize_hue(hue + offset)
