"""Content fingerprints for tracker keys.

fingerprint = sha256(text). Equal input gives an equal fingerprint; this is a
cache key, not a security boundary.
"""

import hashlib


def fingerprint(text: str) -> str:
    """Compute the content fingerprint of a raw input.

    Args:
        text: Raw input text

    Returns:
        SHA256 hash as hex string
    """
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()
