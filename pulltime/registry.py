from __future__ import annotations

DEFAULT_REGISTRY = "docker.io"


def classify(image: str) -> str:
    """Return the registry host an image reference points at.

    Only a prefix that looks like ``host[:port]`` (contains a dot or colon)
    before the first slash counts as a registry; everything else, including
    ``ubuntu`` and ``library/ubuntu``, resolves to Docker Hub.
    """
    head, sep, _ = image.partition("/")
    if not sep or not head:
        return DEFAULT_REGISTRY
    if "." not in head and ":" not in head:
        return DEFAULT_REGISTRY
    return head
