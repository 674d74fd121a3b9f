"""Locator codec.

A locator is a single line of space-separated ``key/value`` tokens identifying
a resource, e.g. ``ns/default pod/web-1 node/worker-0 uid/1234``. Messages use
the same token shape for annotations such as ``reason/Created``.

Nothing here raises on malformed input: a partial locator decodes to an empty
reference, and callers check ``is_empty``. Events from kubelet-only sources
routinely lack a UID, so this is the common case rather than an error.
"""

from __future__ import annotations

from typing import Any

from kub_timeline.models import ContainerReference, PodReference


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_pod(ref: PodReference) -> str:
    return ref.to_locator()


def encode_container(ref: ContainerReference) -> str:
    return ref.to_locator()


def locate_pod(pod: Any) -> str:
    """Locator for a pod object as returned by the Kubernetes API client."""
    meta = pod.metadata
    spec = pod.spec
    return "ns/{} pod/{} node/{} uid/{}".format(
        meta.namespace or "",
        meta.name or "",
        (spec.node_name if spec else "") or "",
        meta.uid or "",
    )


def locate_pod_container(pod: Any, container_name: str) -> str:
    return f"{locate_pod(pod)} container/{container_name}"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _split_tokens(text: str) -> dict[str, str]:
    # Split on the first "/" only; later duplicates overwrite earlier ones.
    parts: dict[str, str] = {}
    for token in text.split(" "):
        if "/" not in token:
            continue
        key, value = token.split("/", 1)
        parts[key] = value
    return parts


def locator_parts(locator: str) -> dict[str, str]:
    """Decode a locator into a key -> value mapping."""
    return _split_tokens(locator)


def namespace_from(parts: dict[str, str]) -> str:
    if "ns" in parts:
        return parts["ns"]
    return parts.get("namespace", "")


def namespace_from_locator(locator: str) -> str:
    return namespace_from(locator_parts(locator))


def pod_from(locator: str) -> PodReference:
    """Decode a pod reference, or the empty reference if any field is missing."""
    parts = locator_parts(locator)
    namespace = namespace_from(parts)
    name = parts.get("pod", "")
    uid = parts.get("uid", "")
    if not namespace or not name or not uid:
        return PodReference()
    return PodReference(namespace=namespace, name=name, uid=uid)


def container_from(locator: str) -> ContainerReference:
    pod = pod_from(locator)
    name = locator_parts(locator).get("container", "")
    if not name or not pod.uid:
        return ContainerReference()
    return ContainerReference(pod=pod, container_name=name)


def non_unique_pod_locator(locator: str) -> str:
    """Inexact locator from namespace and name only.

    Used to match events that were produced without a UID.
    """
    parts = locator_parts(locator)
    return f"ns/{namespace_from(parts)} pod/{parts.get('pod', '')}"


# ---------------------------------------------------------------------------
# Message annotations
# ---------------------------------------------------------------------------


def annotations_from_message(message: str) -> dict[str, str]:
    """Extract ``key/value`` tokens from free text; other words are skipped."""
    return _split_tokens(message)


def reason_from(message: str) -> str:
    return annotations_from_message(message).get("reason", "")


def phase_from(message: str) -> str:
    return annotations_from_message(message).get("phase", "")


def reasoned_message(reason: str, *messages: str) -> str:
    return f"reason/{reason} {'; '.join(messages)}"


def reasoned_messagef(reason: str, fmt: str, *args: Any) -> str:
    return reasoned_message(reason, fmt % args if args else fmt)
