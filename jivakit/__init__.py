"""Builders for Kubernetes objects backing Jiva volumes, rollout checks and a Jiva controller client."""

__version__ = "0.1.0"

__all__ = [
    "container",
    "deployment",
    "errors",
    "jiva_client",
    "podtemplatespec",
    "pvc",
    "rollout",
    "service",
]