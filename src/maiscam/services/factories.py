"""Factory helpers that instantiate dashboard collaborators from configuration.

These helpers centralize how the environment-specific settings declared in
:mod:`maiscam.settings` select a detection store backend, so routers and CLIs
never construct store clients themselves.
"""

from __future__ import annotations

from maiscam.settings import Settings, get_settings
from maiscam.store.detection_source import (
    DetectionSource,
    DetectionSourceNotConfigured,
    FirestoreDetectionSource,
    LocalDetectionSource,
)


def build_detection_source(settings: Settings | None = None) -> DetectionSource:
    """Return a detection source that matches the configured backend.

    Args:
        settings: Optional settings override; defaults to :func:`get_settings`.

    Returns:
        A :class:`DetectionSource` implementation.

    Raises:
        DetectionSourceNotConfigured: If the backend is missing required settings.
    """

    resolved = settings or get_settings()
    store = resolved.store
    if store.backend == "local":
        return LocalDetectionSource(store.local_path)

    if store.backend == "firestore":
        if not store.firestore_project:
            raise DetectionSourceNotConfigured(
                "Firestore backend selected but no project configured; set MAISCAM_STORE__FIRESTORE_PROJECT"
            )
        return FirestoreDetectionSource(project=store.firestore_project, collection=store.firestore_collection)

    raise DetectionSourceNotConfigured(f"Unsupported detection store backend '{store.backend}'")


__all__ = ["build_detection_source"]
