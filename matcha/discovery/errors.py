from __future__ import annotations


class DiscoveryError(Exception):
    """Base error for discovery requests; ``message`` is safe to show callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ViewerNotFound(DiscoveryError):
    status_code = 404

    def __init__(self, viewer_id: int) -> None:
        super().__init__("Viewer not found")
        self.viewer_id = viewer_id


class ComputationFailure(DiscoveryError):
    status_code = 500
