"""Exceptions raised by the stores and the revision service."""


class RevisionHubError(Exception):
    """Base class for every error surfaced to the UI."""


class StoreError(RevisionHubError):
    """A record- or blob-store call failed (network, backend, missing row)."""


class MaterialNotFoundError(StoreError):
    def __init__(self, material_id):
        super().__init__(f"Material {material_id} not found")
        self.material_id = material_id


class ConcurrentUpdateError(StoreError):
    """The row changed between read and write; the update was not applied."""

    def __init__(self, material_id, expected_revision_count):
        super().__init__(
            f"Material {material_id} was modified concurrently "
            f"(expected revision_count={expected_revision_count})"
        )
        self.material_id = material_id
        self.expected_revision_count = expected_revision_count


class ValidationError(RevisionHubError, ValueError):
    """User input rejected before any store call."""
