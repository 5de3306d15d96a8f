"""
Error taxonomy shared by the matching core, storage and identity boundaries.

    WorkbridgeError
    ├── InvalidInput            → 422  (entity violates an invariant)
    ├── NotFound                → 404  (referenced id absent where it must exist)
    ├── Forbidden               → 403  (caller does not own the resource)
    └── CollaboratorUnavailable → 503  (storage / identity / enrichment failed)

Expected lookups (get_job, get_worker_profile, ...) return None rather than
raising NotFound.
"""


class WorkbridgeError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(WorkbridgeError):
    status_code = 422


class NotFound(WorkbridgeError):
    status_code = 404


class Forbidden(WorkbridgeError):
    status_code = 403


class CollaboratorUnavailable(WorkbridgeError):
    status_code = 503
