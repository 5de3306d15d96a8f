from workbridge.models.job import Job
from workbridge.models.worker_profile import WorkerProfile
from workbridge.models.application import Application

__all__ = ["Job", "WorkerProfile", "Application"]
