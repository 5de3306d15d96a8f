from fastapi import APIRouter
from workbridge.api import applications, jobs, matches, selection, stats, workers

api_router = APIRouter()
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(matches.router, prefix="/jobs", tags=["matches"])
api_router.include_router(applications.router, prefix="/jobs", tags=["applications"])
api_router.include_router(workers.router, prefix="/workers", tags=["workers"])
api_router.include_router(selection.router, prefix="/selection", tags=["selection"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
