from fastapi import APIRouter

from src.facilities.api.v1 import pm_schedules, pm_templates

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(pm_schedules.router)
api_router.include_router(pm_templates.router)
