from fastapi import APIRouter

from sitelog.api.v1.daily_reports import router as daily_reports_router

api_router = APIRouter()

api_router.include_router(daily_reports_router)
