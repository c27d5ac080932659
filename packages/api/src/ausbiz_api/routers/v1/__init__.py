from fastapi import APIRouter

from ausbiz_api.routers.v1 import dataset, stats, status

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(dataset.router)
v1_router.include_router(stats.router)
v1_router.include_router(status.router)
