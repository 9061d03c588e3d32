"""API v1 router and endpoint organization."""

from fastapi import APIRouter

from adsintel.api.v1.endpoints import analysis

router = APIRouter(prefix="/api/v1", tags=["v1"])

router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
