from fastapi import APIRouter

from app.api.v1.analyses import router as analyses_router
from app.api.v1.auth import router as auth_router
from app.api.v1.competitors import router as competitors_router
from app.api.v1.provider_keys import router as provider_keys_router
from app.api.v1.usage import router as usage_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(auth_router)
api_v1_router.include_router(analyses_router)
api_v1_router.include_router(competitors_router)
api_v1_router.include_router(provider_keys_router)
api_v1_router.include_router(usage_router)
