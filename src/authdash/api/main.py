from fastapi import APIRouter

from authdash.api.routes import auth

api_router = APIRouter()
api_router.include_router(auth.router)
