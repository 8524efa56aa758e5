from fastapi import APIRouter
from app.api.routes import crawl, health

api_router = APIRouter()

# Include all route modules
api_router.include_router(crawl.router)
api_router.include_router(health.router)
