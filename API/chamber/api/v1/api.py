from fastapi import APIRouter
from chamber.api.v1.endpoints import admin, auth, files, forms, gallery, news, notices, system

api_router = APIRouter()
api_router.include_router(system.router, tags=["system"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(notices.router, prefix="/notices", tags=["notices"])
api_router.include_router(news.router, prefix="/news", tags=["news"])
api_router.include_router(gallery.router, prefix="/gallery", tags=["gallery"])
api_router.include_router(forms.router, prefix="/forms", tags=["forms"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
