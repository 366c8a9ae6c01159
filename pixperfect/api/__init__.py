from fastapi import APIRouter

from pixperfect.interfaces.http.routers import auth, images


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, tags=["auth"])
    router.include_router(images.router, tags=["images"])
    return router


__all__ = [
    "create_api_router",
]
