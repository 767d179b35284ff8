from fastapi import APIRouter
from app.api.v1.endpoints import face_match, attendance, users, images

api_router = APIRouter()

# Register routes
api_router.include_router(face_match.router, prefix="/face-match", tags=["Face Match"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(images.router, prefix="/images", tags=["Images"])
