from fastapi import APIRouter

from api.auth.routes import router as auth_router
from api.user.routes import router as user_router
from api.insights.routes import router as insights_router
from api.runtime.routes import router as runtime_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(user_router, prefix="/users", tags=["users"])
api_router.include_router(insights_router, prefix="/insights", tags=["insights"])
api_router.include_router(runtime_router, prefix="/runtime", tags=["runtime"])
