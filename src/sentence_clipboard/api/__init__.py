"""
API 路由模块
"""
from fastapi import APIRouter
from .sentences import router as sentences_router
from .middleware import register_api_middleware

# 创建主路由
api_router = APIRouter(prefix="/api")

api_router.include_router(sentences_router)

__all__ = ["api_router", "register_api_middleware"]
