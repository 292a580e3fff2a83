"""
API 公共响应处理 - CORS 响应头与纯文本错误体
"""
from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

API_PREFIX = "/api"

# 集合路径与单条句子路径允许的方法
COLLECTION_METHODS = "GET, POST, OPTIONS"
ITEM_METHODS = "GET, PUT, DELETE, POST, OPTIONS"


def is_api_path(path: str) -> bool:
    return path == API_PREFIX or path.startswith(API_PREFIX + "/")


def cors_headers(path: str) -> dict[str, str]:
    """按路径生成 CORS 响应头"""
    methods = ITEM_METHODS if path.startswith("/api/sentences/") else COLLECTION_METHODS
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


async def add_cors_headers(request: Request, call_next):
    """给所有 /api 响应（包括错误响应）加上 CORS 头"""
    response = await call_next(request)
    if is_api_path(request.url.path):
        response.headers.update(cors_headers(request.url.path))
    return response


async def api_http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    /api 下的错误直接以提示文本作为响应体，例如 “句子不存在”

    其他路径沿用 FastAPI 默认处理。
    """
    if not is_api_path(request.url.path):
        return await http_exception_handler(request, exc)

    return Response(
        content=str(exc.detail),
        status_code=exc.status_code,
        media_type="application/json",
        headers=exc.headers,
    )


def register_api_middleware(app: FastAPI) -> None:
    """注册 CORS 中间件和错误处理"""
    app.middleware("http")(add_cors_headers)
    app.add_exception_handler(StarletteHTTPException, api_http_exception_handler)
