"""
FastAPI 应用入口
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from sentence_clipboard.core import Settings, setup_logging, get_settings, get_logger
from sentence_clipboard.core.store import SnapshotStore
from sentence_clipboard.api import api_router, register_api_middleware
from sentence_clipboard.services.sentence_service import SentenceService

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    创建应用

    存储和服务在这里创建，通过 app.state 交给路由使用，没有模块级全局状态。
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    store = SnapshotStore(settings.data_file)
    sentence_service = SentenceService(store)
    static_dir = Path(settings.static_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        # 启动时加载数据；文件不存在或为空时写入示例句子
        store.load()
        if store.is_empty and not store.load_failed:
            sentence_service.seed_sample_data()
        elif store.load_failed:
            logger.warning(f"数据文件无法解析，以空库启动，原文件保留: {store.path}")
        logger.info(f"🚀 句子剪贴板启动: http://localhost:{settings.api_port}")
        yield
        logger.info("👋 句子剪贴板关闭")

    app = FastAPI(
        title="句子剪贴板 API",
        description="按分组保存常用句子，按复制次数排序",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.sentence_service = sentence_service

    register_api_middleware(app)

    # 注册 API 路由
    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    async def index():
        """前端页面"""
        index_file = static_dir / "index.html"
        if not index_file.is_file():
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(index_file)

    @app.get("/health")
    async def health():
        """健康检查"""
        return {"status": "healthy"}

    app.mount("/static", StaticFiles(directory=static_dir, check_dir=False), name="static")

    return app


app = create_app()


def run() -> None:
    """命令行入口"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sentence_clipboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
