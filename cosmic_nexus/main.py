"""
Cosmic Nexus - 知识图谱
把兴趣节点和它们之间的连接投影为可交互的知识图谱

启动命令: uvicorn cosmic_nexus.main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cosmic_nexus import __version__
from cosmic_nexus.api.graph import router as graph_router
from cosmic_nexus.api.insights import router as insights_router

logger = logging.getLogger(__name__)


def _load_cors_origins() -> list[str]:
    raw = os.getenv("CN_CORS_ALLOW_ORIGINS")
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        logger.info(f"CORS origins from CN_CORS_ALLOW_ORIGINS: {origins}")
        return origins
    return [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


app = FastAPI(
    title="Cosmic Nexus API",
    description="知识图谱 - 节点投影、视觉编码与连接建议",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=_load_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(graph_router, prefix="/api/v1")
app.include_router(insights_router, prefix="/api/v1")


@app.get("/")
async def root():
    """健康检查"""
    return {
        "name": "Cosmic Nexus",
        "version": __version__,
        "status": "healthy",
        "message": "知识图谱服务运行中",
    }


@app.get("/health")
async def health_check():
    """详细健康检查"""
    return {
        "status": "healthy",
        "components": {
            "api": "ok",
            "layout": "ok",
        },
    }
