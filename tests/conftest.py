"""
测试配置
"""
import os
import sys
import pytest

# 添加 src 目录到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from fastapi.testclient import TestClient

from sentence_clipboard.core import Settings
from sentence_clipboard.core.store import SnapshotStore
from sentence_clipboard.main import create_app
from sentence_clipboard.services.sentence_service import SentenceService


@pytest.fixture
def data_file(tmp_path):
    """临时快照文件路径（尚未创建）"""
    return tmp_path / "sentences.json"


@pytest.fixture
def store(data_file):
    """已加载的空存储"""
    store = SnapshotStore(data_file)
    store.load()
    return store


@pytest.fixture
def service(store):
    return SentenceService(store)


@pytest.fixture
def settings(tmp_path, data_file):
    """指向临时目录的配置"""
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>句子剪贴板</h1>", encoding="utf-8")
    (static_dir / "app.js").write_text("console.log('ok');", encoding="utf-8")
    return Settings(data_file=str(data_file), static_dir=str(static_dir))


@pytest.fixture
def client(settings):
    """启动（执行 lifespan）后的测试客户端"""
    with TestClient(create_app(settings)) as client:
        yield client
