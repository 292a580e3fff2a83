"""
快照存储 - 内存中的句子序列 + 单个 JSON 文件持久化

所有读写都经过同一把互斥锁；每次提交修改后整文件重写快照。
"""
import os
import threading
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Iterator, Optional, Union

from pydantic import TypeAdapter, ValidationError

from sentence_clipboard.core.logging import get_logger
from sentence_clipboard.models.sentence import Sentence

logger = get_logger(__name__)

_snapshot_adapter = TypeAdapter(list[Sentence])


class StoreSession:
    """
    存储会话 - 类似 SQLModel 的 Session

    只在 SnapshotStore.session() 持锁期间有效。
    修改了 sentences 之后调用 commit()，退出时才会写盘。
    """

    def __init__(self, store: "SnapshotStore"):
        self._store = store
        self.committed = False

    @property
    def sentences(self) -> list[Sentence]:
        return self._store._sentences

    def get(self, sentence_id: int) -> Optional[Sentence]:
        """按 ID 查找句子，不存在时返回 None"""
        for sentence in self._store._sentences:
            if sentence.id == sentence_id:
                return sentence
        return None

    def allocate_id(self) -> int:
        """分配下一个 ID"""
        sentence_id = self._store._next_id
        self._store._next_id += 1
        return sentence_id

    def commit(self) -> None:
        self.committed = True


class SnapshotStore:
    """
    句子快照存储

    持有句子序列和自增 ID 计数器，由应用启动时创建并显式传给服务层。
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._sentences: list[Sentence] = []
        self._next_id = 1
        self.load_failed = False

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._sentences

    def load(self) -> None:
        """
        从快照文件加载

        - 文件不存在：创建空文件，序列为空
        - 文件为空：序列为空
        - 解析失败：记录日志并按空处理，原文件保留到下一次成功修改
        """
        with self._lock:
            self._sentences = []
            self._next_id = 1
            self.load_failed = False

            if not self.path.exists():
                try:
                    self.path.parent.mkdir(parents=True, exist_ok=True)
                    self.path.touch()
                    logger.info(f"数据文件不存在，已创建空文件: {self.path}")
                except OSError as e:
                    logger.error(f"创建数据文件失败: {self.path}, error: {e}")
                return

            try:
                data = self.path.read_bytes()
            except OSError as e:
                logger.error(f"读取文件失败: {self.path}, error: {e}")
                self.load_failed = True
                return

            if not data.strip():
                return

            try:
                sentences = _snapshot_adapter.validate_json(data)
            except ValidationError as e:
                logger.error(f"解析数据失败: {self.path}, error: {e}")
                self.load_failed = True
                return

            self._sentences = sentences
            if sentences:
                self._next_id = max(s.id for s in sentences) + 1
            logger.info(f"已加载 {len(sentences)} 条句子, next_id={self._next_id}")

    def save(self) -> bool:
        """
        把当前序列写入快照文件

        先写同目录临时文件再重命名覆盖。失败只记日志，不向上抛出。

        Returns:
            是否写入成功
        """
        with self._lock:
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                data = _snapshot_adapter.dump_json(self._sentences, indent=2)
                tmp_path.write_bytes(data)
                os.chmod(tmp_path, 0o644)
                os.replace(tmp_path, self.path)
            except OSError as e:
                logger.error(f"写入文件失败: {self.path}, error: {e}", exc_info=True)
                with suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
                return False
            return True

    @contextmanager
    def session(self) -> Iterator[StoreSession]:
        """
        在锁内操作句子序列

        用法:
            with store.session() as session:
                session.sentences.append(...)
                session.commit()
        """
        with self._lock:
            session = StoreSession(self)
            yield session
            if session.committed:
                self.save()
