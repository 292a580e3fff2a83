"""
句子服务 - 列表、增删改和复制计数
"""
from datetime import datetime
from typing import Optional

from sentence_clipboard.core import get_logger
from sentence_clipboard.core.store import SnapshotStore
from sentence_clipboard.models.sentence import Sentence, DEFAULT_GROUP, ALL_GROUPS

logger = get_logger(__name__)

# 空库启动时写入的示例句子
SAMPLE_SENTENCES = [
    "Hello, this is a sample sentence.",
    "This is another example sentence for testing.",
]


def _now() -> datetime:
    """带时区的当前时间"""
    return datetime.now().astimezone()


class SentenceService:
    """
    句子服务

    所有操作都在同一个存储会话（即同一把锁）内完成，
    返回给调用方的都是副本，不会泄露存储中的对象。
    """

    def __init__(self, store: SnapshotStore):
        self.store = store

    def list_sentences(self, group: Optional[str] = None) -> list[Sentence]:
        """
        获取句子列表

        Args:
            group: 分组名，为空或“全部”时不过滤

        Returns:
            按复制次数降序排列的句子，次数相同保持原有顺序
        """
        with self.store.session() as session:
            if group and group != ALL_GROUPS:
                sentences = [s for s in session.sentences if s.group == group]
            else:
                sentences = list(session.sentences)

            # sorted 是稳定排序，且只排投影，不改动存储顺序
            sentences = sorted(sentences, key=lambda s: s.copy_count, reverse=True)
            return [s.model_copy() for s in sentences]

    def create_sentence(self, content: Optional[str], group: Optional[str] = None) -> Sentence:
        """
        添加句子

        Args:
            content: 句子内容
            group: 分组，为空时使用“默认”

        Returns:
            新建的 Sentence

        Raises:
            ValueError: 如果内容为空
        """
        if not content:
            raise ValueError("内容不能为空")

        with self.store.session() as session:
            now = _now()
            sentence = Sentence(
                id=session.allocate_id(),
                content=content,
                group=group or DEFAULT_GROUP,
                copy_count=0,
                created_at=now,
                updated_at=now,
            )
            session.sentences.append(sentence)
            session.commit()

        logger.info(f"添加句子: id={sentence.id}, group={sentence.group}")
        return sentence.model_copy()

    def update_sentence(
        self,
        sentence_id: int,
        content: Optional[str] = None,
        group: Optional[str] = None,
    ) -> bool:
        """
        更新句子

        只覆盖非空字段；无论是否提供字段都会刷新 updated_at。

        Returns:
            句子是否存在
        """
        with self.store.session() as session:
            sentence = session.get(sentence_id)
            if sentence is None:
                return False

            if content:
                sentence.content = content
            if group:
                sentence.group = group
            sentence.updated_at = _now()
            session.commit()

        logger.info(f"更新句子: id={sentence_id}")
        return True

    def delete_sentence(self, sentence_id: int) -> bool:
        """删除句子"""
        with self.store.session() as session:
            sentence = session.get(sentence_id)
            if sentence is None:
                return False

            session.sentences.remove(sentence)
            session.commit()

        logger.info(f"删除句子: id={sentence_id}")
        return True

    def copy_sentence(self, sentence_id: int) -> Optional[str]:
        """
        复制句子，复制次数 +1

        不修改 updated_at。

        Returns:
            句子内容，句子不存在时返回 None
        """
        with self.store.session() as session:
            sentence = session.get(sentence_id)
            if sentence is None:
                return None

            sentence.copy_count += 1
            session.commit()
            return sentence.content

    def seed_sample_data(self) -> int:
        """
        空库时写入示例句子

        Returns:
            写入的条数
        """
        with self.store.session() as session:
            if session.sentences:
                return 0

            for content in SAMPLE_SENTENCES:
                now = _now()
                session.sentences.append(
                    Sentence(
                        id=session.allocate_id(),
                        content=content,
                        group=DEFAULT_GROUP,
                        copy_count=0,
                        created_at=now,
                        updated_at=now,
                    )
                )
            session.commit()

        logger.info(f"已初始化 {len(SAMPLE_SENTENCES)} 条示例句子")
        return len(SAMPLE_SENTENCES)
