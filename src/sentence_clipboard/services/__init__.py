"""
服务模块
"""
from .sentence_service import SentenceService, SAMPLE_SENTENCES

__all__ = [
    "SentenceService",
    "SAMPLE_SENTENCES",
]
