"""
数据模型模块
"""
from .sentence import Sentence, DEFAULT_GROUP, ALL_GROUPS

__all__ = [
    "Sentence",
    "DEFAULT_GROUP",
    "ALL_GROUPS",
]
