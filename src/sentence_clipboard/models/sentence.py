"""
句子数据模型
"""
import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

# 未指定分组时使用的分组名
DEFAULT_GROUP = "默认"

# 列表筛选时表示“不过滤”的分组名
ALL_GROUPS = "全部"

# 秒的小数部分超过 6 位（纳秒精度）时截断到微秒
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


class Sentence(BaseModel):
    """
    句子模型

    字段顺序即快照文件中的键顺序
    """

    id: int = Field(description="句子ID，由存储分配，不复用")
    content: str = Field(description="句子内容")
    group: str = Field(default=DEFAULT_GROUP, description="分组")
    copy_count: int = Field(default=0, ge=0, description="复制次数")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def truncate_fraction(cls, value):
        if isinstance(value, str):
            return _FRACTION_PATTERN.sub(r"\1", value, count=1)
        return value
