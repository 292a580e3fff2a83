"""
配置管理 - 类似 Java 的 @ConfigurationProperties
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API 配置
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    debug: bool = False

    # 数据文件（整个句子库的 JSON 快照）
    data_file: str = "./sentences.json"

    # 前端静态资源目录，index.html 位于其中
    static_dir: str = "./static"

    # 日志配置
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
