"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。

凭证字段（SPARK_APP_ID / SPARK_API_KEY / SPARK_API_SECRET）在这里允许为空，
真正的必填校验放在 SparkClient 构造时进行，便于在没有凭证的环境下导入本包。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("SPARK_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 星火凭证 ----
    spark_app_id: Optional[str] = Field(default=None, description="星火应用 APPID")
    spark_api_key: Optional[str] = Field(default=None, description="星火 APIKey")
    spark_api_secret: Optional[str] = Field(default=None, description="星火 APISecret")

    # ---- 接口版本与默认参数 ----
    spark_api_version: str = Field(
        default="v1.1",
        description="接口版本，由 registry 映射为具体 endpoint 与 domain",
    )
    spark_endpoint: Optional[str] = Field(
        default=None,
        description="覆盖 registry 中的 WebSocket 地址（ws:// 或 wss://）",
    )
    spark_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="单次会话的超时时间（秒），为空表示不限时",
    )
    default_user_id: str = Field(default="spark-client", description="请求头中的 uid")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("spark_endpoint")
    @classmethod
    def validate_endpoint(cls, v: Optional[str]) -> Optional[str]:
        if v and not v.startswith(("ws://", "wss://")):
            raise ValueError("spark_endpoint must start with ws:// or wss://")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = Settings()
