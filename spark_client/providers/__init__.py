"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护星火接口版本配置 (registry)。
- 提供星火的具体实现 (spark_client)。
"""

from typing import Literal, Optional

from spark_client.config.settings import settings
from spark_client.providers.base import ProviderClient
from spark_client.providers.spark_client import SparkClient


def create_provider(name: Optional[str] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，目前只有 spark。"""

    provider_name = (name or "spark").lower()
    if provider_name != "spark":
        raise KeyError(f"Unknown provider: {name!r}")
    return SparkClient(settings)


DefaultProviderName = Literal["spark"]
