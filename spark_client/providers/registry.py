"""星火接口版本配置。

本模块将“接口版本”与具体的 WebSocket 地址、domain 以及默认生成参数解耦，
上层只需要在配置里写 spark_api_version，具体地址由这里集中维护。

签名使用固定的 request-line（GET /v1.1/chat），因此这里只登记与之匹配的版本。
"""

from dataclasses import dataclass
from typing import Mapping


@dataclass
class ModelConfig:
    """单个接口版本的配置。"""

    version: str
    endpoint: str
    domain: str
    max_tokens: int
    default_temperature: float
    default_top_k: int


SPARK_V1_1 = ModelConfig(
    version="v1.1",
    endpoint="wss://spark-api.xf-yun.com/v1.1/chat",
    domain="general",
    max_tokens=2048,
    default_temperature=0.5,
    default_top_k=4,
)


SPARK_REGISTRY: Mapping[str, ModelConfig] = {
    "v1.1": SPARK_V1_1,
}


def get_model_config(version: str) -> ModelConfig:
    """根据版本号获取 ModelConfig，忽略大小写与前导的 "v"。"""

    key = version.lower().lstrip("v")
    for k, cfg in SPARK_REGISTRY.items():
        if k.lstrip("v") == key:
            return cfg
    raise KeyError(f"Unknown Spark API version: {version!r}")
