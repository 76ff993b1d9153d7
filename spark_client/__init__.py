"""Spark Client 顶层包。

该包提供讯飞星火对话接口的客户端适配：
包括配置加载、领域模型、鉴权签名、WebSocket 流式会话
以及面向宿主插件/服务层的 Provider 封装。
"""

from spark_client.providers import create_provider
from spark_client.providers.spark_client import SparkClient

__all__ = ["SparkClient", "create_provider"]
