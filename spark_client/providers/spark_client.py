"""讯飞星火 Provider 适配器。

本模块负责：

1. 从 Settings 读取 APPID / APIKey / APISecret，构造 Authorizer。
2. 补齐调用方未给出的 endpoint / 生成参数 / uid（来自 registry 与配置）。
3. 为每次调用创建一个新的 ChatSession 与 Transport，一次调用对应一条连接。

重试、限流、历史持久化都不在这里处理，由宿主负责。
"""

from typing import Callable, List, Optional

from spark_client.auth.authorizer import Authorizer
from spark_client.config.settings import settings
from spark_client.domain.models import ChatMessage, ChatParameters, ChatResult, Credentials
from spark_client.infrastructure.logging.logger import logger
from spark_client.providers.registry import ModelConfig, get_model_config
from spark_client.streaming.session import ChatSession
from spark_client.streaming.transport import Transport, WebSocketTransport


class SparkClient:
    """星火 Provider 客户端实现。

    - name: Provider 名称（供日志/调试使用）。
    - chat: 对外统一调用入口，返回拼接后的回答文本。
    - chat_result: 同 chat，但返回带 status_code / usage 的 ChatResult。
    """

    name = "spark"

    def __init__(self, cfg=settings, transport_factory: Optional[Callable[[], Transport]] = None):
        self._settings = cfg
        credentials = Credentials(
            app_id=getattr(cfg, "spark_app_id", None) or "",
            api_key=getattr(cfg, "spark_api_key", None) or "",
            api_secret=getattr(cfg, "spark_api_secret", None) or "",
        )
        # 凭证缺失在这里直接抛出 ValidationError
        self._authorizer = Authorizer(credentials)
        self._app_id = credentials.app_id
        self._model_cfg: ModelConfig = get_model_config(getattr(cfg, "spark_api_version", "v1.1"))
        self._transport_factory = transport_factory or WebSocketTransport

    @property
    def default_endpoint(self) -> str:
        return getattr(self._settings, "spark_endpoint", None) or self._model_cfg.endpoint

    def default_parameters(self) -> ChatParameters:
        return ChatParameters(
            domain=self._model_cfg.domain,
            temperature=self._model_cfg.default_temperature,
            top_k=self._model_cfg.default_top_k,
            max_tokens=self._model_cfg.max_tokens,
        )

    def new_session(self) -> ChatSession:
        return ChatSession(self._authorizer, self._app_id, self._transport_factory())

    async def chat(
        self,
        endpoint: Optional[str],
        parameters: Optional[ChatParameters],
        user_id: Optional[str],
        messages: List[ChatMessage],
        timeout: Optional[float] = None,
    ) -> str:
        result = await self.chat_result(endpoint, parameters, user_id, messages, timeout=timeout)
        return result.text

    async def chat_result(
        self,
        endpoint: Optional[str],
        parameters: Optional[ChatParameters],
        user_id: Optional[str],
        messages: List[ChatMessage],
        timeout: Optional[float] = None,
    ) -> ChatResult:
        """执行一次对话并返回完整结果。

        步骤：
        1. 缺省参数从 registry / Settings 补齐。
        2. 新建 ChatSession 并运行到结束。
        3. 非 0 的 status_code 不会抛出，调用方可自行 raise_for_status()。
        """

        session = self.new_session()
        if timeout is None:
            timeout = getattr(self._settings, "spark_timeout", None)
        await session.run(
            endpoint or self.default_endpoint,
            parameters or self.default_parameters(),
            user_id or getattr(self._settings, "default_user_id", "spark-client"),
            messages,
            timeout=timeout,
        )
        result = session.result
        logger.info(
            "Spark chat finished: fragments=%d code=%s sid=%s",
            result.fragments, result.status_code, result.sid,
            extra={"extra": {"sid": result.sid, "status_code": result.status_code, "usage": result.usage}},
        )
        return result
