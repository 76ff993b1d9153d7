"""Provider 抽象接口。

宿主插件/服务层不直接依赖 WebSocket 细节，而是依赖此协议：

- chat(endpoint, parameters, user_id, messages): 执行一次流式对话，返回拼接后的文本。

这样宿主侧可以用假实现替换真实 Provider 做测试。
"""

from typing import List, Optional, Protocol

from spark_client.domain.models import ChatMessage, ChatParameters


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志/统计。
    - chat(...): 协程，最终只产出一次结果或抛出一次异常。
    """

    name: str

    async def chat(
        self,
        endpoint: Optional[str],
        parameters: Optional[ChatParameters],
        user_id: Optional[str],
        messages: List[ChatMessage],
    ) -> str:
        ...
