"""双工传输层。

ChatSession 不直接依赖 websockets，而是依赖两个协议：

- TransportListener: 接收 open / message / error / close 四种事件。
- Transport: 负责连接、发送、关闭，并把底层连接上的事件按顺序派发给 listener。

测试里用一个按脚本派发事件的假 Transport 即可驱动完整的会话状态机。
"""

import asyncio
from typing import Optional, Protocol, Union

import websockets

from spark_client.infrastructure.logging.logger import logger


class TransportListener(Protocol):
    async def on_open(self) -> None:
        ...

    async def on_message(self, data: Union[str, bytes]) -> None:
        ...

    async def on_error(self, error: BaseException) -> None:
        ...

    async def on_close(self) -> None:
        ...


class Transport(Protocol):
    """一次连接对应一个 Transport 实例。"""

    async def open(self, url: str, listener: TransportListener) -> None:
        """建立连接并持续派发事件，直到连接关闭或出错后返回。"""

        ...

    async def send(self, data: str) -> None:
        ...

    async def close(self) -> None:
        """请求关闭连接，可重复调用。"""

        ...


class WebSocketTransport:
    """基于 websockets 的 Transport 实现。

    - 握手失败、DNS/TLS 错误、连接被拒 → on_error。
    - 正常关闭（包括本端主动 close、发送请求时对端已关闭） → on_close。
    - 非正常断开（1006 等） → on_error。
    """

    def __init__(self, open_timeout: Optional[float] = 10.0, max_size: Optional[int] = 2**20):
        self._open_timeout = open_timeout
        self._max_size = max_size
        self._ws = None

    async def open(self, url: str, listener: TransportListener) -> None:
        try:
            self._ws = await websockets.connect(
                url,
                open_timeout=self._open_timeout,
                max_size=self._max_size,
            )
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            logger.debug("WebSocket connect failed: %s (%s)", e, type(e).__name__)
            await listener.on_error(e)
            return

        try:
            await listener.on_open()
            async for message in self._ws:
                await listener.on_message(message)
        except websockets.ConnectionClosedOK:
            # 服务端在请求帧发出前已正常关闭
            logger.debug("WebSocket closed by peer before the request was sent")
        except websockets.ConnectionClosedError as e:
            logger.debug("WebSocket closed abnormally: %s", e)
            await listener.on_error(e)
            return
        except (OSError, websockets.exceptions.WebSocketException) as e:
            await listener.on_error(e)
            return
        await listener.on_close()

    async def send(self, data: str) -> None:
        if self._ws is None:
            raise RuntimeError("WebSocket is not connected")
        await self._ws.send(data)

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
