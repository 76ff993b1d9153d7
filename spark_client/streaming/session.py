"""单次流式对话会话。

ChatSession 把一次请求/响应交换实现为显式状态机：

    CONNECTING → OPEN → STREAMING → TERMINATED

- CONNECTING: 从 endpoint 提取 host、签名、拼接 URL，交给 Transport 建连。
- OPEN: 连接建立后发送唯一一帧请求，随即进入 STREAMING。
- STREAMING: 每收到一帧就追加 content；header.code != 0 或 header.status == 2
  时主动请求关闭连接，但不会立刻结束会话。
- TERMINATED: 收到传输层 close 时以累计文本成功结束；收到 error 时立即失败，
  之后到达的 close / message 一律忽略。

会话结果是一个只会被设置一次的 Future。
"""

import asyncio
import enum
import json
import re
from typing import List, Optional, Union

from spark_client.auth.authorizer import Authorizer
from spark_client.domain.exceptions import (
    BusinessError,
    InvalidEndpointError,
    SessionTimeoutError,
    TransportError,
)
from spark_client.domain.models import (
    EMPTY_RESPONSE,
    ChatMessage,
    ChatParameters,
    ChatResult,
    InboundFragment,
    build_outbound_frame,
)
from spark_client.infrastructure.logging.logger import logger
from spark_client.streaming.transport import Transport

_ENDPOINT_RE = re.compile(r"^wss?://([^/?#]+)")


class SessionState(enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    STREAMING = "streaming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def terminated(self) -> bool:
        return self in (SessionState.SUCCEEDED, SessionState.FAILED)


def extract_host(endpoint: str) -> str:
    """从 ws:// / wss:// 地址中取出 host（可能带端口）。"""

    match = _ENDPOINT_RE.match(endpoint or "")
    if not match:
        raise InvalidEndpointError(code="INVALID_ENDPOINT", message=f"Not a ws/wss endpoint: {endpoint!r}")
    return match.group(1)


class ChatSession:
    """驱动一次完整的流式对话，实例只能使用一次。"""

    def __init__(self, authorizer: Authorizer, app_id: str, transport: Transport):
        self._authorizer = authorizer
        self._app_id = app_id
        self._transport = transport
        self.state = SessionState.IDLE
        self._frame: Optional[str] = None
        self._chunks: List[str] = []
        self._fragments: List[InboundFragment] = []
        self._done: Optional[asyncio.Future] = None
        self._result: Optional[ChatResult] = None

    @property
    def result(self) -> ChatResult:
        """会话结束后的完整结果（含最后一次 status_code）。"""

        if self._result is None:
            raise RuntimeError("Session has not succeeded")
        return self._result

    async def run(
        self,
        endpoint: str,
        parameters: ChatParameters,
        user_id: str,
        messages: List[ChatMessage],
        timeout: Optional[float] = None,
    ) -> str:
        if self.state is not SessionState.IDLE:
            raise RuntimeError("ChatSession can only be run once")

        host = extract_host(endpoint)
        context = self._authorizer.sign(host)
        url = f"{endpoint}?{context.to_query()}"
        self._frame = json.dumps(
            build_outbound_frame(self._app_id, user_id, parameters, messages),
            ensure_ascii=False,
        )

        self.state = SessionState.CONNECTING
        self._done = asyncio.get_running_loop().create_future()
        logger.debug("Connecting to %s (uid=%s, messages=%d)", endpoint, user_id, len(messages))
        pump = asyncio.create_task(self._transport.open(url, self))
        pump.add_done_callback(self._on_pump_done)
        try:
            await asyncio.wait_for(asyncio.shield(self._done), timeout)
        except asyncio.TimeoutError:
            self._fail(SessionTimeoutError(
                code="SESSION_TIMEOUT",
                message=f"Session did not finish within {timeout}s",
            ))
        finally:
            await self._shutdown(pump)
        return self._done.result()

    # ---- 传输层事件 ----

    async def on_open(self) -> None:
        if self.state is not SessionState.CONNECTING:
            return
        self.state = SessionState.OPEN
        await self._transport.send(self._frame)
        self.state = SessionState.STREAMING

    async def on_message(self, data: Union[str, bytes]) -> None:
        if self.state is not SessionState.STREAMING:
            return
        try:
            fragment = InboundFragment.decode(data)
        except BusinessError as e:
            logger.warning("Dropping session on malformed fragment: %s", e.message)
            self._fail(e)
            await self._transport.close()
            return

        self._fragments.append(fragment)
        self._chunks.append(fragment.content)
        if fragment.is_error:
            logger.warning(
                "Spark returned code=%s sid=%s message=%s",
                fragment.status_code, fragment.sid, fragment.message,
                extra={"extra": {"sid": fragment.sid, "status_code": fragment.status_code}},
            )
        if fragment.is_error or fragment.is_final:
            await self._transport.close()

    async def on_error(self, error: BaseException) -> None:
        logger.debug("Transport error: %s", error)
        self._fail(TransportError(code="TRANSPORT_ERROR", message=str(error) or type(error).__name__))

    async def on_close(self) -> None:
        if self.state.terminated:
            return
        text = "".join(self._chunks)
        last = self._fragments[-1] if self._fragments else None
        self._result = ChatResult(
            text=text or EMPTY_RESPONSE,
            status_code=last.status_code if last else 0,
            sid=last.sid if last else None,
            message=last.message if last else None,
            usage=last.usage if last else None,
            fragments=len(self._fragments),
            raw=list(self._fragments),
        )
        self.state = SessionState.SUCCEEDED
        if not self._done.done():
            self._done.set_result(self._result.text)

    # ---- 内部 ----

    def _fail(self, error: BusinessError) -> None:
        if self.state.terminated:
            return
        self.state = SessionState.FAILED
        if not self._done.done():
            self._done.set_exception(error)

    def _on_pump_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or self.state.terminated:
            return
        error = task.exception()
        if error is not None:
            self._fail(TransportError(code="TRANSPORT_ERROR", message=str(error) or type(error).__name__))
        else:
            self._fail(TransportError(code="TRANSPORT_ERROR", message="Transport stopped without closing"))

    async def _shutdown(self, pump: asyncio.Task) -> None:
        if self.state is not SessionState.SUCCEEDED:
            pump.cancel()
            try:
                await self._transport.close()
            except Exception as e:
                logger.debug("Ignoring error while force-closing transport: %s", e)
        await asyncio.gather(pump, return_exceptions=True)
