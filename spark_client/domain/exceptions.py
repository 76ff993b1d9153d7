"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于宿主插件/服务层做统一捕获与用户提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "TRANSPORT_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 sid、status_code 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ValidationError(BusinessError):
    """参数或配置校验失败（凭证缺失、role 非法等）。"""


class InvalidEndpointError(ValidationError):
    """endpoint 不是 ws:// 或 wss:// 地址，无法提取 host。在建立连接前抛出。"""


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class TransportError(NetworkError):
    """WebSocket 连接、发送或接收过程中的错误，message 为底层错误信息。"""


class SessionTimeoutError(TransportError):
    """会话在超时时间内未结束，传输层已被强制关闭。"""


class ProtocolError(BusinessError):
    """服务端返回非 0 的 header.code。

    会话本身不会因此失败，只有调用 ChatResult.raise_for_status() 时才会抛出。
    """


class FragmentDecodeError(ProtocolError):
    """服务端推送的帧无法按 InboundFragment 结构解析。"""
