"""流式会话：状态机 (session) 与双工传输 (transport)。"""

from spark_client.streaming.session import ChatSession, SessionState, extract_host
from spark_client.streaming.transport import Transport, TransportListener, WebSocketTransport

__all__ = [
    "ChatSession",
    "SessionState",
    "extract_host",
    "Transport",
    "TransportListener",
    "WebSocketTransport",
]
