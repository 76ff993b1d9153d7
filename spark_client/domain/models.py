"""星火对话的数据模型。

本模块定义了签名、请求帧与响应帧在项目内部的统一结构：

- Credentials: APPID / APIKey / APISecret 三元组，构造后不可变。
- SignedRequestContext: 一次连接使用的签名结果。
- ChatParameters / ChatMessage: 调用方传入的生成参数与对话上下文。
- InboundFragment: 服务端推送的一帧增量结果。
- ChatResult: 会话结束后的最终结果。

WebSocket JSON ⇄ 这些模型之间的转换也集中在这里完成。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional
from urllib.parse import urlencode

from spark_client.domain.exceptions import FragmentDecodeError, ProtocolError, ValidationError


Role = Literal["user", "assistant"]

VALID_ROLES = ("user", "assistant")

# header.status == 2 表示最后一帧
FINAL_STREAM_STATUS = 2


def _mask(value: str) -> str:
    if len(value) <= 4:
        return "***"
    return value[:2] + "***" + value[-2:]


@dataclass(frozen=True)
class Credentials:
    """控制台申请到的应用凭证，永远不要写入日志。"""

    app_id: str
    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        return (
            f"Credentials(app_id={self.app_id!r}, api_key={_mask(self.api_key)!r}, "
            f"api_secret='***')"
        )

    def validate(self) -> None:
        missing = [name for name in ("app_id", "api_key", "api_secret") if not getattr(self, name)]
        if missing:
            raise ValidationError(
                code="MISSING_CREDENTIALS",
                message=f"Spark credentials not set: {', '.join(missing)}",
            )


@dataclass(frozen=True)
class SignedRequestContext:
    """单次连接的鉴权信息，date 过期后服务端会拒绝。"""

    host: str
    date: str
    signature: str
    authorization: str

    def to_query(self) -> str:
        """拼接到 endpoint 后面的 query string。"""

        return urlencode({"authorization": self.authorization, "date": self.date, "host": self.host})


@dataclass
class ChatParameters:
    """parameter.chat 部分，原样透传给服务端。"""

    domain: str
    temperature: float = 0.5
    top_k: int = 4
    max_tokens: int = 2048

    def to_payload(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "temperature": self.temperature,
            "top_k": self.top_k,
            "max_tokens": self.max_tokens,
        }


@dataclass
class ChatMessage:
    """一条上下文消息，列表顺序即时间顺序。"""

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in VALID_ROLES:
            raise ValidationError(code="INVALID_ROLE", message=f"Unsupported role: {self.role!r}")

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


def build_outbound_frame(
    app_id: str,
    user_id: str,
    parameters: ChatParameters,
    messages: List[ChatMessage],
) -> Dict[str, Any]:
    """构造每个会话唯一发送的一帧请求。"""

    return {
        "header": {"app_id": app_id, "uid": user_id},
        "parameter": {"chat": parameters.to_payload()},
        "payload": {"message": {"text": [m.to_payload() for m in messages]}},
    }


@dataclass
class InboundFragment:
    """服务端推送的一帧。

    - status_code: header.code，0 表示成功，其余为服务端错误码。
    - stream_status: header.status，2 表示最后一帧。
    - content: payload.choices.text[0].content。
    - usage: 最后一帧携带的 token 统计（payload.usage.text）。
    """

    status_code: int
    stream_status: int
    content: str
    sid: Optional[str] = None
    message: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None

    @property
    def is_final(self) -> bool:
        return self.stream_status == FINAL_STREAM_STATUS

    @property
    def is_error(self) -> bool:
        return self.status_code != 0

    @classmethod
    def decode(cls, data: Any) -> "InboundFragment":
        """解析一帧原始数据（str/bytes）。

        错误帧（code != 0）可能不带 payload，此时 content 视为空串；
        成功帧缺少 content 路径则视为格式错误。
        """

        try:
            raw = json.loads(data)
            header = raw["header"]
            status_code = int(header["code"])
            stream_status = int(header.get("status", 0))
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            raise FragmentDecodeError(code="MALFORMED_FRAGMENT", message=f"Cannot decode fragment: {e}")

        payload = raw.get("payload")
        if not isinstance(payload, dict):
            payload = {}
        try:
            content = payload["choices"]["text"][0]["content"]
        except (TypeError, KeyError, IndexError, AttributeError) as e:
            if status_code == 0:
                raise FragmentDecodeError(
                    code="MALFORMED_FRAGMENT",
                    message=f"Fragment without content: {e!r}",
                    sid=header.get("sid"),
                )
            content = ""

        if content is None:
            content = ""
        if not isinstance(content, str):
            raise FragmentDecodeError(
                code="MALFORMED_FRAGMENT",
                message=f"Fragment content is not text: {type(content).__name__}",
                sid=header.get("sid"),
            )

        usage = payload.get("usage")
        usage = usage.get("text") if isinstance(usage, dict) else None
        return cls(
            status_code=status_code,
            stream_status=stream_status,
            content=content,
            sid=header.get("sid"),
            message=header.get("message"),
            usage=usage,
        )


# 没有收到任何内容时的占位结果
EMPTY_RESPONSE = "响应为空"


@dataclass
class ChatResult:
    """一次会话的最终结果。

    - text: 拼接后的回答；为空时为 EMPTY_RESPONSE。
    - status_code: 最后一帧的 header.code，非 0 时 text 里可能是服务端的错误说明。
    - fragments: 收到的帧数量。
    """

    text: str
    status_code: int = 0
    sid: Optional[str] = None
    message: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    fragments: int = 0
    raw: List[InboundFragment] = field(default_factory=list, repr=False)

    def raise_for_status(self) -> None:
        if self.status_code != 0:
            raise ProtocolError(
                code="PROTOCOL_ERROR",
                message=self.message or self.text,
                status_code=self.status_code,
                sid=self.sid,
            )
