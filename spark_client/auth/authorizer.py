"""星火 WebSocket 鉴权签名。

签名规则（与网关的 hmac-sha256 鉴权方式一致）：

1. 生成 RFC 1123 格式的 date（GMT）。
2. 按固定顺序拼接三行签名原文：host / date / request-line。
3. 用 APISecret 对原文做 HMAC-SHA256，再 base64 得到 signature。
4. 把 api_key、algorithm、headers、signature 拼成 authorization 原文后整体 base64。

签名原文中任何字段顺序或空白的差异都会导致服务端校验失败。
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

from spark_client.domain.models import Credentials, SignedRequestContext

ALGORITHM = "hmac-sha256"
SIGNED_HEADERS = "host date request-line"
REQUEST_LINE = "GET /v1.1/chat HTTP/1.1"


def http_date(now: Optional[datetime] = None) -> str:
    """返回形如 "Mon, 19 Oct 2026 08:00:00 GMT" 的时间串。"""

    now = now or datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


class Authorizer:
    """为每次连接生成带时间戳的签名。

    凭证在构造时校验，缺失时直接抛出 ValidationError，不在这里做任何恢复。
    """

    def __init__(self, credentials: Credentials):
        credentials.validate()
        self._credentials = credentials

    def signing_string(self, host: str, date: str) -> str:
        return f"host: {host}\ndate: {date}\n{REQUEST_LINE}"

    def sign(self, host: str, now: Optional[datetime] = None) -> SignedRequestContext:
        """对 host 签名，同一时刻相同输入得到相同结果。"""

        date = http_date(now)
        digest = hmac.new(
            self._credentials.api_secret.encode("utf-8"),
            self.signing_string(host, date).encode("utf-8"),
            hashlib.sha256,
        ).digest()
        signature = base64.b64encode(digest).decode("ascii")
        authorization_origin = (
            f'api_key="{self._credentials.api_key}", algorithm="{ALGORITHM}", '
            f'headers="{SIGNED_HEADERS}", signature="{signature}"'
        )
        authorization = base64.b64encode(authorization_origin.encode("utf-8")).decode("ascii")
        return SignedRequestContext(host=host, date=date, signature=signature, authorization=authorization)
