"""Minimal demonstration of a single Spark chat exchange."""

import asyncio

from spark_client import create_provider
from spark_client.domain.models import ChatMessage

if __name__ == "__main__":
    question = "你好，请介绍一下自己。"
    client = create_provider()
    reply = asyncio.run(client.chat(None, None, None, [ChatMessage(role="user", content=question)]))
    print("User:", question)
    print("Spark:", reply)
