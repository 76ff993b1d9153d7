"""领域层模型与异常。

包含：
- models: Credentials / ChatParameters / ChatMessage / InboundFragment / ChatResult。
- exceptions: 业务异常类型定义。
"""
