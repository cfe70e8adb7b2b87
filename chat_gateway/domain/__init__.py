"""领域层模型与错误类型。

包含：
- models: ConversationTurn 对话轮次与 Operation 类型别名。
- exceptions: 统一的 GatewayError 及错误码定义。
"""
