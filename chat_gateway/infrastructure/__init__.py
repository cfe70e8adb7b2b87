"""基础设施层：日志与重试编排。"""
