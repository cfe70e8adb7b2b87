"""Provider 共用的阻塞式 HTTP POST。

每次调用新建一个 httpx.Client，按配置设置连接/读取超时；
非 200 与传输异常都交给 classifier 转成 GatewayError。
"""

from typing import Mapping

import httpx

from chat_gateway.config.settings import ProviderConfig
from chat_gateway.providers.classifier import classify_http_status, classify_transport_error


def build_timeout(cfg: ProviderConfig) -> httpx.Timeout:
    # 配置以毫秒为单位，httpx 以秒为单位
    return httpx.Timeout(cfg.read_timeout / 1000.0, connect=cfg.connect_timeout / 1000.0)


def post_json(
    url: str,
    body: str,
    headers: Mapping[str, str],
    cfg: ProviderConfig,
    provider: str,
) -> str:
    """发送一次 POST，返回 200 响应的原始文本。"""

    all_headers = {"Content-Type": "application/json", **headers}
    try:
        with httpx.Client(timeout=build_timeout(cfg), trust_env=False) as client:
            resp = client.post(url, content=body.encode("utf-8"), headers=all_headers)
    except (httpx.RequestError, httpx.InvalidURL, UnicodeError, OSError) as e:
        # 非法 base_url、无法编码进请求头的 API key 也归为传输失败
        raise classify_transport_error(e) from e
    error = classify_http_status(resp.status_code, resp.text, provider)
    if error is not None:
        raise error
    return resp.text
