import json

import pytest

from chat_gateway.domain.exceptions import GatewayError
from chat_gateway.domain.models import ConversationTurn
from chat_gateway.providers.codec import (
    decode_claude,
    decode_openai,
    encode_claude_chat,
    encode_claude_title,
    encode_openai_chat,
    encode_openai_title,
    escape_json,
    find_closing_quote,
    unescape_json,
)


def test_escape_json_table():
    assert escape_json('a\\b"c\nd\re\tf') == 'a\\\\b\\"c\\nd\\re\\tf'
    assert escape_json(None) == ""


def test_unescape_json_single_pass():
    assert unescape_json('line1\\nline2 \\"q\\" tab\\t') == 'line1\nline2 "q" tab\t'
    # 转义的反斜杠后面跟 n 不能被当成换行
    assert unescape_json("C:\\\\new") == "C:\\new"
    # 表外的转义原样保留
    assert unescape_json("\\u00e9") == "\\u00e9"


def test_find_closing_quote_skips_escaped():
    text = 'abc\\"def"xyz'
    assert find_closing_quote(text, 0) == 8
    assert find_closing_quote("no end", 0) == -1


def test_encode_openai_chat_shapes_messages():
    history = [
        ConversationTurn(role="user", content="first"),
        ConversationTurn(role="system", content="ignored"),
        ConversationTurn(role="assistant", content='said "hi"\n'),
    ]
    body = encode_openai_chat("gpt-4", "next?", history, 256, 0.7)
    data = json.loads(body)
    assert data["model"] == "gpt-4"
    assert data["max_tokens"] == 256
    assert data["temperature"] == 0.7
    assert '"temperature":0.7' in body
    roles = [m["role"] for m in data["messages"]]
    assert roles == ["system", "user", "assistant", "user"]
    assert data["messages"][0]["content"] == "You are a helpful AI assistant."
    assert data["messages"][2]["content"] == 'said "hi"\n'
    assert data["messages"][-1]["content"] == "next?"


def test_encode_openai_chat_without_history():
    data = json.loads(encode_openai_chat("gpt-3.5-turbo", "hi", None, 10, 1.0))
    assert [m["role"] for m in data["messages"]] == ["system", "user"]


def test_encode_openai_title():
    data = json.loads(encode_openai_title("gpt-4", "make a title"))
    assert data["max_tokens"] == 50
    assert data["temperature"] == 0.3
    assert data["messages"] == [{"role": "user", "content": "make a title"}]


def test_encode_claude_chat_has_no_system_or_temperature():
    history = [
        ConversationTurn(role="USER", content="q1"),
        ConversationTurn(role="assistant", content="a1"),
    ]
    data = json.loads(encode_claude_chat("claude-3-haiku-20240307", "q2", history, 1024))
    assert set(data) == {"model", "messages", "max_tokens"}
    assert [m["role"] for m in data["messages"]] == ["user", "assistant", "user"]
    assert data["messages"][-1]["content"] == "q2"


def test_encode_claude_title():
    data = json.loads(encode_claude_title("claude-3-sonnet-20240229", "p"))
    assert data == {
        "model": "claude-3-sonnet-20240229",
        "messages": [{"role": "user", "content": "p"}],
        "max_tokens": 50,
    }


def test_decode_openai_response():
    body = (
        '{"id": "chatcmpl-1", "choices": [{"index": 0, "message": '
        '{"role": "assistant", "content": "Hi \\"there\\"\\nbye"}, "finish_reason": "stop"}]}'
    )
    assert decode_openai(body) == 'Hi "there"\nbye'


def test_decode_claude_response():
    body = (
        '{"id":"msg_1","type":"message","role":"assistant",'
        '"content":[{"type":"text","text":"Tab\\there"}],"stop_reason":"end_turn"}'
    )
    assert decode_claude(body) == "Tab\there"


def test_decode_claude_without_content_wrapper():
    assert decode_claude('{"text":"plain"}') == "plain"


@pytest.mark.parametrize(
    "body",
    [
        "",
        None,
        '{"choices": []}',
        '{"choices":[{"message":{"content": null}}]}',
        '{"choices":[{"message":{"content":"never closed}}]}',
    ],
)
def test_decode_openai_parse_errors(body):
    with pytest.raises(GatewayError) as exc:
        decode_openai(body)
    assert exc.value.code == "PARSE_ERROR"
    assert exc.value.retryable is False


def test_decode_claude_parse_error():
    with pytest.raises(GatewayError) as exc:
        decode_claude('{"content":[{"type":"image"}]}')
    assert exc.value.code == "PARSE_ERROR"
