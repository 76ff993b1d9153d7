import json

import pytest

from spark_client.domain.exceptions import FragmentDecodeError, ProtocolError, ValidationError
from spark_client.domain.models import ChatMessage, ChatResult, InboundFragment


def test_decode_final_fragment_with_usage():
    raw = {
        "header": {"code": 0, "message": "Success", "sid": "cht000", "status": 2},
        "payload": {
            "choices": {"status": 2, "seq": 3, "text": [{"content": "。", "role": "assistant", "index": 0}]},
            "usage": {"text": {"question_tokens": 4, "prompt_tokens": 5, "completion_tokens": 9, "total_tokens": 14}},
        },
    }
    fragment = InboundFragment.decode(json.dumps(raw).encode("utf-8"))
    assert fragment.content == "。"
    assert fragment.is_final
    assert not fragment.is_error
    assert fragment.sid == "cht000"
    assert fragment.usage["total_tokens"] == 14


def test_decode_success_fragment_without_content_is_malformed():
    with pytest.raises(FragmentDecodeError) as exc:
        InboundFragment.decode(json.dumps({"header": {"code": 0, "status": 1}, "payload": {}}))
    assert exc.value.code == "MALFORMED_FRAGMENT"


@pytest.mark.parametrize("data", ["", "[]", '{"payload": {}}', '{"header": {"code": "x"}}'])
def test_decode_rejects_bad_shapes(data):
    with pytest.raises(FragmentDecodeError):
        InboundFragment.decode(data)


def test_unknown_role_rejected():
    with pytest.raises(ValidationError) as exc:
        ChatMessage(role="system", content="hi")
    assert exc.value.code == "INVALID_ROLE"


def test_raise_for_status():
    ChatResult(text="ok").raise_for_status()
    with pytest.raises(ProtocolError) as exc:
        ChatResult(text="quota exceeded", status_code=4, sid="s").raise_for_status()
    assert exc.value.extra["status_code"] == 4
    assert exc.value.message == "quota exceeded"


@pytest.mark.parametrize("content", [123, ["a"], {"t": "x"}])
def test_decode_rejects_non_text_content(content):
    data = json.dumps({"header": {"code": 0, "status": 1}, "payload": {"choices": {"text": [{"content": content}]}}})
    with pytest.raises(FragmentDecodeError) as exc:
        InboundFragment.decode(data)
    assert exc.value.code == "MALFORMED_FRAGMENT"


def test_decode_null_content_is_empty():
    data = json.dumps({"header": {"code": 0, "status": 1}, "payload": {"choices": {"text": [{"content": None}]}}})
    assert InboundFragment.decode(data).content == ""
