import pytest

from nexusmarks.openai_client import _extract_output_text, _parse_analysis_from_text, _request_extras


def test_parse_analysis_from_plain_json():
    raw = '{"title":"GitHub","description":"代码托管","category":"开发工具","tags":["git","code"]}'
    parsed = _parse_analysis_from_text(raw)
    assert parsed.title == "GitHub"
    assert parsed.tags == ["git", "code"]


def test_parse_analysis_from_fenced_json():
    raw = """```json
{"title":"MDN","description":"Web 文档","category":"学习资源","tags":[]}
```"""
    parsed = _parse_analysis_from_text(raw)
    assert parsed.category == "学习资源"


def test_parse_analysis_from_json_embedded_in_prose():
    raw = 'Sure! {"title":"X","description":"d","category":"c","tags":["t"]} hope this helps'
    assert _parse_analysis_from_text(raw).title == "X"


def test_parse_analysis_rejects_empty_text():
    with pytest.raises(ValueError):
        _parse_analysis_from_text("   ")


def test_extract_output_text_from_response_json_output_list():
    payload = {
        "output": [
            {"type": "web_search_call"},
            {
                "type": "message",
                "content": [
                    {
                        "type": "output_text",
                        "text": '{"title":"T","description":"d","category":"c","tags":[]}',
                    }
                ],
            },
        ]
    }
    text = _extract_output_text(payload)
    assert '"title":"T"' in text


def test_request_extras_web_search_and_effort():
    assert _request_extras(use_web_search=False, reasoning_effort="") == {}
    extras = _request_extras(use_web_search=True, reasoning_effort="LOW")
    assert extras["tools"] == [{"type": "web_search_preview"}]
    assert extras["reasoning"] == {"effort": "low"}
