"""Tests for JSON extraction utility."""

import pytest

from resume_builder.utils.json_parser import extract_json, extract_json_object


class TestExtractJson:
    def test_direct_json(self):
        result = extract_json('{"name": "test"}')
        assert result == {"name": "test"}

    def test_fenced_code_block(self):
        text = 'Here is the result:\n```json\n{"name": "test"}\n```\nDone.'
        result = extract_json(text)
        assert result == {"name": "test"}

    def test_fenced_without_json_tag(self):
        text = '```\n{"key": "value"}\n```'
        result = extract_json(text)
        assert result == {"key": "value"}

    def test_embedded_json(self):
        text = 'The analysis is: {"score": 90, "pass": true} as shown above.'
        result = extract_json(text)
        assert result == {"score": 90, "pass": True}

    def test_nested_json(self):
        text = '{"outer": {"inner": [1, 2, 3]}}'
        result = extract_json(text)
        assert result["outer"]["inner"] == [1, 2, 3]

    def test_top_level_array(self):
        assert extract_json('Keywords: ["Python", "Go"]') == ["Python", "Go"]

    def test_truncated_object_is_closed(self):
        text = '{"summary": "Engineer", "keywords": ["Python", "Go"'
        result = extract_json(text)
        assert result == {"summary": "Engineer", "keywords": ["Python", "Go"]}

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Could not extract JSON"):
            extract_json("no json here at all")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            extract_json("")

    def test_multiline_fenced(self):
        text = """Here's the output:
```json
{
  "summary": "Backend engineer",
  "skills": ["Python", "Java"]
}
```"""
        result = extract_json(text)
        assert result["summary"] == "Backend engineer"
        assert len(result["skills"]) == 2


class TestExtractJsonObject:
    def test_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_array_is_rejected(self):
        with pytest.raises(ValueError, match="Expected a JSON object"):
            extract_json_object("[1, 2]")
