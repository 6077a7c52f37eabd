import asyncio
import json

import httpx
import pytest

from kblookup.core.errors import AnswerSynthesisError
from kblookup.core.models.document import Passage
from kblookup.infrastructure.llm.openai_synthesizer import (
    OpenAIAnswerSynthesizer,
    format_context,
)

PASSAGES = [
    Passage(source_label="remote", file_name="pesticide.pdf", text="菠菜 陶斯松 0.05 ppm"),
    Passage(source_label="local", file_name="draft.txt", text="菠菜 鉛 0.3 ppm"),
]


def _completion(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "qwen2.5:7b",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def _synthesizer(content: str, seen: list) -> OpenAIAnswerSynthesizer:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=_completion(content))

    return OpenAIAnswerSynthesizer(
        base_url="http://llm.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_format_context_labels_sources():
    context = format_context(PASSAGES)

    assert "[ID:0] 來源:remote | 文件:pesticide.pdf" in context
    assert "[ID:1] 來源:local | 文件:draft.txt" in context


def test_synthesize_parses_json_answer():
    seen = []
    content = json.dumps(
        {
            "foodItem": "菠菜",
            "category": "蔬菜類",
            "summary": "陶斯松 0.05 ppm",
            "pesticides": [{"item": "陶斯松", "limit": "0.05 ppm"}],
            "sources": [{"title": "pesticide.pdf", "sourceType": "remote"}],
        },
        ensure_ascii=False,
    )

    answer = asyncio.run(_synthesizer(content, seen).synthesize("菠菜", PASSAGES))

    assert answer.food_item == "菠菜"
    assert answer.pesticides[0].limit == "0.05 ppm"
    body = seen[0]
    assert body["response_format"] == {"type": "json_object"}
    assert "pesticide.pdf" in body["messages"][1]["content"]


def test_invalid_json_raises():
    with pytest.raises(AnswerSynthesisError):
        asyncio.run(_synthesizer("not json", []).synthesize("菠菜", PASSAGES))
