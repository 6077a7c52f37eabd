import json
import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI

from kblookup.core.errors import AnswerSynthesisError
from kblookup.core.models.answer import RegulationAnswer
from kblookup.core.models.document import Passage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """你是一位嚴謹的台灣食品安全法規專家。

規則：
- 回答必須完全依據使用者提供的【參考內容】，不得引用外部知識。
- 來源為 "remote" 的段落來自雲端同步的正式法規；來源為 "local" 的段落來自使用者上傳的測試文件。回答時請區分兩者。
- 參考內容中沒有的項目不得自行補齊；找不到法定標準時請直接說明。
- 每一筆限量標準都必須在 sources 中列出其來源檔名。

只輸出一個 JSON 物件，欄位如下：
foodItem (字串), category (字串), summary (字串),
pesticides, heavyMetals, others (陣列，元素為 {"item", "limit", "note"}),
sources (陣列，元素為 {"title", "url", "sourceType"})。"""

PROMPT_WITH_CONTEXT = """使用者查詢：「{question}」

【參考內容】
{context}"""


def format_context(passages: list[Passage]) -> str:
    """Render passages with numbered source labels."""
    return "\n\n---\n\n".join(
        f"[ID:{i}] 來源:{p.source_label} | 文件:{p.file_name}\n內容:{p.text}"
        for i, p in enumerate(passages)
    )


class OpenAIAnswerSynthesizer:
    """Answer synthesizer for any OpenAI-compatible chat API (OpenAI, Ollama)."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        api_key: str = "ollama",
        model: str = "qwen2.5:7b",
        max_tokens: int = 2048,
        temperature: float = 0.1,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize synthesizer.

        Args:
            base_url: API URL.
            api_key: API key.
            model: Model name.
            max_tokens: Max response tokens.
            temperature: Sampling temperature.
            http_client: Custom HTTP client (tests).
        """
        self._client = AsyncOpenAI(base_url=base_url, api_key=api_key, http_client=http_client)
        self.model_name = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def synthesize(self, query: str, passages: list[Passage]) -> RegulationAnswer:
        """Ask the model for a structured answer grounded in the passages."""
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": PROMPT_WITH_CONTEXT.format(
                    question=query, context=format_context(passages)
                ),
            },
        ]

        response = await self._client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Model returned invalid JSON: {content[:200]!r}")
            raise AnswerSynthesisError(f"Invalid JSON from model: {e}") from e

        if not isinstance(data, dict):
            raise AnswerSynthesisError("Model answer is not a JSON object")
        return RegulationAnswer.from_dict(data)
