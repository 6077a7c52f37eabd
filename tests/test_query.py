import asyncio

import pytest

from fakes import FakeSynthesizer
from kblookup.core.errors import EmptyScope, NoRelevantData
from kblookup.core.models.answer import RegulationAnswer
from kblookup.core.models.document import (
    DocSource,
    LocalDocument,
    LocalFile,
    OutcomeStatus,
    SearchScope,
)
from kblookup.core.models.remote import KBMetadata, KBStats
from kblookup.core.services.chunker import WindowChunker
from kblookup.core.services.ingest_service import IngestService
from kblookup.core.services.query_service import QueryService
from kblookup.core.services.repositories import KnowledgeBaseRepository, LocalDocumentRepository
from kblookup.core.services.scorer import RetrievalScorer
from kblookup.infrastructure.decoders import CompositeDecoder
from kblookup.infrastructure.storage import MemoryKeyValueStore

REMOTE_TEXT = (
    "菠菜 農藥殘留 陶斯松 0.05 ppm，依據農藥殘留容許量標準第三條規定辦理。"
    "本標準自發布日施行，違反者依食品安全衛生管理法處罰。"
)
LOCAL_TEXT = (
    "紅蘿蔔 重金屬 鉛 0.1 ppm，依據食品中污染物質及毒素衛生標準規定辦理。"
    "本標準自發布日施行，違反者依食品安全衛生管理法處罰。"
)


def _service(synthesizer=None, with_remote=True, with_local=True) -> QueryService:
    store = MemoryKeyValueStore()
    knowledge_base = KnowledgeBaseRepository(store)
    local_documents = LocalDocumentRepository(store)
    chunker = WindowChunker()

    if with_remote:
        chunks = chunker.chunk(REMOTE_TEXT, "f1", "pesticide.pdf", "Rules/pesticide.pdf")
        knowledge_base.commit(
            "root", [], chunks, KBMetadata("root", 1.0, "fp", KBStats(total=1, success=1))
        )
    if with_local:
        local_documents.save(
            [
                LocalDocument(
                    id="local-1",
                    name="metals.txt",
                    content=LOCAL_TEXT,
                    upload_date=1.0,
                    mime_type="text/plain",
                    fingerprint="fp-1",
                    size=len(LOCAL_TEXT),
                )
            ]
        )

    return QueryService(
        knowledge_base,
        local_documents,
        RetrievalScorer(),
        chunker,
        synthesizer=synthesizer,
        root_id="root",
    )


def test_retrieve_respects_scope():
    service = _service()

    remote = service.retrieve("ppm", SearchScope.REMOTE)
    local = service.retrieve("ppm", SearchScope.LOCAL)
    both = service.retrieve("ppm", SearchScope.BOTH)

    assert [c.file_name for c in remote.chunks] == ["pesticide.pdf"]
    assert [c.file_name for c in local.chunks] == ["metals.txt"]
    assert {c.source for c in both.chunks} == {DocSource.REMOTE, DocSource.LOCAL}
    assert local.passages[0].source_label == "local"


def test_retrieve_ranks_by_term_hits():
    response = _service().retrieve("紅蘿蔔 鉛", SearchScope.BOTH)

    assert response.chunks[0].file_name == "metals.txt"
    assert response.chunks[0].score == 20
    assert len(response.chunks) == 1


def test_empty_scope():
    service = _service(with_local=False)

    with pytest.raises(EmptyScope):
        service.retrieve("ppm", SearchScope.LOCAL)


def test_no_relevant_data():
    with pytest.raises(NoRelevantData) as exc:
        _service().retrieve("黃麴毒素", SearchScope.BOTH)

    assert exc.value.scope == "both"


def test_answer_passes_passages_to_synthesizer():
    synthesizer = FakeSynthesizer()
    service = _service(synthesizer=synthesizer)

    result = asyncio.run(service.answer("菠菜", SearchScope.REMOTE))

    assert result.model == "fake-model"
    assert result.retrieved_chunks == 1
    query, passages = synthesizer.calls[0]
    assert query == "菠菜"
    assert passages[0].file_name == "pesticide.pdf"


def test_answer_without_synthesizer():
    with pytest.raises(RuntimeError):
        asyncio.run(_service().answer("菠菜"))


def test_regulation_answer_from_camel_case():
    answer = RegulationAnswer.from_dict(
        {
            "foodItem": "菠菜",
            "category": "蔬菜類",
            "summary": "陶斯松限量 0.05 ppm",
            "pesticides": [{"item": "陶斯松", "limit": "0.05 ppm"}],
            "heavyMetals": [{"item": "鉛", "limit": "0.3 ppm", "note": "葉菜類"}],
            "sources": [{"title": "農藥殘留容許量標準", "sourceType": "remote"}],
        }
    )

    assert answer.food_item == "菠菜"
    assert answer.heavy_metals[0].note == "葉菜類"
    assert answer.sources[0].source_type == "remote"
    assert [f.item for f in answer.findings] == ["陶斯松", "鉛"]


def test_short_local_document_is_retrievable():
    store = MemoryKeyValueStore()
    local_documents = LocalDocumentRepository(store)
    chunker = WindowChunker()
    ingest = IngestService(CompositeDecoder(), local_documents)
    text = "鉛限量 0.1 ppm 紅蘿蔔"

    result = asyncio.run(
        ingest.ingest_files([LocalFile("lead.txt", text.encode("utf-8"), 1.0)])
    )
    assert result.outcomes[0].status is OutcomeStatus.SUCCESS

    service = QueryService(
        KnowledgeBaseRepository(store), local_documents, RetrievalScorer(), chunker
    )
    response = service.retrieve("紅蘿蔔", SearchScope.LOCAL)

    assert len(response.chunks) == 1
    chunk = response.chunks[0].chunk
    assert chunk.chunk_id == f"{result.documents[0].id}_0"
    assert chunk.text == text
    assert chunk.source is DocSource.LOCAL
