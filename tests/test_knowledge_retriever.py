from fakes import FakeStore, run

from thaina_juridico.domain.entities import KnowledgeDocument
from thaina_juridico.domain.exceptions import DocumentStoreError
from thaina_juridico.services.knowledge_retriever import (
    KnowledgeRetriever,
    query_tokens,
    rank_documents,
)


def test_query_tokens_drop_short_and_duplicate_words():
    assert query_tokens("O dano MORAL e o dano moral no CDC") == ["dano", "moral"]


def test_short_token_query_returns_nothing():
    docs = [KnowledgeDocument(name=f"d{i}", content_text="a de do cdc lei") for i in range(10)]
    assert rank_documents("a de do cdc lei", docs) == []


def test_higher_overlap_ranks_first():
    docs = [
        KnowledgeDocument(name="B", content_text="Apenas sobre contrato."),
        KnowledgeDocument(name="A", content_text="Contrato de locação com multa e rescisão."),
    ]
    ranked = rank_documents("contrato locação multa despejo", docs)
    assert [e.name for e in ranked] == ["A", "B"]


def test_score_is_presence_not_frequency():
    docs = [
        KnowledgeDocument(name="repetido", content_text="multa multa multa multa"),
        KnowledgeDocument(name="variado", content_text="multa e juros"),
    ]
    ranked = rank_documents("multa juros", docs)
    assert [e.name for e in ranked] == ["variado", "repetido"]


def test_substring_match_is_case_insensitive():
    docs = [KnowledgeDocument(name="CDC", content_text="DIREITOS DO CONSUMIDOR")]
    assert [e.name for e in rank_documents("Consumidores direitos", docs)] == ["CDC"]


def test_at_most_three_and_excerpts_truncated():
    docs = [KnowledgeDocument(name=f"d{i}", content_text="prazo " + "x" * 5000) for i in range(5)]
    ranked = rank_documents("prazo", docs)
    assert len(ranked) == 3
    assert all(len(e.excerpt) == 3000 for e in ranked)
    # ties keep fetch order
    assert [e.name for e in ranked] == ["d0", "d1", "d2"]


def test_zero_score_and_empty_documents_are_excluded():
    docs = [
        KnowledgeDocument(name="vazio", content_text=""),
        KnowledgeDocument(name="nulo", content_text=None),
        KnowledgeDocument(name="outro", content_text="assunto diferente"),
    ]
    assert rank_documents("usucapião", docs) == []


def test_retriever_swallows_store_errors():
    store = FakeStore(error=DocumentStoreError("boom"))
    excerpts = run(KnowledgeRetriever(store).retrieve("u1", "dano moral"))
    assert excerpts == []
    assert store.fetch_calls == ["u1"]


def test_retriever_skips_lookup_without_qualifying_tokens():
    store = FakeStore(documents=[KnowledgeDocument(name="x", content_text="o a de")])
    assert run(KnowledgeRetriever(store).retrieve("u1", "o a de")) == []
    assert store.fetch_calls == []


def test_retriever_returns_ranked_excerpts():
    store = FakeStore(documents=[KnowledgeDocument(name="Súmula", content_text="Dano moral in re ipsa")])
    excerpts = run(KnowledgeRetriever(store).retrieve("u1", "dano moral"))
    assert [(e.name, e.excerpt) for e in excerpts] == [("Súmula", "Dano moral in re ipsa")]
