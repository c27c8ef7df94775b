"""System-prompt synthesis and conversation filtering.

The outbound conversation is always: one synthesized system prompt, then the
caller's ``user``/``assistant`` turns in their original order.  Caller
supplied ``system`` turns are never forwarded.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from thaina_juridico.domain.entities import ChatMessage, KnowledgeExcerpt, Mode, Role

# ── Prompt templates ────────────────────────────────────────────────────────

DISCLAIMER = "A análise depende do caso concreto e da prova disponível."

_PERSONAS: dict[Mode, str] = {
    Mode.PF: """\
Você é a assistente jurídica Thainá, especializada em direito civil e do consumidor (PF).
Estilo: claro, humano, explica termos jurídicos de forma simples.""",
    Mode.PJ: """\
Você é a assistente jurídica Thainá, especializada em direito empresarial (PJ).
Estilo: técnico, objetivo, foco em risco jurídico, compliance e estratégia.""",
}

_SOURCE_RULES = """\
REGRAS OBRIGATÓRIAS:
1. SEMPRE cite a fonte oficial (Planalto, LexML, TJPR, CNJ) com link quando aplicável
2. Se não encontrar fonte confiável, diga explicitamente "não encontrei fonte oficial"
3. NUNCA invente artigos ou leis"""

_STRUCTURES: dict[Mode, str] = {
    Mode.PF: """\
4. Estrutura de resposta:
   a) Resumo simples (até 8 linhas)
   b) Base legal: artigos/leis com links oficiais
   c) Riscos do caso (sem alarmismo)
   d) Checklist prático de documentos/provas""",
    Mode.PJ: """\
4. Estrutura de resposta:
   a) Resumo técnico (até 8 linhas)
   b) Base legal: artigos/leis com links oficiais
   c) Riscos e teses contrárias
   d) Checklist prático de compliance/documentos
   e) Observações estratégicas (prazo, custo, viabilidade)""",
}

_KNOWLEDGE_HEADER = """\
BASE DE CONHECIMENTO DO ESCRITÓRIO:
Os trechos abaixo vêm de documentos cadastrados pelo usuário. Use-os quando \
forem relevantes para a pergunta e, ao utilizá-los, cite o documento de \
origem pelo nome (ex.: "Fonte: <nome do documento>")."""


# ── Public API ──────────────────────────────────────────────────────────────


def build_system_prompt(mode: Mode, excerpts: Sequence[KnowledgeExcerpt] = ()) -> str:
    """Persona + rule block, plus a knowledge block only when excerpts exist."""
    rules = f"{_SOURCE_RULES}\n{_STRUCTURES[mode]}\n5. Finalize com: \"{DISCLAIMER}\""
    prompt = f"{_PERSONAS[mode]}\n\n{rules}"
    if excerpts:
        prompt = f"{prompt}\n\n{render_knowledge_block(excerpts)}"
    return prompt


def render_knowledge_block(excerpts: Sequence[KnowledgeExcerpt]) -> str:
    sections = [f"### Documento: {e.name}\n{e.excerpt}" for e in excerpts]
    return _KNOWLEDGE_HEADER + "\n\n" + "\n\n".join(sections)


def filter_conversation(messages: Iterable[ChatMessage]) -> list[ChatMessage]:
    """Keep only ``user`` and ``assistant`` turns, preserving order."""
    return [m for m in messages if m.role in (Role.USER, Role.ASSISTANT)]


def latest_user_query(messages: Sequence[ChatMessage]) -> str | None:
    """Content of the most recent ``user`` message, if any."""
    for message in reversed(messages):
        if message.role is Role.USER:
            return message.content
    return None
