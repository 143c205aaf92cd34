"""Grounded system prompt composition for the coach."""

import re
from datetime import date

from app.core.coach_prompts import (
    CITATION_RULES,
    DATE_RULES_TEMPLATE,
    NO_RESOURCES_SENTENCE,
    RESOURCE_BLOCK_TEMPLATE,
)
from app.core.schemas_coach import RetrievedDocument

_BRACKETED_RE = re.compile(r"\[([^\[\]\n]+)\]")


def format_document_block(index: int, document: RetrievedDocument) -> str:
    """Render one retrieved document as a numbered source block."""
    return RESOURCE_BLOCK_TEMPLATE.format(
        index=index,
        title=document.title,
        document_type=document.document_type,
        citation=document.citation_tag,
        relevance=document.similarity_percent,
        content=document.content.strip(),
    )


def format_resources_section(documents: list[RetrievedDocument]) -> str:
    """Render the context section. Never empty: falls back to a fixed sentence."""
    if not documents:
        return NO_RESOURCES_SENTENCE
    return "\n\n".join(
        format_document_block(i, doc) for i, doc in enumerate(documents, start=1)
    )


def compose_system_prompt(
    base_instructions: str,
    documents: list[RetrievedDocument],
    current_date: date | str,
    extra_instructions: list[str] | None = None,
) -> str:
    """
    Build the grounded system prompt.

    Args:
        base_instructions: Coach persona and plan format instructions
        documents: Retrieved documents, most similar first
        current_date: Embedded verbatim; plan dates must not precede it
        extra_instructions: Caller-supplied system messages, appended in order

    Returns:
        System prompt string (deterministic for identical inputs)
    """
    date_text = current_date.isoformat() if isinstance(current_date, date) else str(current_date)

    sections = [base_instructions.strip()]
    for instruction in extra_instructions or []:
        if instruction.strip():
            sections.append(instruction.strip())

    sections.append("TRAINING RESOURCES:\n" + format_resources_section(documents))
    if documents:
        sections.append(CITATION_RULES)
    sections.append(DATE_RULES_TEMPLATE.format(current_date=date_text))

    return "\n\n".join(sections)


def find_cited_documents(text: str, documents: list[RetrievedDocument]) -> list[str]:
    """Citation tags of the documents the assistant referenced in ``text``.

    A document counts as cited when a bracketed span in the text contains
    its title. Order follows ``documents``; each tag appears once.
    """
    spans = [m.group(1).lower() for m in _BRACKETED_RE.finditer(text)]
    if not spans:
        return []

    cited: list[str] = []
    for document in documents:
        title = document.title.strip().lower()
        if not title:
            continue
        tag = document.citation_tag
        if tag not in cited and any(title in span for span in spans):
            cited.append(tag)
    return cited
