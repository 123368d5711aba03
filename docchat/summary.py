"""Document summary: one orchestrated answer plus extracted tags."""

import logging

from docchat.context import DocumentContext
from docchat.models import Summary
from docchat.orchestrator import Orchestrator
from docchat.tags import extract_tags

logger = logging.getLogger(__name__)


async def summarize(orchestrator: Orchestrator, document: DocumentContext, summary_prompt: str) -> Summary:
    """Summarize a document through the full fan-out and synthesis pipeline.

    Raises:
        ChatError: Whatever the orchestrator raises.
    """
    question = summary_prompt.format(source_name=document.source_name)
    text = await orchestrator.answer(
        question,
        context=document.text,
        source_name=document.source_name,
    )
    tags = extract_tags(text)
    logger.info(
        "Summary for %s: %d key points, %d topics, %s",
        document.source_name,
        len(tags.key_points),
        len(tags.topics),
        tags.sentiment,
    )
    return Summary(
        source_name=document.source_name,
        text=text,
        key_points=tags.key_points,
        topics=tags.topics,
        sentiment=tags.sentiment,
    )
