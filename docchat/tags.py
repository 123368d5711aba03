"""Heuristic tag extraction from answer text: key points, topics, sentiment."""

import re
from dataclasses import dataclass, field

_MAX_ITEMS = 5

_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+?)\s*$")
_HEADING_RE = re.compile(r"^\s*#{1,6}\s+(.+?)\s*$")
_MARKUP_RE = re.compile(r"[*_`]+")

_TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Technology": ("software", "programming", "code", "digital", "web", "app", "development"),
    "Business": ("business", "startup", "market", "finance", "company", "investment", "strategy"),
    "Education": ("learn", "course", "lesson", "teach", "school", "university", "training"),
    "Science": ("science", "research", "experiment", "physics", "chemistry", "biology"),
    "Health": ("health", "fitness", "medical", "wellness", "diet", "medicine", "nutrition"),
    "AI": ("artificial intelligence", "machine learning", "neural", "deep learning", "llm"),
}

_POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "benefit", "benefits", "effective", "improve", "improved",
    "success", "successful", "strong", "valuable", "positive", "clear", "recommended",
})
_NEGATIVE_WORDS = frozenset({
    "bad", "poor", "fail", "failure", "failed", "risk", "risks", "problem", "problems",
    "weak", "negative", "decline", "loss", "issue", "issues", "concern", "concerns",
})


@dataclass
class ContentTags:
    key_points: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    sentiment: str = "neutral"


def _clean(line: str) -> str:
    return _MARKUP_RE.sub("", line).strip().rstrip(":")


def extract_key_points(text: str) -> list[str]:
    points: list[str] = []
    for line in text.splitlines():
        match = _BULLET_RE.match(line)
        if match:
            point = _clean(match.group(1))
            if point and point not in points:
                points.append(point)
        if len(points) >= _MAX_ITEMS:
            break
    return points


def extract_topics(text: str) -> list[str]:
    """Markdown headings first, then keyword-table topics."""
    topics: list[str] = []
    for line in text.splitlines():
        match = _HEADING_RE.match(line)
        if match:
            heading = _clean(match.group(1))
            if heading and heading not in topics:
                topics.append(heading)
    lowered = text.lower()
    for topic, keywords in _TOPIC_KEYWORDS.items():
        if topic not in topics and any(re.search(rf"\b{re.escape(k)}\b", lowered) for k in keywords):
            topics.append(topic)
    return topics[:_MAX_ITEMS]


def analyze_sentiment(text: str) -> str:
    words = re.findall(r"[a-z]+", text.lower())
    positive = sum(1 for w in words if w in _POSITIVE_WORDS)
    negative = sum(1 for w in words if w in _NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def extract_tags(text: str) -> ContentTags:
    return ContentTags(
        key_points=extract_key_points(text),
        topics=extract_topics(text),
        sentiment=analyze_sentiment(text),
    )
