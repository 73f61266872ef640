"""Reading texts stored as markdown, one file per topic.

File format:

    # Topic title
    Description lines...

    ## First text title
    Paragraph one.
    Paragraph two.

    ---

    ## Second text title
    ...

The topic ID is the file name without ".md"; a text ID is its slugified
title. Every non-empty line of a text is one paragraph.
"""

import logging
import re
from pathlib import Path

from models import Text, Topic

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_DIR = Path(__file__).parent / "texts" / "a2"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Turn a text title into its ID, e.g. "Im Café" -> "im-caf"."""
    return _SLUG_RE.sub("-", title.lower()).strip("-")


def parse_topic(topic_id: str, content: str) -> Topic | None:
    """Parse one topic file.

    Args:
        topic_id: ID to give the topic.
        content: Markdown source of the file.

    Returns:
        The topic, or None if the file has no "# " title line.
    """
    title = ""
    description_lines: list[str] = []
    texts: list[Text] = []
    current: Text | None = None
    in_description = True

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if line.startswith("# "):
            title = line[2:].strip()
            in_description = True
        elif line.startswith("## "):
            in_description = False
            text_title = line[3:].strip()
            current = Text(id=slugify(text_title), title=text_title)
            texts.append(current)
        elif line == "---" or not line:
            continue
        elif in_description:
            description_lines.append(line)
        elif current is not None:
            current.paragraphs.append(line)

    if not title:
        return None

    return Topic(
        id=topic_id,
        title=title,
        description="\n".join(description_lines),
        texts=texts,
    )


class ContentRepository:
    """Topics and texts read from a directory of markdown files."""

    def __init__(self, content_dir: Path = DEFAULT_CONTENT_DIR):
        self.content_dir = content_dir

    def get_topics(self) -> list[Topic]:
        """Load every topic, sorted by file name."""
        if not self.content_dir.is_dir():
            logger.warning("Content directory %s does not exist", self.content_dir)
            return []

        topics = []
        for path in sorted(self.content_dir.glob("*.md")):
            topic = parse_topic(path.stem, path.read_text(encoding="utf-8"))
            if topic is None:
                logger.warning("Skipping %s: no '# ' title line", path.name)
                continue
            topics.append(topic)
        return topics

    def get_topic(self, topic_id: str) -> Topic | None:
        for topic in self.get_topics():
            if topic.id == topic_id:
                return topic
        return None

    def get_text(self, topic_id: str, text_id: str) -> Text | None:
        topic = self.get_topic(topic_id)
        if topic is None:
            return None
        return topic.get_text(text_id)
