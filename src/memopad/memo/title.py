"""Derive a display title from note content."""

from __future__ import annotations

import re

import frontmatter

UNTITLED = "Untitled"

_HEADING = re.compile(r"^#+\s*")


def extract_title(content: str) -> str:
    """First line of the body without heading markers.

    A YAML front matter block is skipped; its `title` key wins when set.
    """
    if not content:
        return ""

    body = content
    try:
        post = frontmatter.loads(content)
        meta_title = post.metadata.get("title")
        if isinstance(meta_title, str) and meta_title.strip():
            return meta_title.strip()
        body = post.content
    except Exception:
        # Unparseable front matter: treat the text as plain body.
        pass

    for line in body.splitlines():
        title = _HEADING.sub("", line.strip()).strip()
        if title:
            return title
    return UNTITLED
