"""Text rewriting: replace [Group/Action] tags with glyph references"""
import logging
import re
from typing import List

from core.settings import DEFAULT_CLOSE_TAG, DEFAULT_OPEN_TAG, SHEET_PLACEHOLDER, SPRITE_PLACEHOLDER
from resolver import ResolveError, TagResolver

LOG = logging.getLogger("promptbridge.rewriter")

_TOKEN_RE = re.compile(re.escape(SPRITE_PLACEHOLDER) + "|" + re.escape(SHEET_PLACEHOLDER))


def find_tags(text: str, open_tag: str = DEFAULT_OPEN_TAG, close_tag: str = DEFAULT_CLOSE_TAG) -> List[str]:
    """Return raw tag texts in first-occurrence order, without duplicates.

    Every open delimiter starts a tag that runs to the next close delimiter.
    An open delimiter with no close after it is skipped.
    """
    tags: List[str] = []
    pos = text.find(open_tag)
    while pos >= 0:
        start = pos + len(open_tag)
        end = text.find(close_tag, start)
        if end < 0:
            LOG.debug("unterminated tag at offset %d ignored", pos)
        else:
            tag = text[start:end]
            if tag not in tags:
                tags.append(tag)
        pos = text.find(open_tag, pos + 1)
    return tags


class TextRewriter:
    def __init__(
        self,
        resolver: TagResolver,
        open_tag: str = DEFAULT_OPEN_TAG,
        close_tag: str = DEFAULT_CLOSE_TAG,
        template: str = SPRITE_PLACEHOLDER,
        rich_text_tags: str = "",
    ):
        self.resolver = resolver
        self.open_tag = open_tag
        self.close_tag = close_tag
        self.template = template or SPRITE_PLACEHOLDER
        self.rich_text_tags = rich_text_tags

    def format(self, text: str) -> str:
        # Identical tags resolve identically, so every occurrence of a tag gets
        # the same text. One pass over the input keeps rendered output from
        # being matched by later tags.
        tags = find_tags(text, self.open_tag, self.close_tag)
        if not tags:
            return text
        rendered = {f"{self.open_tag}{tag}{self.close_tag}": self.render_tag(tag) for tag in tags}
        pattern = re.compile("|".join(re.escape(t) for t in sorted(rendered, key=len, reverse=True)))
        return pattern.sub(lambda m: rendered[m.group(0)], text)

    def render_tag(self, tag: str) -> str:
        try:
            resolution = self.resolver.resolve(tag)
        except ResolveError as e:
            return str(e)
        sheet = resolution.dataset.sprite_sheet_id
        return "".join(self.render_reference(sheet, entry.glyph_id) for entry in resolution.entries)

    def render_reference(self, sheet_id: str, glyph_id: str) -> str:
        values = {SPRITE_PLACEHOLDER: glyph_id, SHEET_PLACEHOLDER: sheet_id}
        return _TOKEN_RE.sub(lambda m: values[m.group(0)], self.template) + self.rich_text_tags
