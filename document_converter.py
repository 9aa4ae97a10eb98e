import base64
import binascii
import io
import logging
import re
from typing import Any, Dict, Optional

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString
from docx import Document
from docx.image.exceptions import UnrecognizedImageError
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml.parser import OxmlElement
from docx.oxml.ns import qn
from docx.shared import RGBColor
from docx.text.paragraph import Paragraph

from slide_extractor import parse_html

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"

# Hebrew (U+0590-U+05FF) and Arabic (U+0600-U+06FF)
_RTL_RE = re.compile(r"[\u0590-\u05FF\u0600-\u06FF]")
_BASE64_JUNK_RE = re.compile(r"[^A-Za-z0-9+/]")
_DATA_URI_RE = re.compile(r"data:image/[\w.+-]+;base64,(.*)", re.S)

HYPERLINK_COLOR = RGBColor(0x05, 0x63, 0xC1)

HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
BLOCK_TAGS = {"p", "div", "section", "article", "header", "footer", "main", "blockquote", "pre"}
LIST_TAGS = {"ul", "ol"}
BOLD_TAGS = {"strong", "b"}
ITALIC_TAGS = {"em", "i"}
UNDERLINE_TAGS = {"u", "ins"}
SKIP_TAGS = {"script", "style", "head", "title", "meta", "link"}


def decode_html(html_base64: str) -> str:
    """
    Decodes the base64 payload leniently: whitespace and characters outside
    the alphabet are ignored, URL-safe characters and missing padding are
    accepted, and invalid UTF-8 becomes U+FFFD.
    """
    data = html_base64.replace("-", "+").replace("_", "/")
    data = _BASE64_JUNK_RE.sub("", data)
    if len(data) % 4 == 1:
        # a lone trailing sextet carries no full byte
        data = data[:-1]
    data += "=" * (-len(data) % 4)
    try:
        raw = base64.b64decode(data)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return raw.decode("utf-8", errors="replace")


def is_rtl(html: str) -> bool:
    return _RTL_RE.search(html) is not None


def paragraph_direction(html: str) -> str:
    return "RIGHT_TO_LEFT" if is_rtl(html) else "LEFT_TO_RIGHT"


def build_direction_request(end_index: int, direction: str) -> Dict[str, Any]:
    return {
        "updateParagraphStyle": {
            # index 0 is the document start, the body begins at 1
            "range": {"startIndex": 1, "endIndex": end_index},
            "paragraphStyle": {"direction": direction},
            "fields": "direction",
        }
    }


def document_end_index(document: Dict[str, Any]) -> int:
    """Reads the end index of the last structural element of a Docs API document."""
    content = document.get("body", {}).get("content") or []
    if not content:
        raise ValueError("Document body is empty.")
    return content[-1]["endIndex"]


# --- HTML -> DOCX ---

def _list_style(base: str, level: int) -> str:
    # the default template ships levels 1-3 of each list style
    return base if level <= 1 else f"{base} {min(level, 3)}"


class _DocxWriter:
    """Walks a parsed HTML tree and writes it into a python-docx Document."""

    def __init__(self):
        self.document = Document()

    def write(self, root: Tag):
        self._blocks(root)
        return self.document

    def _blocks(self, node: Tag):
        paragraph: Optional[Paragraph] = None
        for child in node.children:
            if isinstance(child, NavigableString):
                if child.strip() and not self._is_comment(child):
                    # loose text between blocks
                    if paragraph is None:
                        paragraph = self.document.add_paragraph()
                    self._add_run(paragraph, child, {})
                continue
            if not isinstance(child, Tag) or child.name in SKIP_TAGS:
                continue

            name = child.name
            if name in HEADING_TAGS:
                heading = self.document.add_heading(level=HEADING_TAGS[name])
                self._inline(heading, child, {})
                paragraph = None
            elif name in LIST_TAGS:
                self._list(child, ordered=(name == "ol"))
                paragraph = None
            elif name == "table":
                self._table(child)
                paragraph = None
            elif name == "pre":
                self._inline(self.document.add_paragraph(), child, {"pre": True})
                paragraph = None
            elif name in BLOCK_TAGS:
                if child.find(list(HEADING_TAGS) + list(LIST_TAGS) + ["table", "p", "div", "pre"]):
                    self._blocks(child)
                else:
                    self._inline(self.document.add_paragraph(), child, {})
                paragraph = None
            elif name == "hr":
                self.document.add_paragraph()
                paragraph = None
            elif name in ("html", "body"):
                self._blocks(child)
                paragraph = None
            else:
                if paragraph is None:
                    paragraph = self.document.add_paragraph()
                self._inline_tag(paragraph, child, {})

    def _list(self, node: Tag, ordered: bool, level: int = 1):
        style = _list_style("List Number" if ordered else "List Bullet", level)
        for item in node.find_all("li", recursive=False):
            paragraph: Optional[Paragraph] = self.document.add_paragraph(style=style)
            for child in item.children:
                if isinstance(child, Tag) and child.name in LIST_TAGS:
                    self._list(child, ordered=(child.name == "ol"), level=level + 1)
                    paragraph = None
                    continue
                if isinstance(child, NavigableString):
                    if self._is_comment(child) or (paragraph is None and not child.strip()):
                        continue
                # text after a nested list continues the item below it
                if paragraph is None:
                    paragraph = self.document.add_paragraph(style=_list_style("List Continue", level))
                if isinstance(child, Tag):
                    self._inline_tag(paragraph, child, {})
                else:
                    self._add_run(paragraph, child, {})

    def _table(self, node: Tag):
        rows = [row for row in node.find_all("tr") if row.find_parent("table") is node]
        if not rows:
            return
        width = max(len(row.find_all(["td", "th"], recursive=False)) for row in rows)
        if width == 0:
            return
        table = self.document.add_table(rows=len(rows), cols=width)
        table.style = "Table Grid"
        for r, row in enumerate(rows):
            for c, cell in enumerate(row.find_all(["td", "th"], recursive=False)):
                paragraph = table.cell(r, c).paragraphs[0]
                self._inline(paragraph, cell, {"bold": True} if cell.name == "th" else {})

    def _inline(self, paragraph: Paragraph, node: Tag, fmt: Dict[str, bool]):
        fmt = dict(fmt)
        if node.name in BOLD_TAGS:
            fmt["bold"] = True
        elif node.name in ITALIC_TAGS:
            fmt["italic"] = True
        elif node.name in UNDERLINE_TAGS:
            fmt["underline"] = True

        for child in node.children:
            if isinstance(child, NavigableString):
                if not self._is_comment(child):
                    self._add_run(paragraph, child, fmt)
            elif isinstance(child, Tag):
                self._inline_tag(paragraph, child, fmt)

    def _inline_tag(self, paragraph: Paragraph, tag: Tag, fmt: Dict[str, bool]):
        if tag.name in SKIP_TAGS:
            return
        if tag.name == "br":
            paragraph.add_run().add_break()
        elif tag.name == "img":
            self._image(paragraph, tag)
        elif tag.name == "a" and tag.get("href"):
            self._hyperlink(paragraph, tag, fmt)
        else:
            self._inline(paragraph, tag, fmt)

    def _hyperlink(self, paragraph: Paragraph, tag: Tag, fmt: Dict[str, bool]):
        text = tag.get_text()
        if not fmt.get("pre"):
            text = re.sub(r"\s+", " ", text)
        if not text.strip():
            return

        # python-docx has no hyperlink writer: wrap a regular run in w:hyperlink
        r_id = paragraph.part.relate_to(tag["href"], RT.HYPERLINK, is_external=True)
        hyperlink = OxmlElement("w:hyperlink")
        hyperlink.set(qn("r:id"), r_id)
        run = paragraph.add_run(text)
        run.bold = fmt.get("bold") or None
        run.italic = fmt.get("italic") or None
        run.underline = True
        run.font.color.rgb = HYPERLINK_COLOR
        run._r.getparent().remove(run._r)
        hyperlink.append(run._r)
        paragraph._p.append(hyperlink)

    def _image(self, paragraph: Paragraph, tag: Tag):
        match = _DATA_URI_RE.match(tag.get("src", "").strip())
        if match is None:
            # remote images would need a fetch with the caller's network access
            logging.debug(f"Skipping image without inline data: {tag.get('src', '')[:80]}")
            return
        try:
            data = base64.b64decode(re.sub(r"\s+", "", match.group(1)))
            paragraph.add_run().add_picture(io.BytesIO(data))
        except (binascii.Error, UnrecognizedImageError) as e:
            logging.warning(f"Skipping unreadable inline image: {e}")

    @staticmethod
    def _add_run(paragraph: Paragraph, text: str, fmt: Dict[str, bool]):
        text = str(text)
        if not fmt.get("pre"):
            text = re.sub(r"\s+", " ", text)
        if not text.strip() and not paragraph.text:
            return
        # Run.text turns "\n" into line breaks, which keeps <pre> layout
        run = paragraph.add_run(text)
        run.bold = fmt.get("bold") or None
        run.italic = fmt.get("italic") or None
        run.underline = fmt.get("underline") or None

    @staticmethod
    def _is_comment(node: NavigableString) -> bool:
        # comments, doctypes, CDATA and friends
        return isinstance(node, PreformattedString)


def html_to_docx(html: str) -> bytes:
    """Converts an HTML document into DOCX bytes, entirely in memory."""
    soup = parse_html(html)
    root = soup.body or soup
    document = _DocxWriter().write(root)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
