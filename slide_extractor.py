import re
from typing import Callable, Dict, List

from bs4 import BeautifulSoup, Tag

from models import SlideRecord

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapses runs of whitespace to one space and trims the result."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def parse_html(html: str) -> BeautifulSoup:
    # lxml wraps bare fragments in <html><body>, the same tree a browser builds
    return BeautifulSoup(html, "lxml")


def _body_children(soup: BeautifulSoup) -> List[Tag]:
    body = soup.body
    if body is None:
        return []
    return [child for child in body.children if isinstance(child, Tag)]


def is_bold_only_title(element: Tag) -> bool:
    """
    A paragraph is a title when its whole text is exactly the text of the
    <strong> it contains, e.g. <p><strong>Intro</strong></p>.
    """
    if element.name != "p":
        return False
    strong = element.find("strong")
    if strong is None:
        return False
    return normalize_text(element.get_text()) == normalize_text(strong.get_text())


def extract_slides_by_bold_titles(html: str) -> List[SlideRecord]:
    """
    Splits a flat document into slides at every bold-only paragraph.

    The text of every block between two titles is whitespace-normalized and
    becomes the description of the preceding title. Blocks before the first
    title have no slide to go to and are dropped.
    """
    soup = parse_html(html)

    slides: List[Dict[str, str]] = []
    current = None
    buffer: List[str] = []

    for element in _body_children(soup):
        if is_bold_only_title(element):
            # Close the previous slide with whatever was collected since its title
            if current is not None:
                current["description"] = "\n\n".join(buffer).strip()
            current = {"title": normalize_text(element.get_text()), "description": ""}
            slides.append(current)
            buffer = []
            continue

        text = normalize_text(element.get_text())
        if text:
            buffer.append(text)

    # Trailing content belongs to the last slide
    if current is not None and buffer:
        current["description"] = "\n\n".join(buffer).strip()

    return [
        SlideRecord(title=s["title"], description=s["description"])
        for s in slides
        if s["title"]
    ]


def extract_slides_by_headings(html: str) -> List[SlideRecord]:
    """
    Makes one slide per <h2>. The description is the raw text of every
    following sibling up to the next <h2>, one line per sibling.
    """
    soup = parse_html(html)
    slides = []

    for heading in soup.find_all("h2"):
        title = heading.get_text().strip()

        description = ""
        for sibling in heading.find_next_siblings():
            if sibling.name == "h2":
                break
            description += sibling.get_text() + "\n"  # keep line breaks

        slides.append(SlideRecord(title=title, description=description.strip()))

    return slides


SEGMENTERS: Dict[str, Callable[[str], List[SlideRecord]]] = {
    "bold-titles": extract_slides_by_bold_titles,
    "headings": extract_slides_by_headings,
}


def extract_slides(html: str, strategy: str = "bold-titles") -> List[SlideRecord]:
    try:
        segmenter = SEGMENTERS[strategy]
    except KeyError:
        raise ValueError(f"Unknown slide segmentation strategy: {strategy!r}") from None
    return segmenter(html)
