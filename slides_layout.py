import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel

from config import DEFAULT_BACKGROUND_IMAGE_URL, DEFAULT_FOOTER_TEXT, DEFAULT_LOGO_IMAGE_URL
from models import SlideRecord


# --- 1. Design Constants ---
# Google Slides default page (16:9), in points
PAGE_WIDTH = 720
PAGE_HEIGHT = 405
# Logo (bottom left)
LOGO_SIZE = 40
LOGO_LEFT = 10
LOGO_TOP = 340
# Footer (bottom right)
FOOTER_WIDTH = 200
FOOTER_HEIGHT = 20
FOOTER_LEFT = 540
FOOTER_TOP = 370
# Title and description boxes
TEXT_LEFT = 60
TEXT_WIDTH = 600
TITLE_TOP = 50
TITLE_HEIGHT = 50
DESCRIPTION_HEIGHT = 80
# Description offset per endpoint
DESCRIPTION_TOP = 70
SLIDESHOW_DESCRIPTION_TOP = 100
# Font Sizes
TITLE_FONT_SIZE = 18
DESCRIPTION_FONT_SIZE = 14


class SlideTheme(BaseModel):
    background_image_url: str = DEFAULT_BACKGROUND_IMAGE_URL
    logo_image_url: str = DEFAULT_LOGO_IMAGE_URL
    footer_text: str = DEFAULT_FOOTER_TEXT


DEFAULT_THEME = SlideTheme()


# --- 2. Helper Functions ---

def _element_properties(page_id: str, width: float, height: float, left: float, top: float) -> Dict[str, Any]:
    return {
        "pageObjectId": page_id,
        "size": {
            "height": {"magnitude": height, "unit": "PT"},
            "width": {"magnitude": width, "unit": "PT"},
        },
        "transform": {
            "scaleX": 1,
            "scaleY": 1,
            "translateX": left,
            "translateY": top,
            "unit": "PT",
        },
    }


def create_slide_request(slide_id: str) -> Dict[str, Any]:
    return {
        "createSlide": {
            "objectId": slide_id,
            "slideLayoutReference": {"predefinedLayout": "BLANK"},
        }
    }


def create_image_request(object_id: str, page_id: str, url: str,
                         width: float, height: float, left: float, top: float) -> Dict[str, Any]:
    return {
        "createImage": {
            "objectId": object_id,
            "url": url,
            "elementProperties": _element_properties(page_id, width, height, left, top),
        }
    }


def create_text_box_request(object_id: str, page_id: str,
                            width: float, height: float, left: float, top: float) -> Dict[str, Any]:
    return {
        "createShape": {
            "objectId": object_id,
            "shapeType": "TEXT_BOX",
            "elementProperties": _element_properties(page_id, width, height, left, top),
        }
    }


def insert_text_request(object_id: str, text: str) -> Dict[str, Any]:
    return {
        "insertText": {
            "objectId": object_id,
            "text": text,
            "insertionIndex": 0,
        }
    }


def text_style_request(object_id: str, font_size: float, bold: bool) -> Dict[str, Any]:
    return {
        "updateTextStyle": {
            "objectId": object_id,
            "style": {
                "fontSize": {"magnitude": font_size, "unit": "PT"},
                "bold": bold,
            },
            "fields": "fontSize,bold",
        }
    }


def _text_requests(object_id: str, text: str, font_size: Optional[float] = None,
                   bold: bool = False) -> List[Dict[str, Any]]:
    # The Slides API refuses to insert (or style) an empty string
    if not text:
        return []
    requests = [insert_text_request(object_id, text)]
    if font_size is not None:
        requests.append(text_style_request(object_id, font_size, bold))
    return requests


# --- 3. Slide Projection ---

def slide_requests(slide: SlideRecord, ordinal: int,
                   description_top: float = DESCRIPTION_TOP,
                   theme: SlideTheme = DEFAULT_THEME) -> List[Dict[str, Any]]:
    """Builds the commands for one slide. Every object id embeds the 1-based ordinal."""
    slide_id = f"slide_{ordinal}"
    footer_id = f"footer_{slide_id}"
    title_id = f"title_{slide_id}"
    desc_id = f"desc_{slide_id}"

    requests = [create_slide_request(slide_id)]

    # Full-bleed background
    requests.append(create_image_request(
        f"bg_{slide_id}", slide_id, theme.background_image_url,
        PAGE_WIDTH, PAGE_HEIGHT, 0, 0,
    ))

    # Logo (bottom left)
    requests.append(create_image_request(
        f"logo_{slide_id}", slide_id, theme.logo_image_url,
        LOGO_SIZE, LOGO_SIZE, LOGO_LEFT, LOGO_TOP,
    ))

    # Footer (bottom right)
    requests.append(create_text_box_request(
        footer_id, slide_id, FOOTER_WIDTH, FOOTER_HEIGHT, FOOTER_LEFT, FOOTER_TOP,
    ))
    requests.extend(_text_requests(footer_id, theme.footer_text))

    # Title (top)
    requests.append(create_text_box_request(
        title_id, slide_id, TEXT_WIDTH, TITLE_HEIGHT, TEXT_LEFT, TITLE_TOP,
    ))
    requests.extend(_text_requests(title_id, slide.title, TITLE_FONT_SIZE, bold=True))

    # Description (below the title)
    requests.append(create_text_box_request(
        desc_id, slide_id, TEXT_WIDTH, DESCRIPTION_HEIGHT, TEXT_LEFT, description_top,
    ))
    requests.extend(_text_requests(desc_id, slide.description, DESCRIPTION_FONT_SIZE, bold=False))

    return requests


def build_slide_requests(slides: Sequence[SlideRecord],
                         description_top: float = DESCRIPTION_TOP,
                         theme: SlideTheme = DEFAULT_THEME) -> List[Dict[str, Any]]:
    """Projects slide records onto a single batchUpdate request list."""
    requests: List[Dict[str, Any]] = []
    for index, slide in enumerate(slides):
        logging.debug(f"Projecting slide {index + 1}: {slide.title!r}")
        requests.extend(slide_requests(slide, index + 1, description_top, theme))
    return requests
