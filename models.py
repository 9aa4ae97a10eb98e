from typing import Optional

from pydantic import BaseModel, ConfigDict


class SlideRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""


# Request bodies. Every field is optional here so the handlers can answer
# a missing field with 400 instead of the framework's 422.
class DocRequest(BaseModel):
    html_base64: Optional[str] = None
    access_token: Optional[str] = None
    file_name: Optional[str] = None


class SheetRequest(BaseModel):
    html_base64: Optional[str] = None
    access_token: Optional[str] = None
    title: Optional[str] = "Styled Sheet"


class SlidesRequest(BaseModel):
    html_base64: Optional[str] = None
    access_token: Optional[str] = None
    file_name: Optional[str] = None


class UrlResponse(BaseModel):
    url: str
