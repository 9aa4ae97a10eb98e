from typing import Any, Dict, List

from slide_extractor import parse_html

VALUES_ORIGIN = "Sheet1!A1"
DEFAULT_SHEET_ID = 0

# Colors (Sheets API expects 0..1 floats)
HEADER_BACKGROUND = {"red": 0.25, "green": 0.32, "blue": 0.71}
HEADER_FOREGROUND = {"red": 1, "green": 1, "blue": 1}
ROW_BACKGROUND_EVEN = {"red": 1, "green": 1, "blue": 1}
ROW_BACKGROUND_ODD = {"red": 0.98, "green": 0.98, "blue": 0.98}
HEADER_FONT_SIZE = 12
BODY_FONT_SIZE = 11


def extract_table_values(html: str) -> List[List[str]]:
    """
    Reads the first <table> of the document into rows of trimmed cell text.
    Rows keep their own length; nothing pads them to a rectangle.
    """
    soup = parse_html(html)
    table = soup.find("table")
    if table is None:
        raise ValueError("No <table> element found in HTML.")

    return [
        [cell.get_text().strip() for cell in row.find_all(["td", "th"])]
        for row in table.find_all("tr")
    ]


def header_format_request(sheet_id: int = DEFAULT_SHEET_ID) -> Dict[str, Any]:
    return {
        "repeatCell": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": 0,
                "endRowIndex": 1,
            },
            "cell": {
                "userEnteredFormat": {
                    "backgroundColor": HEADER_BACKGROUND,
                    "horizontalAlignment": "LEFT",
                    "textFormat": {
                        "foregroundColor": HEADER_FOREGROUND,
                        "fontSize": HEADER_FONT_SIZE,
                        "bold": True,
                    },
                },
            },
            "fields": "userEnteredFormat(backgroundColor,textFormat,horizontalAlignment)",
        }
    }


def body_row_format_request(row_index: int, sheet_id: int = DEFAULT_SHEET_ID) -> Dict[str, Any]:
    """Formats body row `row_index` (0 = first row under the header)."""
    background = ROW_BACKGROUND_EVEN if row_index % 2 == 0 else ROW_BACKGROUND_ODD
    return {
        "repeatCell": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": row_index + 1,
                "endRowIndex": row_index + 2,
            },
            "cell": {
                "userEnteredFormat": {
                    "backgroundColor": background,
                    "textFormat": {"fontSize": BODY_FONT_SIZE},
                },
            },
            "fields": "userEnteredFormat(backgroundColor,textFormat.fontSize)",
        }
    }


def build_sheet_format_requests(values: List[List[str]], sheet_id: int = DEFAULT_SHEET_ID) -> List[Dict[str, Any]]:
    requests = [header_format_request(sheet_id)]
    requests.extend(body_row_format_request(i, sheet_id) for i in range(len(values) - 1))
    return requests
