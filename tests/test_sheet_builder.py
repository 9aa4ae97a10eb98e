import pytest

from sheet_builder import (
    ROW_BACKGROUND_EVEN,
    ROW_BACKGROUND_ODD,
    build_sheet_format_requests,
    extract_table_values,
)

TABLE = """
<p>Report</p>
<table>
  <tr><th> Name </th><th>Score</th></tr>
  <tr><td>Ana</td><td> 9 </td></tr>
  <tr><td>Ben</td></tr>
  <tr><td>Cy</td><td>7</td></tr>
</table>
<table><tr><td>ignored</td></tr></table>
"""


def test_extract_first_table():
    assert extract_table_values(TABLE) == [
        ["Name", "Score"],
        ["Ana", "9"],
        ["Ben"],
        ["Cy", "7"],
    ]


def test_extract_without_table():
    with pytest.raises(ValueError):
        extract_table_values("<p>no table here</p>")


def test_header_format():
    header = build_sheet_format_requests([["a"]])[0]["repeatCell"]
    assert header["range"] == {"sheetId": 0, "startRowIndex": 0, "endRowIndex": 1}
    fmt = header["cell"]["userEnteredFormat"]
    assert fmt["backgroundColor"] == {"red": 0.25, "green": 0.32, "blue": 0.71}
    assert fmt["textFormat"]["bold"] is True
    assert fmt["textFormat"]["fontSize"] == 12
    assert fmt["horizontalAlignment"] == "LEFT"


def test_body_rows_alternate_by_parity():
    values = extract_table_values(TABLE)
    requests = build_sheet_format_requests(values)
    assert len(requests) == len(values)

    body = [r["repeatCell"] for r in requests[1:]]
    assert [b["range"]["startRowIndex"] for b in body] == [1, 2, 3]
    assert [b["cell"]["userEnteredFormat"]["backgroundColor"] for b in body] == [
        ROW_BACKGROUND_EVEN,
        ROW_BACKGROUND_ODD,
        ROW_BACKGROUND_EVEN,
    ]
    assert all(b["cell"]["userEnteredFormat"]["textFormat"] == {"fontSize": 11} for b in body)


def test_empty_table_only_header_request():
    assert len(build_sheet_format_requests([])) == 1
