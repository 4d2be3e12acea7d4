import io

import pandas as pd
import pytest

from core.common.exceptions import BadRequest
from core.imports.spreadsheet import read_first_sheet

HEADER_CSV = "student_name,email,phone,school,city\n"


def test_csv_rows_are_strings_with_header_consumed():
    content = (
        "student_name, email ,phone,school,city\n"
        "Ana Souza,ana@example.com,+5511987654321,Colegio Dante,Sao Paulo\n"
        "Bia,,00123,,\n"
    ).encode()

    rows = read_first_sheet(content, "leads.csv")
    assert len(rows) == 2
    assert rows[0]["email"] == "ana@example.com"
    assert rows[1] == {"student_name": "Bia", "email": "", "phone": "00123", "school": "", "city": ""}


def test_xlsx_first_sheet_is_read():
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(
            [{"student_name": "Ana Souza", "email": "ana@example.com", "phone": "+5511987654321",
              "school": "Colegio Dante", "city": "Sao Paulo"}]
        ).to_excel(writer, sheet_name="Leads", index=False)
        pd.DataFrame([{"ignored": "x"}]).to_excel(writer, sheet_name="Other", index=False)

    rows = read_first_sheet(buf.getvalue(), "LEADS.XLSX")
    assert rows == [
        {"student_name": "Ana Souza", "email": "ana@example.com", "phone": "+5511987654321",
         "school": "Colegio Dante", "city": "Sao Paulo"}
    ]


def test_unknown_extension_rejected():
    with pytest.raises(BadRequest):
        read_first_sheet(b"a,b\n1,2\n", "leads.txt")


def test_empty_csv_rejected():
    with pytest.raises(BadRequest) as exc:
        read_first_sheet(b"", "leads.csv")
    assert exc.value.message == "Spreadsheet is empty"


def test_corrupt_workbook_rejected():
    with pytest.raises(BadRequest):
        read_first_sheet(b"definitely not a zip", "leads.xlsx")


def test_fully_blank_rows_are_skipped():
    buf = io.BytesIO()
    pd.DataFrame(
        [
            {"student_name": "Ana Souza", "email": "ana@example.com", "phone": "+5511987654321",
             "school": "Colegio Dante", "city": "Sao Paulo"},
            {"student_name": None, "email": None, "phone": None, "school": None, "city": None},
            {"student_name": "Bia Lima", "email": "bia@example.com", "phone": "+5511912345678",
             "school": "Colegio Dante", "city": "Santos"},
        ]
    ).to_excel(buf, index=False, engine="openpyxl")

    rows = read_first_sheet(buf.getvalue(), "leads.xlsx")
    assert [r["student_name"] for r in rows] == ["Ana Souza", "Bia Lima"]


def test_comma_only_csv_lines_are_skipped_but_partial_rows_kept():
    content = (HEADER_CSV + ",,,,\n" + "Ana Souza,,,,\n" + ",,,,\n").encode()
    assert read_first_sheet(content, "leads.csv") == [
        {"student_name": "Ana Souza", "email": "", "phone": "", "school": "", "city": ""}
    ]
