import io
from typing import Dict, List

import pandas as pd

from core.common.exceptions import BadRequest

ALLOWED_EXTENSIONS = (".xls", ".xlsx", ".csv")


def read_first_sheet(content: bytes, filename: str) -> List[Dict[str, str]]:
    """
    Rows of the first sheet as string-keyed dicts, every cell as a string,
    empty cells as "". Row 1 of the sheet is the header; fully blank rows
    are dropped.
    """
    name = (filename or "").lower()
    if not name.endswith(ALLOWED_EXTENSIONS):
        raise BadRequest("Invalid format. Use .xls, .xlsx or .csv")

    buf = io.BytesIO(content)
    try:
        if name.endswith(".csv"):
            df = pd.read_csv(buf, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(buf, sheet_name=0, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise BadRequest("Spreadsheet is empty")
    except Exception as e:
        # openpyxl/xlrd raise their own types on corrupt or sheetless workbooks
        raise BadRequest("Could not read spreadsheet", details={"reason": str(e)})

    df.columns = [str(c).strip() for c in df.columns]
    df = df.fillna("")
    # fully blank lines are not data rows
    df = df[(df != "").any(axis=1)]

    return [{k: ("" if v is None else str(v)) for k, v in rec.items()} for rec in df.to_dict("records")]
