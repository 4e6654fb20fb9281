"""
CSV Normalizer

Rewrites an admin-provided product CSV into the exact layout the import
endpoint expects: canonical headers, semicolon delimiter, every field
quoted, CRLF line endings. Header spellings are matched loosely through an
alias table and the input delimiter is detected from the header line.
"""

import csv
import io
import re
from typing import Dict, List, Union

from product_admin.core.errors import ErrorResponse
from product_admin.core.logger import logger
from product_admin.models.files import UploadedFile

CANONICAL_HEADERS = [
    "Product Title", "Description", "Category", "Color", "IMG", "Size", "Quantity", "Price",
]

# Keys are compared after normalize_key(), so separators are already removed
HEADER_ALIASES: Dict[str, str] = {
    "producttitle": "Product Title",
    "title": "Product Title",
    "productname": "Product Title",
    "name": "Product Title",
    "description": "Description",
    "desc": "Description",
    "category": "Category",
    "categories": "Category",
    "cate": "Category",
    "color": "Color",
    "colour": "Color",
    "img": "IMG",
    "image": "IMG",
    "images": "IMG",
    "imageurl": "IMG",
    "imageurls": "IMG",
    "imagelink": "IMG",
    "imagelinks": "IMG",
    "size": "Size",
    "sizecode": "Size",
    "quantity": "Quantity",
    "qty": "Quantity",
    "stock": "Quantity",
    "price": "Price",
    "unitprice": "Price",
    "cost": "Price",
}

DELIMITER_CANDIDATES = [";", ",", "\t"]
DEFAULT_DELIMITER = ";"
OUTPUT_DELIMITER = ";"
BOM = "\ufeff"

_KEY_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_key(key: str) -> str:
    """'Product_Title ' -> 'producttitle'"""
    return _KEY_SEPARATORS.sub("", key.lstrip(BOM).strip().lower())


def count_unquoted(line: str, delimiter: str) -> int:
    """Occurrences of the delimiter outside double-quoted sections"""
    count = 0
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            count += 1
    return count


def detect_delimiter(text: str) -> str:
    header = text.lstrip(BOM).splitlines()[0] if text.strip() else ""
    best, best_score = DEFAULT_DELIMITER, 0
    for candidate in DELIMITER_CANDIDATES:
        score = count_unquoted(header, candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best


def _decode(content: Union[bytes, str]) -> str:
    if isinstance(content, str):
        return content.lstrip(BOM)
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ErrorResponse("Invalid CSV: file must be UTF-8 encoded", status_code=400)


def normalize_csv(content: Union[bytes, str]) -> str:
    """
    Normalize CSV text for the import endpoint.

    Args:
        content: Raw CSV bytes or text

    Returns:
        Semicolon-delimited, fully quoted CSV with CRLF line endings

    Raises:
        ErrorResponse: If the CSV has no data rows or lacks required columns
    """
    text = _decode(content)
    delimiter = detect_delimiter(text)

    try:
        records = list(csv.reader(io.StringIO(text), delimiter=delimiter))
    except csv.Error as e:
        raise ErrorResponse(f"Invalid CSV: {e}", status_code=400)

    records = [record for record in records if any(cell.strip() for cell in record)]
    if len(records) < 2:
        raise ErrorResponse("CSV has no data", status_code=400)

    header, data = records[0], records[1:]
    columns = [HEADER_ALIASES.get(normalize_key(key)) for key in header]

    missing = [name for name in CANONICAL_HEADERS if name not in columns]
    if missing:
        raise ErrorResponse(
            f"Missing required columns: {', '.join(missing)}. Please fix CSV headers.",
            status_code=400,
            details={"missing_columns": missing},
        )

    rows: List[Dict[str, str]] = []
    for record in data:
        row = {name: "" for name in CANONICAL_HEADERS}
        for canonical, value in zip(columns, record):
            if canonical:
                row[canonical] = value
        rows.append(row)

    output = io.StringIO()
    writer = csv.writer(output, delimiter=OUTPUT_DELIMITER, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(CANONICAL_HEADERS)
    for row in rows:
        writer.writerow([row[name] for name in CANONICAL_HEADERS])

    logger.debug(
        "CSV normalized",
        metadata={"event": "csv_normalized", "delimiter": delimiter, "rows": len(rows)},
    )
    return output.getvalue()[:-2]


def normalize_csv_file(file: UploadedFile) -> UploadedFile:
    """Normalized copy of an uploaded CSV file, ready to send as the ``file`` part"""
    return UploadedFile(
        filename=file.filename or "import.csv",
        content_type="text/csv",
        content=normalize_csv(file.content).encode("utf-8"),
    )
