# Overview: CSV ingestion for the catalog import screen.

"""
Catalog CSV format (one item per line, header row ignored):

    vendor,name,sellingPrice,costPrice,stock[,category]

The delimiter is a plain comma with no quoting or escaping; a field that
contains a comma is not supported. Blank lines and rows with fewer than
five columns are dropped here; field-level validation happens in
CatalogStore.import_items.
"""

from __future__ import annotations

IMPORT_COLUMNS = ("vendor", "name", "selling_price", "cost_price", "stock", "category")
MIN_COLUMNS = 5

TEMPLATE_HEADER = "Vendor,Item Name,Selling Price,Cost Price,Stock,Category"
TEMPLATE_EXAMPLE_ROWS = (
    "Mee Tarik,Mee Sup,8.00,4.50,20,Makanan",
    "ZZ,Pisang Goreng,2.00,0.50,50,Gorengan",
)


def parse_catalog_csv(text: str) -> list[dict[str, str]]:
    """Split CSV text into import row mappings keyed by IMPORT_COLUMNS."""
    if text.startswith("\ufeff"):
        text = text[1:]

    rows = []
    for line in text.splitlines()[1:]:
        line = line.strip()
        if not line:
            continue
        cols = [col.strip() for col in line.split(",")]
        if len(cols) < MIN_COLUMNS:
            # Still counted as submitted so the caller sees it was skipped
            rows.append({"vendor": "", "name": ""})
            continue
        rows.append(dict(zip(IMPORT_COLUMNS, cols[: len(IMPORT_COLUMNS)])))
    return rows


def catalog_template_csv(internal_vendor_tag: str = "ZZ") -> str:
    example = list(TEMPLATE_EXAMPLE_ROWS)
    example[1] = example[1].replace("ZZ", internal_vendor_tag, 1)
    return "\n".join([TEMPLATE_HEADER, *example]) + "\n"
