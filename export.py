import io
from typing import Iterable

import openpyxl

from models import CATEGORIES

HEADER = ["ID", "Title", "Amount", "Category", "Created At"]


def build_workbook(expenses: Iterable) -> io.BytesIO:
    """Write the expenses to an in-memory .xlsx file, rewound and ready to stream."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = "Expenses"

    sheet.append(HEADER)

    for exp in expenses:
        sheet.append([
            exp.id,
            exp.title,
            exp.amount,
            exp.category,
            str(exp.created_at)
        ])

    stream = io.BytesIO()
    workbook.save(stream)
    stream.seek(0)
    return stream


def export_filename(category=None) -> str:
    """Name the download after the filter, but only for a known category label."""
    filename = "expenses"
    if category:
        for label in CATEGORIES:
            if category.strip().lower() == label.lower():
                filename += f"_{label.lower()}"
                break
    return f"{filename}.xlsx"
