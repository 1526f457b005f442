from __future__ import annotations

import csv
import io
from typing import List

from .extract import UsageResults, format_value

HEADER = ["month", "axis_value", "kwh"]


def results_to_rows(results: UsageResults) -> List[List[str]]:
    rows = [[r.month, format_value(r.axis_value), format_value(r.final_value)] for r in results.rows]
    rows.append(["Annual", "", format_value(results.annual_total)])
    return rows


def results_csv_string(results: UsageResults, delimiter: str = ",") -> str:
    buf = io.StringIO()
    w = csv.writer(buf, delimiter=delimiter, lineterminator="\n")
    w.writerow(HEADER)
    w.writerows(results_to_rows(results))
    return buf.getvalue().rstrip()


def write_results_csv(path: str, results: UsageResults, delimiter: str = ",") -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, delimiter=delimiter)
        w.writerow(HEADER)
        w.writerows(results_to_rows(results))
