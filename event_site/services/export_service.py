import csv
import io
from typing import Iterable
from event_site.schemas.registration import EXPORT_COLUMNS, RegistrationRecord


def registrations_to_csv(records: Iterable[RegistrationRecord]) -> str:
    """导出报名记录为 CSV，缺失字段留空"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        row = record.model_dump()
        writer.writerow(["" if row.get(col) is None else row.get(col) for col in EXPORT_COLUMNS])
    return buffer.getvalue()
