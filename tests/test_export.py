"""
Tests for the CSV export.

Path: tests/test_export.py
"""
import csv
import io

from event_site.schemas.registration import EXPORT_COLUMNS, RegistrationRecord
from event_site.services.export_service import registrations_to_csv


def test_header_only_when_empty():
    assert registrations_to_csv([]) == ",".join(EXPORT_COLUMNS) + "\n"


def test_quotes_and_blank_columns():
    record = RegistrationRecord(
        id="abc",
        createdAt=1700000000000,
        teamName='Bits, "Bytes"',
        teamTag="HTTA1B",
        track="Basic",
        advancedMembers=1,
        leaderName="Asha Rao",
    )
    rows = list(csv.reader(io.StringIO(registrations_to_csv([record]))))
    assert rows[0] == EXPORT_COLUMNS
    row = dict(zip(rows[0], rows[1]))
    assert row["teamName"] == 'Bits, "Bytes"'
    assert row["createdAt"] == "1700000000000"
    assert row["leaderName"] == "Asha Rao"
    assert row["member5USN"] == ""
