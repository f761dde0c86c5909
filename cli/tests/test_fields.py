import pytest

from qc_cli.fields import parse_fields, record_id, ref_name


def test_parse_fields_keeps_json_types() -> None:
    body = parse_fields(["totalInspected=120", "notes=line A", "measurements={\"width\": 2.5}", "urgent=true"])
    assert body == {"totalInspected": 120, "notes": "line A", "measurements": {"width": 2.5}, "urgent": True}


def test_parse_fields_rejects_missing_equals() -> None:
    with pytest.raises(ValueError):
        parse_fields(["status"])


def test_record_id_and_ref_name() -> None:
    assert record_id({"_id": "abc"}) == "abc"
    assert record_id({}) == "-"
    assert ref_name({"_id": "p1", "name": "Bracket"}) == "Bracket"
    assert ref_name("p1") == "p1"
    assert ref_name(None) == "-"
