"""Tests for JSON export of results."""

import json

from adapters.json_exporter import export_result_json, result_to_json
from core.services.result_validator import ResultValidator

from conftest import make_payload


def test_export_uses_wire_field_names(tmp_path):
    result = ResultValidator().validate(make_payload())

    path = export_result_json(result=result, output_path=tmp_path / "nested" / "r.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["is_venomous"] is True
    assert data["locations"][0] == {"country": "Thailand", "continent_code": "AS"}
    assert data["data"]["en"]["first_aid"][0] == "Keep calm"
    assert "งูจงอาง" in path.read_text(encoding="utf-8")


def test_serialization_is_stable():
    result = ResultValidator().validate(make_payload())
    assert result_to_json(result) == result_to_json(result.model_copy())
