"""
Record model and request schema validation tests.
"""

import pytest
from pydantic import ValidationError

from qa_edits.api.schemas import (
    ApplyEditsRequest,
    EditSessionResponse,
    IndicatorRenameRequest,
    ProjectCreateRequest,
    ValueEditModel,
)
from qa_edits.core.schema import EditSession, IndicatorRenameEdit, ValueEdit


@pytest.fixture
def wire_edit():
    return {
        "indicatorName": "Population",
        "filterName": "Urban",
        "year": 2022,
        "quarter": 3,
        "oldValue": 1500,
        "newValue": 1550,
        "timestamp": 123,
        "tableNumber": "4.2",
    }


class TestRecordModel:
    """Test the camelCase wire form of the dataclasses."""

    def test_value_edit_from_dict(self, wire_edit):
        edit = ValueEdit.from_dict(wire_edit)

        assert edit.indicator_name == "Population"
        assert edit.quarter == 3
        assert edit.month is None
        assert edit.old_value == 1500.0
        assert edit.table_number == "4.2"
        assert edit.comment is None

    def test_value_edit_to_dict_drops_unset_optionals(self, wire_edit):
        data = ValueEdit.from_dict(wire_edit).to_dict()

        assert "month" not in data
        assert "comment" not in data
        assert data["quarter"] == 3
        assert data["tableNumber"] == "4.2"

    def test_value_edit_missing_required_field(self, wire_edit):
        del wire_edit["newValue"]
        with pytest.raises(KeyError):
            ValueEdit.from_dict(wire_edit)

    def test_value_edit_requires_filter_name(self, wire_edit):
        del wire_edit["filterName"]
        with pytest.raises(KeyError):
            ValueEdit.from_dict(wire_edit)

    def test_value_edit_non_numeric_value(self, wire_edit):
        wire_edit["oldValue"] = "lots"
        with pytest.raises(ValueError):
            ValueEdit.from_dict(wire_edit)

    def test_session_round_trip(self, wire_edit):
        session = EditSession(
            file_name="census.xlsx",
            data_edits=[ValueEdit.from_dict(wire_edit)],
            indicator_edits=[IndicatorRenameEdit("Population", "Resident population", 9)],
            last_updated=200,
        )

        assert EditSession.from_dict(session.to_dict()) == session

    def test_session_from_partial_dict(self):
        session = EditSession.from_dict({"fileName": "x.xlsx"})
        assert session.data_edits == []
        assert session.indicator_edits == []
        assert session.last_updated == 0


class TestRequestSchemas:
    """Test pydantic validation at the API boundary."""

    def test_value_edit_model_accepts_wire_form(self, wire_edit):
        model = ValueEditModel.model_validate(wire_edit)
        record = model.to_record()

        assert record.indicator_name == "Population"
        assert record.filter_name == "Urban"
        assert record.quarter == 3

    def test_both_month_and_quarter_accepted(self, wire_edit):
        wire_edit["month"] = 8
        assert ValueEditModel.model_validate(wire_edit).to_record().month == 8

    @pytest.mark.parametrize("field,value", [
        ("month", 0),
        ("month", 13),
        ("quarter", 0),
        ("quarter", 5),
        ("indicatorName", "   "),
        ("year", "twenty"),
    ])
    def test_value_edit_model_rejects(self, wire_edit, field, value):
        wire_edit[field] = value
        with pytest.raises(ValidationError):
            ValueEditModel.model_validate(wire_edit)

    def test_value_edit_model_requires_values(self, wire_edit):
        del wire_edit["oldValue"]
        with pytest.raises(ValidationError):
            ValueEditModel.model_validate(wire_edit)

    def test_value_edit_model_requires_filter_name(self, wire_edit):
        del wire_edit["filterName"]
        with pytest.raises(ValidationError):
            ValueEditModel.model_validate(wire_edit)

    def test_timestamp_optional(self, wire_edit):
        del wire_edit["timestamp"]
        assert ValueEditModel.model_validate(wire_edit).timestamp == 0

    def test_apply_edits_request(self, wire_edit):
        request = ApplyEditsRequest.model_validate({"edits": [wire_edit], "userName": "analyst"})
        assert request.user_name == "analyst"
        assert len(request.edits) == 1

    def test_rename_request_rejects_empty_names(self):
        with pytest.raises(ValidationError):
            IndicatorRenameRequest.model_validate({"oldName": "", "newName": "B"})

        record = IndicatorRenameRequest.model_validate({"oldName": "A", "newName": "B"}).to_record(timestamp=5)
        assert record == IndicatorRenameEdit("A", "B", 5)

    def test_project_create_request(self):
        with pytest.raises(ValidationError):
            ProjectCreateRequest.model_validate({"fileName": " "})
        with pytest.raises(ValidationError):
            ProjectCreateRequest.model_validate({"fileName": "a.xlsx", "fileSize": -1})

    def test_session_response_serializes_camel_case(self, wire_edit):
        session = EditSession("census.xlsx", [ValueEdit.from_dict(wire_edit)], [], 200)
        dumped = EditSessionResponse.model_validate(session.to_dict()).model_dump(by_alias=True)

        assert dumped["fileName"] == "census.xlsx"
        assert dumped["lastUpdated"] == 200
        assert dumped["dataEdits"][0]["indicatorName"] == "Population"
