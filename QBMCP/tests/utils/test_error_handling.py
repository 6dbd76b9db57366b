"""Unit tests for error handling utilities."""

import pytest

from QBMCP.utils.error_handling import (
    BuildStepError,
    ErrorContext,
    StepError,
    create_error_response,
    handle_step_error,
)


class TestStepError:
    def test_str_names_operation_and_step(self):
        context = ErrorContext(operation="build_relationship", step_id="REL_S1_REFERENCE_FIELD")
        error = StepError(message="boom", context=context)

        assert str(error) == "[build_relationship/REL_S1_REFERENCE_FIELD] boom"
        assert not error.is_partial

    def test_partial_when_created(self):
        context = ErrorContext(operation="op", step_id="s", created={"junctionTableId": "bq1"})
        assert BuildStepError(message="x", context=context).is_partial


class TestCreateErrorResponse:
    def test_includes_created_ids(self):
        context = ErrorContext(
            operation="build_junction_table",
            step_id="JCT_S3_TABLE2_REFERENCE",
            table_id="bqj",
            created={"junctionTableId": "bqj", "table1ReferenceFieldId": 10},
        )

        response = create_error_response(ValueError("bad"), context)

        assert response["success"] is False
        assert response["error"]["type"] == "ValueError"
        assert response["error"]["step_id"] == "JCT_S3_TABLE2_REFERENCE"
        assert response["error"]["table_id"] == "bqj"
        assert response["created"] == {"junctionTableId": "bqj", "table1ReferenceFieldId": 10}

    def test_omits_created_when_empty(self):
        response = create_error_response(ValueError("bad"), ErrorContext(operation="op", step_id="s"))
        assert "created" not in response


class TestHandleStepError:
    def test_reraise_chains_original(self):
        original = RuntimeError("remote said no")
        context = ErrorContext(operation="op", step_id="s")

        with pytest.raises(BuildStepError) as exc_info:
            handle_step_error(original, context, reraise=True, error_cls=BuildStepError)

        assert exc_info.value.__cause__ is original
        assert exc_info.value.original_exception is original
        assert exc_info.value.error_type == "build_step_error"

    def test_returns_response_without_reraise(self):
        response = handle_step_error(ValueError("x"), ErrorContext(operation="op", step_id="s"))
        assert response["error"]["message"] == "x"
