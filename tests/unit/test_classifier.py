"""
Name: Error Classifier Tests

Responsibilities:
  - Test category/code/message mapping for every error family
  - Test server diagnostics for EREQUEST
  - Test cause chain (original error, preceding errors in order)
  - Test classify is total and report_error logs each line

Notes:
  - report_error is given a MagicMock logger; the messages are asserted in order
"""

from unittest.mock import MagicMock

import pymssql
import pytest

from mssql_integration.domain.errors import (
    ClassifiedError,
    DriverConnectionError,
    DriverError,
    DriverPreparedStatementError,
    DriverRequestError,
    DriverTransactionError,
    ErrorCategory,
    RequestErrorCode,
)
from mssql_integration.infrastructure.db.classifier import (
    CONNECTION_MESSAGES,
    PREPARED_STATEMENT_MESSAGES,
    REQUEST_MESSAGES,
    TRANSACTION_MESSAGES,
    classify,
    report_error,
)

pytestmark = pytest.mark.unit


def _server_error(**overrides):
    fields = dict(
        number=207,
        state=1,
        severity=16,
        line_number=1,
        server_name="SQL01",
        procedure_name=None,
    )
    fields.update(overrides)
    return DriverRequestError(
        "Invalid column name 'nope'.", RequestErrorCode.SERVER_MESSAGE, **fields
    )


class TestCategories:
    @pytest.mark.parametrize(
        "variant,messages,category",
        [
            (DriverConnectionError, CONNECTION_MESSAGES, ErrorCategory.CONNECTION),
            (DriverTransactionError, TRANSACTION_MESSAGES, ErrorCategory.TRANSACTION),
            (DriverRequestError, REQUEST_MESSAGES, ErrorCategory.REQUEST),
            (
                DriverPreparedStatementError,
                PREPARED_STATEMENT_MESSAGES,
                ErrorCategory.PREPARED_STATEMENT,
            ),
        ],
    )
    def test_known_codes_use_fixed_messages(self, variant, messages, category):
        for code, message in messages.items():
            result = classify(variant("driver text", code))

            assert result.category is category
            assert result.code == code.value
            assert result.message == message

    def test_login_message(self):
        result = classify(DriverConnectionError("Login failed for user 'sa'.", "ELOGIN"))

        assert result.message == "Login failed for user."

    @pytest.mark.parametrize(
        "variant,prefix",
        [
            (DriverConnectionError, "Connection error"),
            (DriverTransactionError, "Transaction error"),
            (DriverRequestError, "Request error"),
            (DriverPreparedStatementError, "Prepared statement error"),
        ],
    )
    def test_unrecognized_code_gets_generic_message(self, variant, prefix):
        result = classify(variant("something odd", "EWEIRD"))

        assert result.code == "EWEIRD"
        assert result.message == f"{prefix}: something odd"

    def test_plain_driver_error_is_unknown(self):
        result = classify(DriverError("mystery"))

        assert result.category is ErrorCategory.UNKNOWN
        assert result.message == "Unknown SQL error: mystery"

    def test_non_driver_exception_is_unknown(self):
        result = classify(RuntimeError("boom"))

        assert result.category is ErrorCategory.UNKNOWN
        assert result.code is None
        assert result.message == "Unknown SQL error: boom"
        assert result.cause_chain == ()

    def test_raw_pymssql_error_is_translated(self):
        result = classify(pymssql.ProgrammingError((208, b"Invalid object name 'Missing'.")))

        assert result.category is ErrorCategory.REQUEST
        assert result.code == "EREQUEST"
        assert result.details["number"] == 208


class TestTotality:
    def test_unprintable_exception(self):
        class Unprintable(Exception):
            def __str__(self):
                raise RuntimeError("cannot render")

        result = classify(Unprintable())

        assert result.category is ErrorCategory.UNKNOWN
        assert result.message == "Unknown SQL error: Unprintable"

    def test_empty_message_is_never_empty(self):
        result = classify(DriverError(""))

        assert result.message
        assert result.message == "Unknown SQL error: DriverError"


class TestServerDetails:
    def test_request_message_reports_server_fields(self):
        result = classify(_server_error(procedure_name="usp_update"))

        assert result.message == "Message from SQL Server."
        assert result.details == {
            "number": 207,
            "state": 1,
            "class": 16,
            "line_number": 1,
            "server": "SQL01",
            "procedure": "usp_update",
        }

    def test_other_request_codes_have_no_details(self):
        result = classify(DriverRequestError("late", RequestErrorCode.TIMEOUT))

        assert result.details == {}


class TestCauseChain:
    def test_preceding_errors_in_order(self):
        error = DriverRequestError(
            "final",
            RequestErrorCode.SERVER_MESSAGE,
            preceding_errors=[
                DriverError("first problem"),
                DriverConnectionError("second problem", "ESOCKET"),
            ],
        )

        result = classify(error)

        labels = [entry.label for entry in result.cause_chain]
        assert labels == ["Preceding error 1", "Preceding error 2"]
        assert result.cause_chain[0].text == "first problem"
        assert result.cause_chain[0].error.category is ErrorCategory.UNKNOWN
        assert result.cause_chain[1].error.category is ErrorCategory.CONNECTION
        assert result.cause_chain[1].error.message == "Socket error."

    def test_original_error_listed_first(self):
        original = pymssql.ProgrammingError((207, b"Invalid column name 'nope'."))
        error = DriverRequestError(
            "wrapped",
            RequestErrorCode.SERVER_MESSAGE,
            original_error=original,
            preceding_errors=[DriverError("earlier")],
        )

        result = classify(error)

        assert [entry.label for entry in result.cause_chain] == [
            "Original error",
            "Preceding error 1",
        ]
        assert result.cause_chain[0].text == str(original)
        assert result.cause_chain[0].error.category is ErrorCategory.REQUEST

    def test_original_error_is_followed_one_level(self):
        original = DriverConnectionError(
            "inner", "ESOCKET", preceding_errors=[DriverError("deeper")]
        )
        error = DriverError("outer", original_error=original)

        result = classify(error)

        assert len(result.cause_chain) == 1
        assert result.cause_chain[0].error.cause_chain == ()

    def test_to_dict(self):
        error = DriverRequestError(
            "final", "EREQUEST", preceding_errors=[DriverError("earlier")]
        )

        payload = classify(error).to_dict()

        assert payload["category"] == "request"
        assert payload["code"] == "EREQUEST"
        assert payload["cause_chain"] == [
            {"label": "Preceding error 1", "message": "earlier", "category": "unknown"}
        ]


class TestReportError:
    def test_logs_message_details_and_causes(self):
        log = MagicMock()
        error = _server_error(preceding_errors=[DriverError("a"), DriverError("b")])

        result = report_error(error, log)

        messages = [call.args[0] for call in log.error.call_args_list]
        assert messages == [
            "Message from SQL Server.",
            "Error number: 207, state: 1, class: 16, line number: 1, "
            "server: SQL01, procedure: None",
            "Preceding error 1: a",
            "Preceding error 2: b",
        ]
        assert isinstance(result, ClassifiedError)
        assert log.error.call_args_list[0].kwargs["extra"] == {
            "category": "request",
            "code": "EREQUEST",
        }

    def test_no_details_line_without_server_message(self):
        log = MagicMock()

        report_error(DriverConnectionError("refused", "ESOCKET"), log)

        log.error.assert_called_once()
        assert log.error.call_args.args[0] == "Socket error."
