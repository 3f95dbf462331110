"""Tests for the error hierarchy and its gRPC mapping."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import grpc
import pytest

from legacycore import (
    ContentNotFoundError,
    DuplicateStatusError,
    IllegalStateTransitionError,
    InheritanceState,
    InvalidArgumentError,
    LegacyError,
    NotFoundError,
    PermissionDeniedError,
    RuleNotFoundError,
    RuleStatus,
    StatusNotFoundError,
    StorageError,
)
from legacycore.exceptions import (
    error_registry,
    get_grpc_status_code,
    grpc_error_handler,
    register_error,
)


class TestErrorHierarchy:
    """Tests for error codes, messages and details."""

    def test_base_defaults(self) -> None:
        """Test LegacyError default code and message."""
        error = LegacyError()
        assert error.code == "INTERNAL_ERROR"
        assert str(error) == "An internal error occurred"
        assert error.details == {}

    def test_details_from_kwargs(self) -> None:
        """Test that keyword arguments become details."""
        error = InvalidArgumentError("bad target", target_value="")
        assert error.code == "INVALID_ARGUMENT"
        assert error.details == {"target_value": ""}

    def test_not_found_subclasses(self) -> None:
        """Test that the specific lookups are NotFoundErrors."""
        rule_id, content_id, recipient_id = uuid4(), uuid4(), uuid4()
        for error in (
            RuleNotFoundError(rule_id),
            StatusNotFoundError(recipient_id, content_id, rule_id),
            ContentNotFoundError(content_id),
        ):
            assert isinstance(error, NotFoundError)
            assert error.code == "NOT_FOUND"

    def test_status_not_found_details(self) -> None:
        """Test StatusNotFoundError carries the full triple."""
        rule_id, content_id, recipient_id = uuid4(), uuid4(), uuid4()
        error = StatusNotFoundError(recipient_id, content_id, rule_id)
        assert error.details == {
            "recipient_id": recipient_id,
            "content_id": content_id,
            "rule_id": rule_id,
        }
        assert str(rule_id) in str(error)

    def test_illegal_transition_message(self) -> None:
        """Test IllegalStateTransitionError renders enum values."""
        error = IllegalStateTransitionError(RuleStatus.CANCELLED, RuleStatus.ACTIVE, entity="inheritance rule")
        assert str(error) == "Cannot move inheritance rule from CANCELLED to ACTIVE"
        assert error.details["current"] == "CANCELLED"
        assert error.details["target"] == "ACTIVE"

    def test_duplicate_status_is_storage_error(self) -> None:
        """Test DuplicateStatusError specializes StorageError."""
        error = DuplicateStatusError(content_id=uuid4())
        assert isinstance(error, StorageError)
        assert error.code == "DUPLICATE_STATUS"


class TestErrorRegistry:
    """Tests for ErrorRegistry and register_error."""

    def test_builtin_codes_registered(self) -> None:
        """Test that the base errors are registered by code."""
        assert error_registry.get("NOT_FOUND") is NotFoundError
        assert error_registry.get("ILLEGAL_STATE_TRANSITION") is IllegalStateTransitionError
        assert error_registry.get("DUPLICATE_STATUS") is DuplicateStatusError

    def test_register_custom_error(self) -> None:
        """Test registering a host-defined error."""

        @register_error("QUOTA_EXCEEDED")
        class QuotaExceededError(LegacyError):
            code = "QUOTA_EXCEEDED"

        assert error_registry.get("QUOTA_EXCEEDED") is QuotaExceededError
        assert "QUOTA_EXCEEDED" in error_registry.all()

    def test_unknown_code(self) -> None:
        """Test lookup of an unregistered code."""
        assert error_registry.get("NO_SUCH_CODE") is None


class TestGrpcStatusMapping:
    """Tests for get_grpc_status_code."""

    @pytest.mark.parametrize(
        "error, expected",
        [
            (RuleNotFoundError("r"), grpc.StatusCode.NOT_FOUND),
            (InvalidArgumentError(), grpc.StatusCode.INVALID_ARGUMENT),
            (
                IllegalStateTransitionError(InheritanceState.DECLINED, InheritanceState.ACCESSED),
                grpc.StatusCode.FAILED_PRECONDITION,
            ),
            (PermissionDeniedError(), grpc.StatusCode.PERMISSION_DENIED),
            (StorageError(), grpc.StatusCode.UNAVAILABLE),
            (DuplicateStatusError(), grpc.StatusCode.ALREADY_EXISTS),
            (LegacyError(), grpc.StatusCode.INTERNAL),
        ],
    )
    def test_mapping(self, error: LegacyError, expected: grpc.StatusCode) -> None:
        """Test each error code maps to its gRPC status."""
        assert get_grpc_status_code(error) == expected


class _Servicer:
    @grpc_error_handler
    async def DeclineInheritance(self, request, context):
        raise IllegalStateTransitionError(InheritanceState.ACCESSED, InheritanceState.DECLINED)

    @grpc_error_handler
    async def GetRule(self, request, context):
        return {"rule_id": request}

    @grpc_error_handler
    async def Broken(self, request, context):
        raise RuntimeError("boom")


def _make_context() -> MagicMock:
    context = MagicMock()
    context.abort = AsyncMock()
    return context


class TestGrpcErrorHandler:
    """Tests for the grpc_error_handler decorator."""

    @pytest.mark.asyncio
    async def test_success_passes_through(self):
        """Successful calls return the handler result."""
        context = _make_context()
        result = await _Servicer().GetRule("r-1", context)
        assert result == {"rule_id": "r-1"}
        context.abort.assert_not_called()

    @pytest.mark.asyncio
    async def test_legacy_error_aborts_with_mapped_status(self):
        """LegacyError → mapped status, error code in trailing metadata."""
        context = _make_context()
        await _Servicer().DeclineInheritance(None, context)

        context.set_trailing_metadata.assert_called_once_with([("error-code", "ILLEGAL_STATE_TRANSITION")])
        status, message = context.abort.await_args.args
        assert status == grpc.StatusCode.FAILED_PRECONDITION
        assert message.startswith("[ILLEGAL_STATE_TRANSITION]")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self):
        """Non-LegacyError exceptions abort with INTERNAL."""
        context = _make_context()
        await _Servicer().Broken(None, context)

        status, message = context.abort.await_args.args
        assert status == grpc.StatusCode.INTERNAL
        assert "boom" in message
