"""Unit tests for core infrastructure components."""
import pytest
from unittest.mock import Mock

from core.exceptions import ConfigurationError, DatasetError, HTRBenchError, RecordError
from core.result import Success, Failure
from core.error_handler import as_result, log_execution_time, ErrorHandler


class TestResult:
    """Tests for Result type."""

    def test_success_creation(self):
        # Act
        result = Success(42)

        # Assert
        assert result.is_success()
        assert not result.is_failure()
        assert result.unwrap() == 42

    def test_failure_creation(self):
        # Act
        error = DatasetError("file not found: gt.txt")
        result = Failure(error)

        # Assert
        assert result.is_failure()
        assert not result.is_success()
        assert result.error is error

    def test_failure_unwrap_raises(self):
        # Arrange
        result = Failure(DatasetError("missing"))

        # Assert
        with pytest.raises(DatasetError):
            result.unwrap()


class TestExceptions:
    @pytest.mark.parametrize("exc", [DatasetError, RecordError, ConfigurationError])
    def test_all_errors_share_base(self, exc):
        with pytest.raises(HTRBenchError):
            raise exc("boom")


class TestErrorHandlingDecorators:
    """Tests for error handling decorators."""

    def test_as_result_success(self):
        # Arrange
        @as_result
        def test_func(x):
            return x * 2

        # Act
        result = test_func(5)

        # Assert
        assert result.is_success()
        assert result.unwrap() == 10

    def test_as_result_failure(self):
        # Arrange
        @as_result
        def test_func():
            raise ValueError("error")

        # Act
        result = test_func()

        # Assert
        assert result.is_failure()
        assert isinstance(result.error, ValueError)

    def test_log_execution_time_logs_at_level(self):
        # Arrange
        mock_logger = Mock()

        @log_execution_time(logger_instance=mock_logger, level="INFO")
        def test_func():
            return "done"

        # Act
        result = test_func()

        # Assert
        assert result == "done"
        mock_logger.info.assert_called_once()
        assert "test_func executed in" in mock_logger.info.call_args[0][0]

    def test_log_execution_time_logs_on_error(self):
        # Arrange
        mock_logger = Mock()

        @log_execution_time(logger_instance=mock_logger)
        def test_func():
            raise DatasetError("no rows")

        # Assert
        with pytest.raises(DatasetError):
            test_func()
        mock_logger.debug.assert_called_once()


class TestErrorHandler:
    """Tests for ErrorHandler class."""

    def test_handle_logs_error(self):
        # Arrange
        mock_logger = Mock()
        handler = ErrorHandler(mock_logger)
        error = ValueError("test error")

        # Act
        handler.handle(error, context="row 3")

        # Assert
        mock_logger.error.assert_called_once_with("Error in row 3: test error")

    def test_safe_execute_success(self):
        # Arrange
        handler = ErrorHandler(Mock())
        func = Mock(return_value=42)

        # Act
        result = handler.safe_execute(func, 1, 2, context="test", key="value")

        # Assert
        assert result == 42
        func.assert_called_once_with(1, 2, key="value")

    def test_safe_execute_with_error_returns_default(self):
        # Arrange
        mock_logger = Mock()
        handler = ErrorHandler(mock_logger)
        func = Mock(side_effect=ValueError("error"))

        # Act
        result = handler.safe_execute(func, default=99)

        # Assert
        assert result == 99
        mock_logger.error.assert_called_once()
