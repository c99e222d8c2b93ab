"""Unit tests for the isolation engine domain probe."""

from unittest.mock import Mock

from isolation.infrastructure.observability import DefaultIsolationProbe
from shared_kernel.observability_context import ObservationContext


class TestDefaultIsolationProbe:
    """Tests for DefaultIsolationProbe."""

    def test_creates_with_default_logger(self):
        """Test that probe can be created without providing a logger."""
        probe = DefaultIsolationProbe()
        assert probe._logger is not None

    def test_model_customized(self):
        """Test that customization reports entity counts and mode."""
        mock_logger = Mock()
        probe = DefaultIsolationProbe(logger=mock_logger)

        probe.model_customized(scoped=3, global_=1, mode="shared")

        mock_logger.info.assert_called_once_with(
            "tenant_model_customized",
            scoped_entities=3,
            global_entities=1,
            isolation_mode="shared",
        )

    def test_cross_tenant_write_blocked_logs_error(self):
        """Test that blocked writes are errors naming both tenants."""
        mock_logger = Mock()
        probe = DefaultIsolationProbe(logger=mock_logger)

        probe.cross_tenant_write_blocked("Order", "acme", "globex")

        mock_logger.error.assert_called_once()
        call_args = mock_logger.error.call_args
        assert call_args[0][0] == "cross_tenant_write_blocked"
        assert call_args[1]["entity"] == "Order"
        assert call_args[1]["current_tenant_id"] == "acme"
        assert call_args[1]["entity_tenant_id"] == "globex"

    def test_tenant_migration_failed(self):
        """Test that migration failures carry the error type."""
        mock_logger = Mock()
        probe = DefaultIsolationProbe(logger=mock_logger)

        probe.tenant_migration_failed("acme", RuntimeError("boom"))

        call_args = mock_logger.error.call_args
        assert call_args[0][0] == "tenant_migration_failed"
        assert call_args[1]["migrated_tenant_id"] == "acme"
        assert call_args[1]["error"] == "boom"
        assert call_args[1]["error_type"] == "RuntimeError"

    def test_context_included_in_log_calls(self):
        """Test that observation context is included in log output."""
        mock_logger = Mock()
        probe = DefaultIsolationProbe(logger=mock_logger).with_context(
            ObservationContext(correlation_id="migrate-1")
        )

        probe.engines_disposed(2)

        mock_logger.info.assert_called_once_with(
            "tenant_engines_disposed", count=2, correlation_id="migrate-1"
        )
