"""
Unit tests for social.graze.uriresolve.observe and social.graze.uriresolve.health

Tests cover the instrumented observer (Sentry reporting, metrics, health
gauge) and the health gauge itself.
"""

import pytest
from unittest.mock import Mock, patch

from social.graze.uriresolve.engine import Exhausted, ResolutionEngine
from social.graze.uriresolve.errors import PluginError
from social.graze.uriresolve.health import HealthGauge
from social.graze.uriresolve.observe import InstrumentedObserver, ResolutionObserver
from tests.test_helpers import FailingPlugin, plugin_resolver, registry, u


class TestResolutionObserver:
    """Test suite for the no-op base observer."""

    @pytest.mark.asyncio
    async def test_hooks_do_nothing(self):
        """Test every hook can be awaited without effect."""
        observer = ResolutionObserver()
        resolver = plugin_resolver("w3://ens/r.eth", FailingPlugin())
        await observer.plugin_error(PluginError("w3://ens/r.eth", "boom"), u("w3://ens/x"))
        await observer.redirect(resolver, u("w3://ens/x"), u("w3://ipfs/y"))
        await observer.resolver_set_swap(resolver, u("w3://ens/x"), u("w3://ens/set"))
        await observer.outcome(Exhausted(uri=u("w3://ens/x")))


class TestInstrumentedObserver:
    """Test suite for InstrumentedObserver."""

    @pytest.fixture
    def metrics_client(self):
        return Mock()

    @pytest.mark.asyncio
    @patch("social.graze.uriresolve.observe.sentry_sdk")
    async def test_plugin_error(self, mock_sentry, metrics_client):
        """Test plugin errors go to Sentry, metrics and the health gauge."""
        gauge = HealthGauge()
        observer = InstrumentedObserver(metrics_client, gauge)
        error = PluginError("w3://ens/r.eth", "timed out after 1.0s")

        await observer.plugin_error(error, u("w3://ens/x"))

        mock_sentry.capture_exception.assert_called_once_with(error)
        metrics_client.increment.assert_called_once_with(
            "uriresolve.engine.plugin_error",
            1,
            tag_dict={"resolver": "w3://ens/r.eth", "authority": "ens"},
        )
        assert gauge.value == 1

    @pytest.mark.asyncio
    async def test_redirect(self, metrics_client):
        """Test redirects are counted by authority."""
        observer = InstrumentedObserver(metrics_client)
        resolver = plugin_resolver("w3://ens/r.eth", FailingPlugin())

        await observer.redirect(resolver, u("w3://ens/x"), u("w3://ipfs/y"))

        metrics_client.increment.assert_called_once_with(
            "uriresolve.engine.redirect", 1, tag_dict={"from": "ens", "to": "ipfs"}
        )

    @pytest.mark.asyncio
    async def test_outcome(self, metrics_client):
        """Test terminal outcomes are counted by status."""
        observer = InstrumentedObserver(metrics_client)

        await observer.outcome(Exhausted(uri=u("w3://ens/x")))

        metrics_client.increment.assert_called_once_with(
            "uriresolve.engine.outcome", 1, tag_dict={"status": "exhausted"}
        )

    @pytest.mark.asyncio
    @patch("social.graze.uriresolve.observe.sentry_sdk")
    async def test_engine_reports_through_observer(self, mock_sentry, metrics_client):
        """Test a failing resolver during resolution bumps the health gauge."""
        gauge = HealthGauge()
        engine = ResolutionEngine(InstrumentedObserver(metrics_client, gauge))

        result = await engine.run(
            u("w3://ens/x"), registry(plugin_resolver("w3://ens/r.eth", FailingPlugin()))
        )

        assert isinstance(result, Exhausted)
        assert gauge.value == 1
        mock_sentry.capture_exception.assert_called_once()

    def test_defaults_to_noop_metrics(self):
        """Test an observer without a metrics client still works."""
        observer = InstrumentedObserver()
        observer.metrics_client.increment("anything")


class TestHealthGauge:
    """Test suite for HealthGauge."""

    @pytest.mark.asyncio
    async def test_healthy_below_threshold(self):
        """Test the gauge stays healthy up to the threshold."""
        gauge = HealthGauge(health_threshold=2)
        await gauge.womp()
        await gauge.womp()
        assert await gauge.is_healthy() is True
        await gauge.womp()
        assert await gauge.is_healthy() is False

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            HealthGauge(health_threshold=-1)

    @pytest.mark.asyncio
    async def test_tick_drains(self):
        """Test ticks drain the gauge but never below zero."""
        gauge = HealthGauge(value=1)
        await gauge.tick()
        await gauge.tick()
        assert gauge.value == 0
