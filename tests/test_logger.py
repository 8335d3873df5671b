"""
Tests for namelog.logger — filtering, emission, exclusivity.

The filtering rule under test is:

    (enabled_all or enabled) and threshold <= level and
    (no exclusivity or this logger holds it)
"""

import threading

import pytest

from namelog.errors import ExclusivityDenied, InvalidLevel, SinkUnavailable
from namelog.levels import ERROR, LOG, WARN
from namelog.registry import Registry
from namelog.streams import Payload


# =============================================================================
# Threshold
# =============================================================================

class TestThreshold:
    """A logger emits at and above its threshold only."""

    @pytest.mark.parametrize("threshold,low,high", [
        (2, 1, 2),
        (2, 1, 3),
        (3, 2, 3),
        (5, 4, 9),
    ])
    def test_below_hidden_at_or_above_shown(self, registry, stream, threshold, low, high):
        log = registry.create('svc', level=threshold)
        log.write(low, 'low')
        log.write(high, 'high')
        assert stream.data == ['high']

    def test_default_threshold_is_lowest(self, registry):
        assert registry.create('svc').threshold == LOG

    def test_level_by_name(self, registry):
        log = registry.create('svc').level('error')
        assert log.threshold == ERROR

    def test_level_unknown_name_raises(self, registry):
        with pytest.raises(InvalidLevel):
            registry.create('svc').level('loud')

    def test_level_none_raises(self, registry):
        with pytest.raises(InvalidLevel):
            registry.create('svc').level(None)

    def test_level_change_applies_to_next_call(self, registry, stream):
        log = registry.create('svc')
        log.info('shown')
        log.level(WARN)
        log.info('hidden')
        assert stream.data == [['shown']]


# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:
    """End-to-end behavior of the convenience methods."""

    def test_warn_threshold_scenario(self, registry, stream):
        """log() is filtered, warn() and error() emit with their ranks."""
        svc = registry.create('svc', level=WARN)
        svc.log('a')
        assert stream.payloads == []

        svc.warn('b')
        assert len(stream.payloads) == 1
        payload = stream.payloads[0]
        assert payload.level == WARN
        assert payload.name == 'svc'
        assert payload.data == ['b']

        svc.error('c')
        assert stream.payloads[1].level == ERROR
        assert stream.payloads[1].data == ['c']

    def test_only_scenario(self, registry, stream):
        """While 'a' holds exclusivity, 'b' is silent."""
        a = registry.create('a')
        b = registry.create('b')
        a.only()
        b.error('x')
        assert stream.payloads == []
        a.error('y')
        assert [p.name for p in stream.payloads] == ['a']

    def test_args_kept_in_order(self, registry, stream):
        registry.create('svc').warn('x', 'y')
        assert stream.data == [['x', 'y']]

    def test_nested_args_not_flattened(self, registry, stream):
        registry.create('svc').info(['x', 'y'], 'z')
        assert stream.data == [[['x', 'y'], 'z']]

    def test_no_args_gives_empty_list(self, registry, stream):
        registry.create('svc').error()
        assert stream.data == [[]]

    def test_each_method_uses_its_rank(self, registry, stream):
        log = registry.create('svc')
        log.log(1).info(2).warn(3).error(4)
        assert stream.levels == [1, 1, 2, 3]


# =============================================================================
# write()
# =============================================================================

class TestWrite:
    """Test write() / log_data()."""

    def test_data_passed_unchanged(self, registry, stream):
        data = {'event': 'boot'}
        registry.create('svc').write(WARN, data)
        assert stream.payloads[0].data is data

    def test_level_defaults_to_lowest(self, registry, stream):
        registry.create('svc').write(data='x')
        assert stream.payloads[0].level == LOG

    def test_level_by_name(self, registry, stream):
        registry.create('svc').write('error', 'x')
        assert stream.payloads[0].level == ERROR

    def test_unknown_level_name_raises(self, registry):
        with pytest.raises(InvalidLevel):
            registry.create('svc').write('loud', 'x')

    def test_payload_shape(self, registry, stream):
        registry.create('svc').write(2, 'x')
        payload = stream.payloads[0]
        assert isinstance(payload, Payload)
        assert isinstance(payload.timestamp, int)
        assert payload.timestamp > 1_500_000_000_000  # epoch milliseconds
        assert payload.as_dict() == {
            'timestamp': payload.timestamp, 'level': 2, 'name': 'svc', 'data': 'x',
        }

    def test_log_data_alias(self, registry, stream):
        registry.create('svc').log_data(3, 'x')
        assert stream.data == ['x']

    def test_returns_logger_when_filtered(self, registry):
        log = registry.create('svc', enabled=False)
        assert log.write(3, 'x') is log

    def test_calls_delivered_in_order(self, registry, stream):
        log = registry.create('svc')
        for i in range(20):
            log.info(i)
        assert stream.data == [[i] for i in range(20)]


# =============================================================================
# emit() / custom levels
# =============================================================================

class TestCustomLevelDispatch:
    """Generic dispatch with a custom level table."""

    @pytest.fixture
    def custom(self, stream):
        return Registry(levels={'debug': 0, 'info': 1, 'critical': 9},
                        default_stream=stream)

    def test_emit_by_name(self, custom, stream):
        custom.create('svc').emit('critical', 'boom')
        assert stream.levels == [9]
        assert stream.data == [['boom']]

    def test_default_threshold_is_custom_lowest(self, custom, stream):
        log = custom.create('svc')
        assert log.threshold == 0
        log.emit('debug', 'x')
        assert stream.data == [['x']]

    def test_missing_convenience_level_raises(self, custom):
        """warn() is not available when the table has no 'warn'."""
        with pytest.raises(InvalidLevel):
            custom.create('svc').warn('x')

    def test_emit_unknown_name_raises(self, registry):
        with pytest.raises(InvalidLevel):
            registry.create('svc').emit('fatal', 'x')


# =============================================================================
# Enable / Disable
# =============================================================================

class TestEnable:
    """Per-logger and global enable flags."""

    def test_enabled_by_default(self, registry):
        assert registry.create('svc').enabled is True

    def test_disabled_logger_silent(self, registry, stream):
        registry.create('svc').disable().error('x')
        assert stream.payloads == []

    def test_reenable(self, registry, stream):
        log = registry.create('svc').disable()
        log.info('hidden')
        log.enable().info('shown')
        assert stream.data == [['shown']]

    def test_enable_all_overrides_local_disable(self, registry, stream):
        """enabled_all lets a disabled logger emit."""
        log = registry.create('svc', enabled=False)
        log.enable_all()
        log.info('x')
        assert stream.data == [['x']]
        assert registry.state.enabled_all is True

    def test_enable_all_from_other_logger(self, registry, stream):
        quiet = registry.create('quiet', enabled=False)
        registry.create('other').enable_all()
        quiet.info('x')
        assert [p.name for p in stream.payloads] == ['quiet']

    def test_disable_all_keeps_enabled_logger(self, registry, stream):
        """disable_all() does not silence a logger that is itself enabled."""
        log = registry.create('svc')
        log.disable_all().info('x')
        assert stream.data == [['x']]

    def test_disable_all_restores_local_flag(self, registry, stream):
        log = registry.create('svc', enabled=False).enable_all()
        log.disable_all().info('x')
        assert stream.payloads == []

    def test_enable_all_does_not_bypass_threshold(self, registry, stream):
        log = registry.create('svc', enabled=False, level=ERROR).enable_all()
        log.warn('x')
        assert stream.payloads == []

    def test_is_enabled(self, registry):
        log = registry.create('svc', level=WARN)
        assert log.is_enabled('warn') is True
        assert log.is_enabled(LOG) is False
        assert log.is_enabled() is False


# =============================================================================
# Exclusivity
# =============================================================================

class TestExclusivity:
    """only() / all()."""

    def test_only_silences_others(self, registry, stream):
        a = registry.create('a')
        b = registry.create('b')
        c = registry.create('c')
        a.only()
        b.error('x')
        c.error('x')
        registry.global_logger.error('x')
        assert stream.payloads == []
        assert a.is_exclusive is True

    def test_only_beats_enable_all(self, registry, stream):
        a = registry.create('a')
        b = registry.create('b')
        a.only().enable_all()
        b.error('x')
        assert stream.payloads == []

    def test_holder_still_filtered_by_threshold(self, registry, stream):
        a = registry.create('a', level=ERROR).only()
        a.warn('x')
        assert stream.payloads == []

    def test_all_restores_everyone(self, registry, stream):
        a = registry.create('a')
        b = registry.create('b')
        a.only()
        a.all()
        b.info('x')
        assert [p.name for p in stream.payloads] == ['b']
        assert registry.state.only is None

    def test_all_from_non_holder_clears(self, registry, stream):
        a = registry.create('a')
        b = registry.create('b')
        a.only()
        b.all()
        b.info('x')
        assert stream.data == [['x']]

    def test_second_claim_is_noop(self, registry, stream):
        a = registry.create('a')
        b = registry.create('b')
        a.only()
        assert b.only() is b
        assert registry.state.only is a
        b.info('x')
        a.info('y')
        assert stream.data == [['y']]

    def test_reclaim_by_holder_is_noop(self, registry, diagnostics):
        registry.diagnostics = diagnostics
        a = registry.create('a')
        a.only().only()
        assert registry.state.only is a
        assert diagnostics.getvalue() == ""

    def test_claim_after_release(self, registry):
        a = registry.create('a')
        b = registry.create('b')
        a.only().all()
        b.only()
        assert registry.state.only is b

    def test_strict_claim_raises(self, registry):
        a = registry.create('a').only()
        b = registry.create('b')
        with pytest.raises(ExclusivityDenied) as excinfo:
            b.only(strict=True)
        assert excinfo.value.holder == 'a'
        assert excinfo.value.requester == 'b'
        assert registry.state.only is a

    def test_registry_strict_claim_raises(self, stream):
        reg = Registry(default_stream=stream, strict=True)
        reg.create('a').only()
        with pytest.raises(ExclusivityDenied):
            reg.create('b').only()

    def test_strict_false_overrides_registry(self, stream):
        reg = Registry(default_stream=stream, strict=True)
        reg.create('a').only()
        reg.create('b').only(strict=False)
        assert reg.state.only.name == 'a'

    def test_denied_claim_reported(self, registry, diagnostics):
        registry.diagnostics = diagnostics
        registry.create('a').only()
        registry.create('b').only()
        assert "only() denied for 'b' (held by 'a')" in diagnostics.getvalue()

    def test_concurrent_claims_single_winner(self, registry):
        loggers = [registry.create(f"l{i}") for i in range(16)]
        barrier = threading.Barrier(len(loggers))

        def claim(logger):
            barrier.wait()
            logger.only()

        threads = [threading.Thread(target=claim, args=(lg,)) for lg in loggers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert registry.state.only in loggers
        assert sum(lg.is_exclusive for lg in loggers) == 1


# =============================================================================
# pipe()
# =============================================================================

class TestPipe:
    """Stream replacement."""

    def test_pipe_redirects(self, registry, stream, other_stream):
        log = registry.create('svc')
        log.info('first')
        assert log.pipe(other_stream) is other_stream
        log.info('second')
        assert stream.data == [['first']]
        assert other_stream.data == [['second']]
        assert log.stream is other_stream

    def test_pipe_same_stream(self, registry, stream):
        log = registry.create('svc')
        assert log.pipe(stream) is stream
        assert log.stream is stream

    def test_pipe_only_affects_one_logger(self, registry, stream, other_stream):
        a = registry.create('a')
        b = registry.create('b')
        a.pipe(other_stream)
        b.info('x')
        assert [p.name for p in stream.payloads] == ['b']
        assert other_stream.payloads == []

    def test_no_stream_is_silent(self, registry, diagnostics):
        log = registry.create('svc')
        log.pipe(None)
        assert log.info('x') is log
        assert diagnostics.getvalue() == ""

    def test_no_stream_reported(self, registry, diagnostics):
        registry.diagnostics = diagnostics
        log = registry.create('svc')
        log.pipe(None)
        log.error('x')
        assert "'svc' has no stream; dropped level 3" in diagnostics.getvalue()

    def test_no_stream_strict_raises(self, stream):
        reg = Registry(default_stream=stream, strict=True)
        log = reg.create('svc')
        log.pipe(None)
        with pytest.raises(SinkUnavailable):
            log.error('x')

    def test_no_stream_filtered_call_never_raises(self, stream):
        """Filtering happens before the stream check."""
        reg = Registry(default_stream=stream, strict=True)
        log = reg.create('svc', level=ERROR)
        log.pipe(None)
        log.info('x')

    def test_stream_errors_propagate(self, registry):
        class Broken:
            def write(self, payload):
                raise RuntimeError("disk full")

            def pipe(self, stream):
                return stream

        log = registry.create('svc', stream=Broken())
        with pytest.raises(RuntimeError):
            log.info('x')
