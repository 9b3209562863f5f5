from unittest.mock import MagicMock, patch

import checkout_gate.observability.metrics as metrics


@patch("checkout_gate.observability.metrics.get_redis")
def test_sync_snapshot_defaults_on_first_boot(mock_get_redis):
    r = MagicMock()
    r.get.return_value = None
    r.lrange.return_value = []
    mock_get_redis.return_value = r

    snap = metrics.get_sync_snapshot()

    assert snap["sync_attempts"] == 0
    assert snap["sync_success_rate"] == 0.0
    assert snap["p95_sync_latency"] == 0.0
    assert snap["recent_failed_sessions"] == []


@patch("checkout_gate.observability.metrics.get_redis")
def test_sync_snapshot_rates_and_percentiles(mock_get_redis):
    counters = {
        metrics.K_SYNC_ATT: "4",
        metrics.K_SYNC_OK: "3",
        metrics.K_SYNC_FAIL: "1",
        metrics.K_SYNC_SUPERSEDED: None,
    }
    lists = {
        metrics.K_SYNC_LAT: ["100", "200", "300", "bad"],
        metrics.K_SYNC_FAIL_RECENT: ["s9"],
    }
    r = MagicMock()
    r.get.side_effect = lambda k: counters.get(k)
    r.lrange.side_effect = lambda k, a, b: lists.get(k, [])
    mock_get_redis.return_value = r

    snap = metrics.get_sync_snapshot()

    assert snap["sync_success_rate"] == 75.0
    assert snap["sync_failed"] == 1
    assert snap["sync_superseded"] == 0
    assert snap["p50_sync_latency"] == 0.2
    assert snap["p95_sync_latency"] == 0.3
    assert snap["recent_failed_sessions"] == ["s9"]


@patch("checkout_gate.observability.metrics.get_redis")
def test_record_sync_failure_tracks_session(mock_get_redis):
    r = MagicMock()
    mock_get_redis.return_value = r

    metrics.record_sync_failure("s1")

    r.incr.assert_called_with(metrics.K_SYNC_FAIL, 1)
    r.lpush.assert_called_with(metrics.K_SYNC_FAIL_RECENT, "s1")
