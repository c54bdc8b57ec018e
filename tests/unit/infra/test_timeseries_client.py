"""TimeSeriesClient 단위 테스트 — redis.Redis는 MagicMock (실제 서버 없음)."""

import logging
from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from redis_time_series.domain import (
    Aggregation,
    CompactionRule,
    DuplicatePolicy,
    Label,
    Reduce,
    Sample,
    TimeSeriesParseError,
    TimeSeriesValidationError,
    TimeStamp,
)
from redis_time_series.infra.redis import TimeSeriesClient


@pytest.fixture
def mock_redis() -> MagicMock:
    return MagicMock()


@pytest.fixture
def ts(mock_redis) -> TimeSeriesClient:
    return TimeSeriesClient(mock_redis)


class TestLifecycle:
    def test_create(self, ts, mock_redis):
        mock_redis.execute_command.return_value = "OK"
        assert ts.create("k", retention=5000) is True
        mock_redis.execute_command.assert_called_once_with("TS.CREATE", "k", "RETENTION", "5000")

    def test_create_not_ok(self, ts, mock_redis):
        mock_redis.execute_command.return_value = None
        assert ts.create("k") is False

    def test_create_with_policy(self, ts, mock_redis):
        mock_redis.execute_command.return_value = "OK"
        ts.create("k", duplicate_policy=DuplicatePolicy.MAX)
        mock_redis.execute_command.assert_called_once_with("TS.CREATE", "k", "DUPLICATE_POLICY", "MAX")

    def test_create_then_info_reports_retention(self, ts, mock_redis):
        mock_redis.execute_command.side_effect = [
            "OK",
            ["totalSamples", 0, "retentionTime", 5000, "labels", [], "rules", []],
        ]
        assert ts.create("k", retention=5000)
        info = ts.info("k")
        assert info.retention_time == 5000
        assert mock_redis.execute_command.call_args_list[1].args == ("TS.INFO", "k")

    def test_alter(self, ts, mock_redis):
        mock_redis.execute_command.return_value = "OK"
        assert ts.alter("k", labels=[Label(key="a", value="b")])
        mock_redis.execute_command.assert_called_once_with("TS.ALTER", "k", "LABELS", "a", "b")


class TestWrites:
    def test_add_returns_timestamp(self, ts, mock_redis):
        mock_redis.execute_command.return_value = 1000
        assert ts.add("k", 1000, 1.1) == TimeStamp.of(1000)
        mock_redis.execute_command.assert_called_once_with("TS.ADD", "k", "1000", "1.1")

    def test_add_auto(self, ts, mock_redis):
        mock_redis.execute_command.return_value = 1_700_000_000_000
        result = ts.add("k", TimeStamp.AUTO, 1.0)
        assert result.value == 1_700_000_000_000
        assert mock_redis.execute_command.call_args.args[2] == "*"

    def test_madd(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [1, 2]
        assert ts.madd([("a", 1, 1.0), ("b", 2, 2.0)]) == [TimeStamp.of(1), TimeStamp.of(2)]
        mock_redis.execute_command.assert_called_once_with("TS.MADD", "a", "1", "1.0", "b", "2", "2.0")

    def test_madd_partial_failure(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [1, ResponseError("TSDB: invalid timestamp")]
        with pytest.raises(ResponseError):
            ts.madd([("a", 1, 1.0), ("b", 0, 2.0)])

    def test_incrby(self, ts, mock_redis):
        mock_redis.execute_command.return_value = 5
        assert ts.incrby("k", 1, timestamp=5) == TimeStamp.of(5)
        mock_redis.execute_command.assert_called_once_with("TS.INCRBY", "k", "1.0", "TIMESTAMP", "5")

    def test_decrby(self, ts, mock_redis):
        mock_redis.execute_command.return_value = 5
        ts.decrby("k", 2)
        mock_redis.execute_command.assert_called_once_with("TS.DECRBY", "k", "2.0")

    def test_delete(self, ts, mock_redis):
        mock_redis.execute_command.return_value = 3
        assert ts.delete("k", "-", "+") == 3
        mock_redis.execute_command.assert_called_once_with("TS.DEL", "k", "-", "+")


class TestRules:
    def test_create_rule(self, ts, mock_redis):
        mock_redis.execute_command.return_value = "OK"
        rule = CompactionRule(dest_key="k:max", bucket_duration=1000, aggregation=Aggregation.MAX)
        assert ts.create_rule("k", rule)
        mock_redis.execute_command.assert_called_once_with(
            "TS.CREATERULE", "k", "k:max", "AGGREGATION", "MAX", "1000"
        )

    def test_delete_rule(self, ts, mock_redis):
        mock_redis.execute_command.return_value = "OK"
        assert ts.delete_rule("k", "k:max")
        mock_redis.execute_command.assert_called_once_with("TS.DELETERULE", "k", "k:max")


class TestReads:
    def test_get(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [10, "4.5"]
        assert ts.get("k") == Sample(time=TimeStamp.of(10), value=4.5)
        mock_redis.execute_command.assert_called_once_with("TS.GET", "k")

    def test_get_empty_series(self, ts, mock_redis):
        mock_redis.execute_command.return_value = []
        assert ts.get("k") is None

    def test_range(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [[1, "1"], [2, "2"]]
        samples = ts.range("k", "-", "+", aggregation=Aggregation.AVG, bucket_duration=10)
        assert [s.value for s in samples] == [1.0, 2.0]
        mock_redis.execute_command.assert_called_once_with("TS.RANGE", "k", "-", "+", "AGGREGATION", "AVG", "10")

    def test_revrange(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [[2, "2"], [1, "1"]]
        samples = ts.revrange("k", "-", "+", count=2)
        assert samples[0].time == TimeStamp.of(2)
        mock_redis.execute_command.assert_called_once_with("TS.REVRANGE", "k", "-", "+", "COUNT", "2")

    def test_mrange(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [["room=a", [["room", "a"]], [[1, "3"]]]]
        result = ts.mrange("-", "+", ["room=a"], group_by="room", reduce=Reduce.SUM)
        assert result[0].samples[0].value == 3.0
        mock_redis.execute_command.assert_called_once_with(
            "TS.MRANGE", "-", "+", "FILTER", "room=a", "GROUPBY", "room", "REDUCE", "SUM"
        )

    def test_mrevrange(self, ts, mock_redis):
        mock_redis.execute_command.return_value = []
        assert ts.mrevrange("-", "+", ["a=b"], with_labels=True) == []
        mock_redis.execute_command.assert_called_once_with("TS.MREVRANGE", "-", "+", "WITHLABELS", "FILTER", "a=b")

    def test_mget(self, ts, mock_redis):
        mock_redis.execute_command.return_value = [["k", [], [1, "1"]]]
        result = ts.mget(["a=b"])
        assert result[0].key == "k"
        assert result[0].sample.value == 1.0

    def test_query_index(self, ts, mock_redis):
        mock_redis.execute_command.return_value = ["k1", "k2"]
        assert ts.query_index(["a=b"]) == ["k1", "k2"]
        mock_redis.execute_command.assert_called_once_with("TS.QUERYINDEX", "a=b")


class TestErrors:
    def test_validation_before_call(self, ts, mock_redis):
        with pytest.raises(TimeSeriesValidationError):
            ts.mrange("-", "+", [])
        with pytest.raises(TimeSeriesValidationError):
            ts.range("k", "-", "+", aggregation=Aggregation.AVG)
        with pytest.raises(TimeSeriesValidationError):
            ts.mget(["a=b"], with_labels=True, selected_labels=["a"])
        mock_redis.execute_command.assert_not_called()

    def test_parse_error_propagates_and_logs(self, ts, mock_redis, caplog):
        mock_redis.execute_command.return_value = "OK"
        with caplog.at_level(logging.WARNING, logger="redis_time_series.infra.redis.timeseries"):
            with pytest.raises(TimeSeriesParseError):
                ts.info("k")
        assert "TS.INFO" in caplog.text

    def test_constraint_violation_in_reply_is_logged(self, ts, mock_redis, caplog):
        mock_redis.execute_command.return_value = ["rules", [["dest", -5, "AVG"]]]
        with caplog.at_level(logging.WARNING, logger="redis_time_series.infra.redis.timeseries"):
            with pytest.raises(TimeSeriesParseError, match="CompactionRule"):
                ts.info("k")
        assert "TS.INFO" in caplog.text

    def test_server_error_propagates_unchanged(self, ts, mock_redis):
        error = ResponseError("TSDB: key already exists")
        mock_redis.execute_command.side_effect = error
        with pytest.raises(ResponseError) as exc_info:
            ts.create("k")
        assert exc_info.value is error

    def test_connection_error_not_retried(self, ts, mock_redis):
        mock_redis.execute_command.side_effect = RedisConnectionError("down")
        with pytest.raises(RedisConnectionError):
            ts.get("k")
        assert mock_redis.execute_command.call_count == 1

    def test_wrapped_client_exposed(self, ts, mock_redis):
        assert ts.client is mock_redis
