from unittest.mock import MagicMock, patch

import redis

from briefboarder.services import caching
from briefboarder.services.caching import cached_get


def test_no_redis_configured_passes_through():
    with patch.object(caching, "_get_sync_redis", return_value=None):
        assert cached_get("k") is None
        assert cached_get("k", set_value={"a": 1}, ttl=5) == {"a": 1}


def test_round_trip_through_json():
    fake = MagicMock()
    fake.get.return_value = '{"a": 1}'
    with patch.object(caching, "_get_sync_redis", return_value=fake):
        assert cached_get("k") == {"a": 1}
        cached_get("k", set_value="v", ttl=60)

    fake.set.assert_called_once_with("k", '"v"', ex=60)
    assert fake.close.call_count == 2


def test_redis_errors_fail_soft():
    fake = MagicMock()
    fake.get.side_effect = redis.ConnectionError("down")
    fake.set.side_effect = redis.ConnectionError("down")
    with patch.object(caching, "_get_sync_redis", return_value=fake):
        assert cached_get("k") is None
        assert cached_get("k", set_value="v") == "v"
