import pytest

from mlrest.utils import chunk_list
from mlrest.utils.string_utils import is_string_type, strip_suffix
from mlrest.utils.time import conv_longdate_to_str, get_current_time_millis


@pytest.mark.parametrize(
    ("items", "size", "expected"),
    [
        ([], 3, []),
        ([1, 2, 3], 3, [[1, 2, 3]]),
        ([1, 2, 3, 4], 3, [[1, 2, 3], [4]]),
        (list(range(5)), 2, [[0, 1], [2, 3], [4]]),
    ],
)
def test_chunk_list(items, size, expected):
    assert list(chunk_list(items, size)) == expected


def test_strip_suffix_and_is_string_type():
    assert strip_suffix("http://host/", "/") == "http://host"
    assert strip_suffix("http://host", "") == "http://host"
    assert is_string_type("a")
    assert not is_string_type(b"a")


def test_current_time_millis():
    now = get_current_time_millis()
    assert isinstance(now, int)
    assert now > 1_600_000_000_000


def test_conv_longdate_to_str():
    assert conv_longdate_to_str(1700000000000, local_tz=False)[:4] == "2023"
