import numpy as np
import pytest

from iqdemod.ringbuffer import RingBuffer


def _filled(values, capacity=4):
    buf = RingBuffer(capacity, dtype=np.int64)
    for v in values:
        buf.push(v)
    return buf


class TestRingBuffer:
    def test_initial_fill(self):
        buf = RingBuffer(3, dtype=np.float32, fill=7)
        assert len(buf) == 3
        assert buf.dtype == np.float32
        np.testing.assert_array_equal(buf.to_array(), [7, 7, 7])

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            RingBuffer(0)

    def test_push_overwrites_oldest(self):
        buf = _filled([1, 2, 3, 4, 5])
        np.testing.assert_array_equal(buf.to_array(), [2, 3, 4, 5])
        assert len(buf) == 4

    def test_newest_relative_indexing(self):
        buf = _filled([1, 2, 3, 4, 5])
        assert buf[0] == 5
        assert buf[-1] == 4
        assert buf[-3] == 2
        # offsets wrap modulo the capacity
        assert buf[-4] == 5
        assert buf[1] == 2
        assert buf[3] == 4

    def test_oldest_relative_indexing(self):
        buf = _filled([1, 2, 3, 4, 5])
        assert buf.oldest() == 2
        assert buf.oldest(1) == 3
        assert buf.oldest(3) == 5
        assert buf.oldest(4) == 2

    @pytest.mark.parametrize("offset", [4, -5, 100])
    def test_newest_out_of_range(self, offset):
        buf = _filled([1, 2, 3])
        with pytest.raises(IndexError):
            buf[offset]
        with pytest.raises(IndexError):
            buf[offset] = 0

    @pytest.mark.parametrize("offset", [-1, 5])
    def test_oldest_out_of_range(self, offset):
        buf = _filled([1, 2, 3])
        with pytest.raises(IndexError):
            buf.oldest(offset)
        with pytest.raises(IndexError):
            buf.set_oldest(offset, 0)

    def test_item_assignment(self):
        buf = _filled([1, 2, 3, 4])
        buf[0] = 40
        buf[-2] = 20
        buf.set_oldest(0, 10)
        np.testing.assert_array_equal(buf.to_array(), [10, 20, 3, 40])

    def test_fill_keeps_cursor(self):
        buf = _filled([1, 2, 3])
        buf.fill(0)
        buf.push(9)
        assert buf[0] == 9
        np.testing.assert_array_equal(buf.to_array(), [0, 0, 0, 9])

    def test_to_array_is_copy(self):
        buf = _filled([1, 2, 3, 4])
        arr = buf.to_array()
        arr[:] = 0
        assert buf[0] == 4

    def test_complex_storage(self):
        buf = RingBuffer(2)
        buf.push(1 + 2j)
        assert buf.dtype == np.complex64
        assert buf[0] == pytest.approx(1 + 2j)
        assert buf[-1] == 0


@pytest.mark.parametrize("capacity", [1, 2, 5, 8])
@pytest.mark.parametrize("extra", [0, 1, 3, 17])
def test_newest_and_oldest_after_wraps(capacity, extra):
    buf = RingBuffer(capacity, dtype=np.int64)
    for v in range(capacity + extra):
        buf.push(v)
        assert buf[0] == v
    assert buf.oldest() == extra
    np.testing.assert_array_equal(buf.to_array(), np.arange(extra, capacity + extra))
