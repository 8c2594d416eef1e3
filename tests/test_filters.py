import numpy as np
import pytest
import scipy.signal

from iqdemod.filters import AGC, ExponentialSmoother, FIRFilter, boxcar_taps


class TestBoxcar:
    def test_unity_gain(self):
        taps = boxcar_taps(4)
        np.testing.assert_allclose(taps, [0.25] * 4)
        assert np.sum(taps) == pytest.approx(1.0)

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            boxcar_taps(0)


class TestExponentialSmoother:
    def test_update_rule(self):
        smoother = ExponentialSmoother(0.25, initial=1.0)
        assert smoother.tick(5.0) == pytest.approx(2.0)
        assert smoother.tick(2.0) == pytest.approx(2.0)

    def test_converges_to_constant(self):
        smoother = ExponentialSmoother(0.1)
        for _ in range(500):
            out = smoother.tick(3.0)
        assert out == pytest.approx(3.0)

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.5, 2.0])
    def test_invalid_alpha(self, alpha):
        with pytest.raises(ValueError):
            ExponentialSmoother(alpha)


class TestAGC:
    def test_first_sample_uses_unit_power_seed(self):
        agc = AGC(0.01)
        out = agc.tick(3 + 4j)
        assert out == pytest.approx((3 + 4j) / np.sqrt(0.99 + 0.01 * 25))

    def test_normalizes_constant_amplitude(self):
        agc = AGC(0.01)
        for _ in range(3000):
            out = agc.tick(3 + 4j)
        assert abs(out) == pytest.approx(1.0, abs=1e-6)
        assert np.angle(out) == pytest.approx(np.angle(3 + 4j))

    def test_normalizes_weak_bpsk(self, rng):
        agc = AGC(0.01)
        symbols = 0.01 * np.where(rng.integers(0, 2, 4000), 1.0, -1.0)
        out = np.array([agc.tick(complex(s)) for s in symbols])
        assert np.mean(np.abs(out[-1000:]) ** 2) == pytest.approx(1.0, rel=1e-3)

    def test_zero_power_does_not_divide_by_zero(self):
        agc = AGC(0.5)
        agc.power.state = 0.0
        assert agc.tick(0j) == 0


class TestFIRFilter:
    def test_matches_lfilter(self, rng):
        taps = np.array([0.5, 0.3, 0.2])
        x = rng.standard_normal(50)
        fir = FIRFilter(taps, dtype=np.float64, fill=0.0)
        y = [fir.tick(v) for v in x]
        np.testing.assert_allclose(y, scipy.signal.lfilter(taps, 1.0, x), rtol=1e-12)

    def test_complex_matches_lfilter(self, rng):
        taps = boxcar_taps(5)
        x = rng.standard_normal(40) + 1j * rng.standard_normal(40)
        fir = FIRFilter(taps, dtype=np.complex128, fill=0.0)
        y = [fir.tick(v) for v in x]
        np.testing.assert_allclose(y, scipy.signal.lfilter(taps, 1.0, x), rtol=1e-12)

    def test_history_seeded_with_ones(self):
        fir = FIRFilter([0.2] * 5, dtype=np.float64)
        assert fir.num_taps == 5
        assert fir.tick(0.0) == pytest.approx(0.8)
        assert fir.tick(0.0) == pytest.approx(0.6)

    def test_boxcar_converges_to_mean(self):
        fir = FIRFilter(boxcar_taps(4), dtype=np.float64, fill=0.0)
        for v in [1.0, 3.0] * 10:
            out = fir.tick(v)
        assert out == pytest.approx(2.0)

    def test_newest_tap_first(self):
        fir = FIRFilter([1.0, 0.0, 0.0], dtype=np.float64, fill=0.0)
        assert fir.tick(7.0) == pytest.approx(7.0)

    def test_invalid_taps(self):
        with pytest.raises(ValueError):
            FIRFilter([])
