import numpy as np
import pytest

from iqdemod.__main__ import build_parser, main
from iqdemod.baseband import bpsk_waveform, frame_bits
from iqdemod.config import ReceiverConfig
from iqdemod.io import write_samples

PAYLOAD = b"hello, receiver!"


@pytest.fixture
def capture(tmp_path):
    """A cf32 file holding two frames plus the matching YAML configuration."""
    config = ReceiverConfig(payload_length=8 * len(PAYLOAD), loop_bandwidth=0.0)
    config_path = tmp_path / "receiver.yaml"
    config.to_yaml(str(config_path))

    frame = frame_bits(PAYLOAD, config.syncword)
    lead = np.arange(40) % 2 == 0
    bits = np.concatenate([lead, frame, lead, frame, lead])
    samples_path = tmp_path / "capture.cf32"
    write_samples(str(samples_path), bpsk_waveform(bits, 5, timing_offset=1.0))
    return samples_path, config_path


def test_parser_defaults():
    args = build_parser().parse_args(["capture.cf32"])
    assert args.samples == "capture.cf32"
    assert args.config is None
    assert args.output is None
    assert args.plot is None
    assert args.log_level == "INFO"


def test_decode_to_file(capture, tmp_path):
    samples_path, config_path = capture
    output = tmp_path / "payloads.bin"

    status = main([str(samples_path), "--config", str(config_path), "--output", str(output)])

    assert status == 0
    assert output.read_bytes() == PAYLOAD * 2


def test_output_is_appended(capture, tmp_path):
    samples_path, config_path = capture
    output = tmp_path / "payloads.bin"
    output.write_bytes(b"previous:")

    main([str(samples_path), "--config", str(config_path), "--output", str(output)])
    assert output.read_bytes() == b"previous:" + PAYLOAD * 2


def test_plot(capture, tmp_path):
    samples_path, config_path = capture
    plot = tmp_path / "constellation.png"

    status = main([str(samples_path), "--config", str(config_path), "--plot", str(plot)])

    assert status == 0
    assert plot.stat().st_size > 0


def test_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.cf32"), "--log-level", "ERROR"]) == 1


def test_truncated_input(tmp_path):
    path = tmp_path / "broken.cf32"
    path.write_bytes(b"\x00" * 6)
    assert main([str(path)]) == 1


def test_divergence_exit_status(capture, tmp_path):
    samples_path, _ = capture
    config_path = tmp_path / "fast.yaml"
    # a loop this wide overshoots by more than a full clock cycle
    ReceiverConfig(payload_length=8 * len(PAYLOAD), loop_bandwidth=50.0).to_yaml(
        str(config_path)
    )
    assert main([str(samples_path), "--config", str(config_path)]) == 1


@pytest.mark.parametrize(
    "text",
    [
        "payload_length: 7\n",
        "samples_per_symbol: [5, 6\n",
        "- 1\n- 2\n",
    ],
    ids=["invalid-value", "malformed-yaml", "not-a-mapping"],
)
def test_bad_config_exit_status(capture, tmp_path, text):
    samples_path, _ = capture
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(text)
    assert main([str(samples_path), "--config", str(config_path)]) == 1


def test_missing_config_exit_status(capture, tmp_path):
    samples_path, _ = capture
    missing = tmp_path / "missing.yaml"
    assert main([str(samples_path), "--config", str(missing)]) == 1


def test_unknown_log_level(capture):
    samples_path, _ = capture
    with pytest.raises(SystemExit) as exc:
        main([str(samples_path), "--log-level", "LOUD"])
    assert exc.value.code == 2
