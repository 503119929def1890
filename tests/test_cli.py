import numpy as np
import pytest
from PIL import Image

import quantize_pixelate as cli


def _write(path, arr, fmt):
    Image.fromarray(arr).save(path, format=fmt)
    return str(path)


def _halves(h=4, w=4):
    arr = np.zeros((h, w, 3), dtype=np.uint8)
    arr[: h // 2] = (255, 0, 0)
    arr[h // 2 :] = (0, 0, 255)
    return arr


def test_end_to_end_png(tmp_path, capsys):
    src = _write(tmp_path / "in.png", _halves(), "PNG")
    dst = tmp_path / "out.png"
    assert cli.main([src, str(dst), "1", "2"]) == 0
    with Image.open(dst) as im:
        out = np.array(im)
    assert np.all(out[:2] == (255, 0, 0))
    assert np.all(out[2:] == (0, 0, 255))
    stdout = capsys.readouterr().out
    assert f"Pixelated image with 2 colors saved to {dst}" in stdout


def test_two_colour_advisory_only_for_exactly_two(tmp_path, capsys):
    src = _write(tmp_path / "in.png", _halves(), "PNG")
    cli.main([src, str(tmp_path / "a.png"), "2", "2"])
    assert "PNG output is recommended" in capsys.readouterr().out
    cli.main([src, str(tmp_path / "b.png"), "2", "3"])
    assert "PNG output is recommended" not in capsys.readouterr().out


def test_jpeg_input_writes_jpeg(tmp_path):
    src = _write(tmp_path / "in.jpg", _halves(16, 16), "JPEG")
    dst = tmp_path / "out.png"
    assert cli.main([src, str(dst), "4", "2"]) == 0
    with Image.open(dst) as im:
        assert im.format == "JPEG"


def test_unparsable_numbers_fall_back_to_defaults():
    args = cli.parse_cli_args(["a.png", "b.png", "big", "many"])
    assert args.pixel_size == 10
    assert args.num_colors == 16
    args = cli.parse_cli_args(["a.png", "b.png", "3", "8"])
    assert (args.pixel_size, args.num_colors) == (3, 8)


@pytest.mark.parametrize(
    "argv", [[], ["a.png"], ["a.png", "b.png", "3"], ["a", "b", "1", "2", "extra"]]
)
def test_wrong_argument_count_exits_with_usage(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_unsupported_input_format_is_fatal(tmp_path, capsys):
    src = _write(tmp_path / "in.bmp", _halves(), "BMP")
    dst = tmp_path / "out.bmp"
    assert cli.main([src, str(dst), "2", "2"]) == 1
    assert "Unsupported image format: BMP" in capsys.readouterr().err
    assert not dst.exists()


def test_missing_input_is_fatal(tmp_path, capsys):
    assert cli.main([str(tmp_path / "none.png"), str(tmp_path / "o.png"), "2", "2"]) == 1
    assert "Error opening input file" in capsys.readouterr().err


def test_corrupt_input_is_fatal(tmp_path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"\x89PNG\r\n\x1a\n broken")
    assert cli.main([str(bad), str(tmp_path / "o.png"), "2", "2"]) == 1
    assert "Error decoding image" in capsys.readouterr().err


def test_unwritable_output_is_fatal(tmp_path, capsys):
    src = _write(tmp_path / "in.png", _halves(), "PNG")
    dst = tmp_path / "no_such_dir" / "o.png"
    assert cli.main([src, str(dst), "2", "2"]) == 1
    assert "Error creating output file" in capsys.readouterr().err


@pytest.mark.parametrize("pixel_size, num_colors", [("0", "4"), ("-3", "4"), ("2", "0")])
def test_non_positive_sizes_are_fatal(tmp_path, capsys, pixel_size, num_colors):
    src = _write(tmp_path / "in.png", _halves(), "PNG")
    dst = tmp_path / "o.png"
    assert cli.main([src, str(dst), pixel_size, num_colors]) == 1
    assert "[error]" in capsys.readouterr().err
    assert not dst.exists()


def test_report_lists_colours(tmp_path, capsys):
    src = _write(tmp_path / "in.png", _halves(), "PNG")
    cli.main([src, str(tmp_path / "o.png"), "1", "2", "--report"])
    out = capsys.readouterr().out
    assert "#ff0000ff: 8" in out
    assert "#0000ffff: 8" in out


def test_until_stable_and_workers_flags(tmp_path, capsys):
    src = _write(tmp_path / "in.png", _halves(8, 8), "PNG")
    dst = tmp_path / "o.png"
    assert cli.main([src, str(dst), "2", "2", "--until-stable", "--workers", "2", "--debug"]) == 0
    out = capsys.readouterr().out
    assert "Rounds: 2" in out
    assert "Stable: on" in out


def test_auto_workers(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "default_workers", lambda: 3)
    src = _write(tmp_path / "in.png", _halves(8, 8), "PNG")
    dst = tmp_path / "o.png"
    assert cli.main([src, str(dst), "2", "2", "--workers", "0"]) == 0
    assert dst.exists()


def test_option_like_numbers_fall_back_to_defaults():
    args = cli.parse_cli_args(["a.png", "b.png", "-x", "--colors"])
    assert args.pixel_size == 10
    assert args.num_colors == 16
    args = cli.parse_cli_args(["a.png", "b.png", "-3", "-x", "--rounds", "2"])
    assert (args.pixel_size, args.num_colors, args.rounds) == (-3, 16, 2)


def test_out_of_range_numbers_fall_back_to_defaults():
    args = cli.parse_cli_args(["a.png", "b.png", "99999999999999999999", "2"])
    assert args.pixel_size == 10


def test_flags_mix_with_positionals():
    args = cli.parse_cli_args(["--debug", "a.png", "--workers=3", "b.png", "4", "--report", "5"])
    assert (args.pixel_size, args.num_colors, args.workers) == (4, 5, 3)
    assert args.debug and args.report


def test_option_like_pixel_size_runs_with_default(tmp_path, capsys):
    src = _write(tmp_path / "in.png", _halves(), "PNG")
    dst = tmp_path / "o.png"
    assert cli.main([src, str(dst), "-x", "2"]) == 0
    assert "Block size: 10" in capsys.readouterr().out
    assert dst.exists()
