import numpy as np
import pytest

from kmeans_pixelate.utils import (
    colour_usage_report,
    key_value_pairs_to_string,
    parse_int_or_default,
    split_rows_into_parts,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12", 12),
        ("+3", 3),
        ("-4", -4),
        ("007", 7),
        (" 5", 99),
        ("5 ", 99),
        ("1_0", 99),
        ("3.5", 99),
        ("abc", 99),
        ("", 99),
        ("99999999999999999999", 99),
        ("-99999999999999999999", 99),
        ("9223372036854775807", 9223372036854775807),
        ("-9223372036854775808", -9223372036854775808),
        ("9223372036854775808", 99),
    ],
)
def test_parse_int_or_default(text, expected):
    assert parse_int_or_default(text, 99) == expected


def test_split_rows_covers_range():
    spans = split_rows_into_parts(10, 3)
    assert spans == [(0, 4), (4, 8), (8, 10)]
    assert split_rows_into_parts(0, 3) == []
    assert split_rows_into_parts(5, 0) == [(0, 5)]


def test_colour_usage_report_sorted_by_count():
    img = np.zeros((2, 3, 4), dtype=np.uint8)
    img[0, :2] = (255, 0, 0, 255)
    img[1, 0] = (0, 0, 255, 128)
    report = colour_usage_report(img)
    assert report == [
        ("#00000000", 3),
        ("#ff0000ff", 2),
        ("#0000ff80", 1),
    ]


def test_key_value_pairs_formatting():
    line = key_value_pairs_to_string([("Pixels", 12345), ("Stable", True), ("Ratio", 0.5)])
    assert line == "Pixels: 12,345  Stable: on  Ratio: 0.5"
