import pytest

from fmeca_graph import PlaceholderCodec
from fmeca_graph.labels import encode_labels


def test_plain_ids_by_default():
    labels = encode_labels(["A", "B"], {}, {})
    assert labels.render == ["A", "B"]
    assert labels.copy == ["A", "B"]
    assert labels.encoded == [False, False]


def test_alternate_names_on_both_label_sets():
    labels = encode_labels(["A", "B"], {"B": "Bearing"}, {})
    assert labels.render == ["A", "Bearing"]
    assert labels.copy == ["A", "Bearing"]


def test_placeholder_encodes_position_and_keeps_copy_label():
    labels = encode_labels(["A", "B", "C"], {"B": "Bearing"}, {"B": "long placeholder", "C": "xy"})
    assert labels.render == ["A", "002g placeholder", "003#"]
    assert labels.copy == ["A", "Bearing", "C"]
    assert labels.encoded == [False, True, True]
    assert labels.copy_labels == {1: "A", 2: "Bearing", 3: "C"}


def test_virtual_labels_are_verbatim():
    labels = encode_labels(["A"], {}, {}, ["Leak", "007"])
    assert labels.render == ["A", "Leak", "007"]
    assert labels.copy == ["A", "Leak", "007"]
    assert labels.encoded == [False, False, False]


def test_short_placeholder_is_padded_with_fillers():
    assert PlaceholderCodec().encode("", 5) == "005#"
    assert PlaceholderCodec().encode("ab", 42) == "042#"


def test_codec_widens_for_large_graphs():
    codec = PlaceholderCodec.for_size(1500)
    assert codec.width == 4
    assert codec.encode("x", 1234) == "1234#"
    assert PlaceholderCodec.for_size(10).width == 3


def test_position_must_fit():
    with pytest.raises(ValueError):
        PlaceholderCodec(width=3).encode("x", 1000)
    with pytest.raises(ValueError):
        PlaceholderCodec().encode("x", 0)


@pytest.mark.parametrize("text", ["", "#", "Leak", "12345678", "a9b8c7"])
def test_decoded_position_matches_encoded_one(text):
    codec = PlaceholderCodec.for_size(2000)
    for position in (1, 9, 10, 99, 100, 999, 1000, 2000):
        assert codec.decode(codec.encode(text, position)) == position


def test_decode_without_position():
    assert PlaceholderCodec().decode("Bearing") is None
