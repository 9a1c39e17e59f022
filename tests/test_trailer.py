"""
Tests for bytecode_metadata/trailer.py

Covers:
  - Length field parsing (big-endian, final two bytes)
  - Trailer byte range computation
  - Short buffers (InsufficientData)
  - Declared lengths that overrun the buffer (TrailerOverrun)
  - Totality over every short buffer length
"""

import pytest
from bytecode_metadata.errors import InsufficientData, MetadataError, TrailerOverrun
from bytecode_metadata.trailer import (
    CBOR_LENGTH_FIELD_SIZE,
    RawTrailerView,
    locate_trailer,
)


# ---------------------------------------------------------------------------
# Successful location
# ---------------------------------------------------------------------------

class TestLocateTrailer:
    def test_basic_range(self):
        code = b"\x60\x80\x60\x40"
        cbor = b"\xa0\xa0\xa0"
        view = locate_trailer(code + cbor + b"\x00\x03")
        assert view.start == 4
        assert view.end == 7
        assert view.declared_length == 3
        assert view.data == cbor

    def test_length_matches_declared(self):
        view = locate_trailer(b"\xfe" * 10 + b"\x00\x05")
        assert len(view) == view.declared_length == 5
        assert view.end - view.start == 5

    def test_length_is_big_endian(self):
        buffer = b"\x00" * 0x0102 + b"\x01\x02"
        view = locate_trailer(buffer)
        assert view.declared_length == 258
        assert view.start == 0

    def test_trailer_fills_whole_buffer(self):
        view = locate_trailer(b"\xa0\x00\x01")
        assert view.start == 0
        assert view.data == b"\xa0"

    def test_zero_length_trailer(self):
        view = locate_trailer(b"\x60\x00\x00\x00")
        assert view.declared_length == 0
        assert view.data == b""
        assert view.start == view.end == 2

    def test_only_length_field(self):
        view = locate_trailer(b"\x00\x00")
        assert view.start == 0
        assert view.end == 0

    def test_accepts_bytearray_and_memoryview(self):
        buffer = b"\x01\x02\xa0\x00\x01"
        assert locate_trailer(bytearray(buffer)).data == b"\xa0"
        assert locate_trailer(memoryview(buffer)).data == b"\xa0"

    def test_view_is_immutable(self):
        view = locate_trailer(b"\xa0\x00\x01")
        assert isinstance(view, RawTrailerView)
        with pytest.raises(AttributeError):
            view.start = 1


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------

class TestLocateTrailerErrors:
    @pytest.mark.parametrize("buffer", [b"", b"\x00"])
    def test_insufficient_data(self, buffer):
        with pytest.raises(InsufficientData) as exc_info:
            locate_trailer(buffer)
        assert exc_info.value.length == len(buffer)
        assert exc_info.value.required == CBOR_LENGTH_FIELD_SIZE

    def test_overrun_by_one(self):
        # Declares 3 bytes but only 2 precede the length field
        with pytest.raises(TrailerOverrun) as exc_info:
            locate_trailer(b"\xa0\xa0\x00\x03")
        assert exc_info.value.declared_length == 3
        assert exc_info.value.available == 2

    def test_overrun_max_length(self):
        with pytest.raises(TrailerOverrun):
            locate_trailer(b"\x60\x80\xff\xff")

    def test_errors_share_base_class(self):
        with pytest.raises(MetadataError):
            locate_trailer(b"")
        with pytest.raises(ValueError):
            locate_trailer(b"\xff\xff")

    @pytest.mark.parametrize("size", range(0, 40))
    def test_locator_is_total(self, size):
        """Every buffer either yields an in-bounds view or a typed error."""
        buffer = bytes((i * 37 + 11) & 0xFF for i in range(size))
        try:
            view = locate_trailer(buffer)
        except (InsufficientData, TrailerOverrun):
            return
        assert 0 <= view.start <= view.end <= len(buffer) - CBOR_LENGTH_FIELD_SIZE
        assert view.end - view.start == view.declared_length
