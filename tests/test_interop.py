import logging
from pathlib import Path

import pytest

from bencodec import INT64_MIN, decode, encode

lt = pytest.importorskip("libtorrent")

logger = logging.getLogger(__name__)

TRACKER_URL = "http://localhost:8080/announce"


@pytest.fixture
def workspace(tmp_path):
    logger.debug(f"Test Workspace: {tmp_path}")
    return str(tmp_path)


def create_torrent_file(workspace: str, size: int = 256 * 1024) -> bytes:
    """Create a payload in the workspace and return libtorrent's .torrent for it"""
    payload_path = Path(workspace) / "payload.dat"
    payload_path.write_bytes(b"A" * size)

    fs = lt.file_storage()
    lt.add_files(fs, str(payload_path))

    t = lt.create_torrent(fs)
    t.add_tracker(TRACKER_URL)
    t.set_creator("test-setup")

    lt.set_piece_hashes(t, str(payload_path.parent))
    return lt.bencode(t.generate())


class TestLibtorrent:
    """Compare against libtorrent's bencode implementation."""

    @pytest.fixture
    def sample(self):
        return {
            b"z": [1, 2, 3],
            b"a": {b"nested": [b"spam", {b"y": -7, b"x": b""}]},
            b"m": b"\x00\xff binary",
            b"min": INT64_MIN,
        }

    def test_same_encoding(self, sample):
        """Test that both encoders agree byte for byte."""
        assert encode(sample) == lt.bencode(sample)

    def test_libtorrent_decodes_ours(self, sample):
        """Test that libtorrent reads what we write."""
        assert lt.bdecode(encode(sample)) == sample

    def test_we_decode_libtorrent(self, sample):
        """Test that we read what libtorrent writes."""
        assert decode(lt.bencode(sample)) == sample

    def test_created_torrent(self, workspace):
        """Test a .torrent generated by libtorrent decodes and re-encodes identically."""
        data = create_torrent_file(workspace)

        metainfo = decode(data, strict=True)

        assert metainfo[b"announce"] == TRACKER_URL.encode()
        assert metainfo[b"info"][b"name"] == b"payload.dat"
        assert encode(metainfo) == data
