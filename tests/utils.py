import io

DEBIAN_TORRENT = (
    b'd8:announce41:http://bttracker.debian.org:6969/announce'
    b'7:comment35:"Debian CD from cdimage.debian.org"'
    b"13:creation datei1391870037e"
    b"9:httpseedsl"
    b"85:http://cdimage.debian.org/cdimage/release/7.4.0/iso-cd/debian-7.4.0-amd64-netinst.iso"
    b"85:http://cdimage.debian.org/cdimage/archive/7.4.0/iso-cd/debian-7.4.0-amd64-netinst.iso"
    b"e"
    b"4:infod6:lengthi232783872e4:name30:debian-7.4.0-amd64-netinst.iso"
    b"12:piece lengthi262144e6:pieces0:e"
    b"e"
)


class TrickleStream:
    """Binary stream that returns at most `chunk` bytes per read()"""

    def __init__(self, data: bytes, chunk: int = 1):
        self.stream = io.BytesIO(data)
        self.chunk = chunk
        self.reads = 0

    def read(self, n: int = -1) -> bytes:
        self.reads += 1
        if n < 0:
            n = self.chunk
        return self.stream.read(min(n, self.chunk))


class FailingStream:
    """Binary stream that raises OSError once `data` has been read"""

    def __init__(self, data: bytes):
        self.stream = io.BytesIO(data)

    def read(self, n: int = -1) -> bytes:
        chunk = self.stream.read(n)
        if not chunk:
            raise OSError("connection reset")
        return chunk
