from __future__ import annotations


class Las2PngError(RuntimeError):
    pass


class PointSourceError(Las2PngError):
    pass


class TileStorageError(Las2PngError):
    pass
