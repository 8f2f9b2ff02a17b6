"""Application layer: aggregate handle, snapshots, value codec, and ports."""
