"""Builders shared by the unit and service tests."""

import io
import time
import zipfile
from pathlib import Path

import httpx


def build_zip(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def mark_encrypted(data: bytes) -> bytes:
    """Set the encryption flag on every entry of a zip made by build_zip."""
    patched = bytearray(data)
    for signature, flag_offset in ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8)):
        start = patched.find(signature)
        while start != -1:
            patched[start + flag_offset] |= 0x01
            start = patched.find(signature, start + 4)
    return bytes(patched)


def write_descriptor_archive(path: Path, part_id: str, **metadata: str) -> Path:
    """Write a dropped descriptor archive holding one .epw file."""
    lines = [part_id] + [f"{key}={value}" for key, value in metadata.items()]
    path.write_bytes(build_zip({f"{path.stem}.epw": "\n".join(lines).encode()}))
    return path


def package_response(body: bytes, filename: str | None = "LIB_Foo.zip", status: int = 200) -> httpx.Response:
    headers = {"content-type": "application/x-zip"}
    if filename is not None:
        headers["content-disposition"] = f'attachment; filename="{filename}"'
    return httpx.Response(status, headers=headers, content=body)


def wait_until(predicate, timeout: float = 10.0, interval: float = 0.05) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


