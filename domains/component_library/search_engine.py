"""
Component search engine client.

Downloads a component package for a descriptor and converts it for each
configured output format:
- Passthrough (zip) → the downloaded archive, saved as-is
- EAGLE / EasyEDA / KiCad → archive entries run through the format's extractor
"""

import base64
import io
import zipfile
from typing import List, Optional

import httpx
from loguru import logger

from app.models.schemas import Descriptor, Files, Format
from app.utils.helpers import UNREADABLE_ZIP_ERRORS, format_bytes
from domains.component_library.exceptions import ArchiveError, FetchError
from domains.component_library.extractors import extractor_for
from domains.component_library.result import FetchResult

ZIP_CONTENT_TYPE = "application/x-zip"
DEFAULT_FILENAME = "unknown.zip"
LIB_PREFIX = "LIB_"


def parse_filename(content_disposition: Optional[str]) -> str:
    """
    Extract the filename from a ``content-disposition`` header.

    ``attachment; filename="LIB_Foo.zip"`` gives ``LIB_Foo.zip``; a missing
    header gives the placeholder name.
    """
    if content_disposition is None:
        return DEFAULT_FILENAME

    return (
        content_disposition
        .replace("attachment;", "")
        .strip()
        .replace("filename=", "")
        .replace('"', "")
        .strip()
    )


def library_name(filename: str) -> str:
    """Strip the ``LIB_`` prefix and ``.zip`` suffix from a package filename."""
    if filename.startswith(LIB_PREFIX):
        filename = filename[len(LIB_PREFIX):]
    return filename.replace(".zip", "")


class ComponentSearchEngine:
    """Authenticated fetch-and-convert pipeline for component packages."""

    def __init__(
        self,
        token: str,
        formats: List[Format],
        base_url: str,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize search engine client.

        Args:
            token: Profile credential, sent base64 encoded
            formats: Output formats to produce
            base_url: Endpoint the descriptor id is appended to
            timeout: Request timeout in seconds, None disables it
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.auth = base64.b64encode(token.encode()).decode()
        self.formats = list(formats)
        self.base_url = base_url
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def close(self):
        """Close the underlying HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def get(self, descriptor: Descriptor) -> List[FetchResult]:
        """
        Fetch and convert a package for every configured format.

        Raises:
            LibraryLoaderError: The first failure, remaining formats are not attempted
        """
        return [self.get_for_format(descriptor, fmt) for fmt in self.formats]

    def get_for_format(self, descriptor: Descriptor, fmt: Format) -> FetchResult:
        """
        Fetch a package and convert it for one format.

        Args:
            descriptor: Remote package reference
            fmt: Target format

        Returns:
            Save-ready result

        Raises:
            FetchError: Request failed, non-success status or wrong content type
            ArchiveError: Downloaded package is not a readable zip
            ExtractionError: An entry could not be placed
        """
        filename, body = self.download(descriptor)

        if fmt.is_passthrough:
            return FetchResult(format=fmt, output_path=fmt.output_path, files={filename: body})

        lib_name = library_name(filename)
        files = self.unzip(fmt, body)

        return FetchResult(format=fmt, output_path=fmt.output_path / lib_name, files=files)

    def download(self, descriptor: Descriptor) -> tuple[str, bytes]:
        """
        Download the package referenced by ``descriptor``.

        Returns:
            Tuple of (filename, body)
        """
        url = f"{self.base_url}{descriptor.id}"

        try:
            with self.client.stream(
                "GET",
                url,
                headers={"Authorization": f"Basic {self.auth}"},
            ) as response:
                if not response.is_success:
                    raise FetchError(
                        f"Error downloading file: {response.status_code}",
                        status_code=response.status_code,
                    )

                if response.headers.get("content-type") != ZIP_CONTENT_TYPE:
                    raise FetchError(
                        "Error downloading file: Could not determine content type",
                        status_code=response.status_code,
                    )

                try:
                    body = response.read()
                except httpx.HTTPError as e:
                    raise FetchError(f"Error copying data from response: {e}") from e

                filename = parse_filename(response.headers.get("content-disposition"))

        except httpx.HTTPError as e:
            raise FetchError(f"Error downloading file: {e}") from e

        logger.debug(f"GET {url} -> {response.status_code}, {format_bytes(len(body))}, {filename}")
        return filename, body

    def unzip(self, fmt: Format, data: bytes) -> Files:
        """
        Run every archive entry through the extractor for ``fmt``.

        A failing entry aborts the whole conversion.
        """
        extractor = extractor_for(fmt.ecad)
        files: Files = {}

        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                for info in archive.infolist():
                    with archive.open(info) as reader:
                        extractor.extract(files, info.filename, reader)

        except UNREADABLE_ZIP_ERRORS as e:
            raise ArchiveError(f"Downloaded package could not be read: {e}") from e

        return files
