import re

# Allowed image MIME types and the extension used for their storage key.
# The extension is never taken from the client-supplied filename.
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}

SVG_MIME_TYPE = "image/svg+xml"

# Magic bytes for binary formats
IMAGE_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/jpg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "image/gif": (b"GIF87a", b"GIF89a"),
    # RIFF container only, the inner WEBP chunk is not inspected
    "image/webp": (b"RIFF",),
}

SIGNATURE_PREFIX_SIZE = 16
SVG_SNIFF_SIZE = 1024

_SVG_TAG_PATTERN = re.compile(r"<svg[\s>]", re.IGNORECASE)
_XML_PROLOGUE_PATTERN = re.compile(r"<\?xml")


def is_allowed_type(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type in ALLOWED_IMAGE_TYPES


def extension_for(mime_type: str) -> str:
    try:
        return ALLOWED_IMAGE_TYPES[mime_type]
    except KeyError:
        raise ValueError(f"File type {mime_type} is not allowed")


class SignatureValidator:
    """Checks that file content agrees with its declared content type.

    Binary formats are matched against known byte prefixes. SVG is text, so the
    first kilobyte is decoded and searched for an ``<svg`` tag or an XML prologue.
    """

    def __init__(
        self,
        signatures: dict[str, tuple[bytes, ...]] | None = None,
        svg_sniff_size: int = SVG_SNIFF_SIZE,
    ):
        self.signatures = signatures if signatures is not None else IMAGE_SIGNATURES
        self.svg_sniff_size = svg_sniff_size

    def validate(self, data: bytes, mime_type: str) -> bool:
        if mime_type == SVG_MIME_TYPE:
            return self._validate_svg(data)

        candidates = self.signatures.get(mime_type)
        if not candidates:
            return False

        prefix = data[:SIGNATURE_PREFIX_SIZE]
        return any(
            len(prefix) >= len(signature) and prefix[: len(signature)] == signature
            for signature in candidates
        )

    def _validate_svg(self, data: bytes) -> bool:
        text = data[: self.svg_sniff_size].decode("utf-8", errors="replace")
        return bool(
            _SVG_TAG_PATTERN.search(text) or _XML_PROLOGUE_PATTERN.search(text)
        )
