"""Text extraction from uploaded training documents."""

from dataclasses import dataclass

# Allowed file extensions for text-based files
TEXT_EXTENSIONS = {".txt", ".md", ".markdown"}
PDF_EXTENSIONS = {".pdf"}

# Allowed content types when extension is missing or unknown
TEXT_CONTENT_TYPES = ("text/plain", "text/markdown")
PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class FileTextResult:
    """Result of text extraction from a file."""

    text: str
    detected_encoding: str
    document_type: str


def _get_extension(filename: str) -> str:
    """Extract lowercase file extension from filename."""
    if "." in filename:
        return "." + filename.rsplit(".", 1)[-1].lower()
    return ""


def _decode_bytes(raw_bytes: bytes) -> tuple[str, str]:
    """
    Attempt to decode bytes using fallback chain.

    Returns:
        Tuple of (decoded_text, encoding_name)

    Raises:
        ValueError: If no encoding works
    """
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        try:
            return raw_bytes.decode("utf-8-sig"), "utf-8-sig"
        except UnicodeDecodeError:
            pass

    for encoding in ("utf-8", "latin-1"):
        try:
            return raw_bytes.decode(encoding), encoding
        except UnicodeDecodeError:
            continue

    raise ValueError(
        "Unable to decode file content. Supported encodings: UTF-8, UTF-8-BOM, Latin-1."
    )


def _extract_pdf_text(raw_bytes: bytes) -> str:
    """Extract the text layer of a PDF with PyMuPDF."""
    import fitz

    try:
        with fitz.open(stream=raw_bytes, filetype="pdf") as doc:
            return "\n".join(page.get_text() for page in doc).strip()
    except Exception as e:
        raise ValueError(f"Unable to read PDF: {e}") from e


def extract_text_from_upload(
    filename: str,
    content_type: str | None,
    raw_bytes: bytes,
) -> FileTextResult:
    """
    Extract text content from an uploaded training document.

    Args:
        filename: Original filename
        content_type: MIME content type (may be None)
        raw_bytes: Raw file bytes

    Returns:
        FileTextResult with extracted text, encoding and document type

    Raises:
        ValueError: If file type is not supported or content cannot be read
    """
    extension = _get_extension(filename or "")
    mime = (content_type or "").lower().split(";")[0].strip()

    if extension in PDF_EXTENSIONS or mime == PDF_CONTENT_TYPE:
        return FileTextResult(
            text=_extract_pdf_text(raw_bytes),
            detected_encoding="binary",
            document_type="pdf",
        )

    if extension in TEXT_EXTENSIONS or mime in TEXT_CONTENT_TYPES:
        text, encoding = _decode_bytes(raw_bytes)
        document_type = "markdown" if extension in {".md", ".markdown"} or mime == "text/markdown" else "text"
        return FileTextResult(text=text, detected_encoding=encoding, document_type=document_type)

    allowed = ", ".join(sorted(TEXT_EXTENSIONS | PDF_EXTENSIONS))
    raise ValueError(f"Unsupported file type. Allowed extensions: {allowed}.")
