import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_content_types = {
    # Maps leading bytes of content to mimetype
    b"%PDF-": "application/pdf",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"\xff\xd8\xff": "image/jpeg",
    b"PK\x03\x04": "application/zip",
    b"\x1f\x8b": "application/gzip",
    b"<?xml": "application/xml",
    b"#!": "text/x-shellscript",
    b"#cloud-config": "text/cloud-config",
}


def guess_type(filename: str = None, head: bytes = b"") -> str:
    """
    Best guess at the mimetype of a file part: by filename extension first,
    then by looking at the first few bytes of the content.
    """
    if filename:
        content_type, _ = mimetypes.guess_type(filename, strict=False)
        if content_type:
            return content_type

    return sniff_type(head) or DEFAULT_CONTENT_TYPE


def sniff_type(head: bytes):
    # Longest prefix wins
    for prefix in sorted(_content_types, key=len, reverse=True):
        if head.startswith(prefix):
            return _content_types[prefix]
    return None
