class PdfExtractionError(Exception):
    """Raised when a PDF engine cannot parse the byte stream."""
