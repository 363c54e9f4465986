"""IO adapters kept outside the pure parsing core.

``io_pdf`` needs PyMuPDF and is imported on demand.
"""

__all__ = ["emit_json", "io_json", "io_pdf"]
