"""docchat — grounded chat over uploaded documents (PDF, TXT, DOCX)."""

__version__ = "0.1.0"
