"""Best-effort text extraction from uploaded resumes."""
import io
import logging
import re
import zipfile
from xml.etree import ElementTree as ET

import PyPDF2
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)

MIN_USEFUL_CHARS = 15


def _safe_decode(b: bytes) -> str:
    return b.decode("utf-8", errors="ignore")


def extract_docx_text(data: bytes) -> str:
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
        root = ET.fromstring(zf.read("word/document.xml"))
    except (zipfile.BadZipFile, KeyError, ET.ParseError) as e:
        logger.warning("DOCX extraction failed: %s", e)
        return ""
    out = []
    for e in root.iter():
        tag = e.tag.split('}')[-1]
        if tag == "t":
            out.append(e.text or "")
        elif tag in ("br", "p"):
            out.append("\n")
    s = re.sub(r"\n{3,}", "\n\n", "".join(out))
    return s.strip()


def extract_pdf_text(data: bytes) -> str:
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(data))
        pages = [p.extract_text() or "" for p in reader.pages]
    except (PdfReadError, ValueError, OSError) as e:
        logger.warning("PDF extraction failed: %s", e)
        return ""
    return "\n".join(pages).strip()


def extract_text(data: bytes, filename: str) -> str:
    """Extract readable text; falls back to a raw decode for unknown formats."""
    name = (filename or "").lower()
    if name.endswith(".docx"):
        txt = extract_docx_text(data)
    elif name.endswith(".pdf"):
        txt = extract_pdf_text(data)
    else:
        txt = _safe_decode(data)
    if len(txt.strip()) < MIN_USEFUL_CHARS and not name.endswith(".pdf"):
        fallback = _safe_decode(data)
        if len(fallback.strip()) > len(txt.strip()):
            txt = fallback
    return txt.strip()
