from doclib.builders.html import HtmlBuilder
from doclib.builders.ebook import EbookBuilder
from doclib.builders.pdf import PdfBuilder

BUILDERS = {
    "html": HtmlBuilder,
    "ebook": EbookBuilder,
    "pdf": PdfBuilder,
}
