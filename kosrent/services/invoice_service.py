"""
Invoice renderer
Renders a booking receipt from a jinja2 template and stores it on disk
"""
from datetime import date
from pathlib import Path
from typing import Optional
import logging

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from kosrent.config import settings
from kosrent.exceptions import RenderError
from kosrent.models.ontology import Booking

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
INVOICE_TEMPLATE = "invoice.html.j2"


def format_rupiah(amount: int) -> str:
    """900000 -> 'Rp 900.000'"""
    return "Rp " + f"{amount:,}".replace(",", ".")


def invoice_filename(invoice_number: str) -> str:
    return f"invoice-{invoice_number}.html"


class InvoiceRenderer:
    """Document rendering collaborator of the booking service"""

    def __init__(self, output_dir: Optional[str] = None):
        self.output_dir = Path(output_dir or settings.INVOICE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            undefined=StrictUndefined,
            autoescape=True,
            keep_trailing_newline=True,
        )
        self.env.filters["rupiah"] = format_rupiah

    def render(self, booking: Booking, invoice_number: str, issued_on: date) -> str:
        """
        Render and store the invoice of a booking

        Returns:
            File name of the stored document

        Raises:
            RenderError: template or file system failure
        """
        filename = invoice_filename(invoice_number)
        try:
            template = self.env.get_template(INVOICE_TEMPLATE)
            content = template.render(
                app_name=settings.APP_NAME,
                invoice_number=invoice_number,
                issued_on=issued_on,
                booking=booking,
                renter=booking.user,
                room=booking.room,
                kos=booking.room.kos,
            )
            self.output_dir.mkdir(parents=True, exist_ok=True)
            (self.output_dir / filename).write_text(content, encoding="utf-8")
        except (TemplateError, OSError) as e:
            logger.exception("Failed to render invoice %s", invoice_number)
            raise RenderError(f"Error generating invoice: {e}") from e

        logger.info("Invoice %s stored as %s", invoice_number, filename)
        return filename

    def download_url(self, filename: str) -> str:
        return f"{settings.INVOICE_URL_PREFIX.rstrip('/')}/{filename}"
