"""
Output writers for BallotBase exports.
"""

import csv
import datetime
import io
import os
from typing import List, Optional, Sequence, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    PageBreak,
    PageTemplate,
    Paragraph,
    Table,
    TableStyle,
)

from ballotbase.assembler import Selection, assemble_job
from ballotbase.config import Config, PdfConfig
from ballotbase.log import get_logger
from ballotbase.model import (
    ExportError,
    ExportFormat,
    ExportJob,
    ExportTable,
    RenderError,
    VoterRecord,
)

logger = get_logger(__name__)

# Page geometry of the list document (mm)
MARGIN_X = 14
MARGIN_BOTTOM = 20
HEADER_BAND = 60  # First page: branding, title, timestamp, count
RUNNING_HEADER = 16  # Later pages: "<title> (Page n)"

# Cell text longer than this no longer widens its column
MAX_WEIGHT_CHARS = 60


def output_filename(title: str, fmt: Union[ExportFormat, str]) -> str:
    """
    Return the download name for an export: "<title>_voters.<ext>".
    """
    ext = ExportFormat(fmt).value
    safe_title = title.replace("/", "_").replace("\\", "_").strip() or "export"
    return f"{safe_title}_voters.{ext}"


def render_csv(table: ExportTable, escape_values: bool = False) -> str:
    """
    Serialize a table as comma-joined lines, header first.

    Values are joined as-is unless escape_values is set, so a value that
    contains a comma shifts the columns after it.

    Args:
        table: Assembled table
        escape_values: Quote values with the csv module

    Returns:
        CSV text
    """
    if escape_values:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(table.headers)
        writer.writerows(table.rows)
        return buf.getvalue().rstrip("\n")

    lines = [",".join(table.headers)]
    lines.extend(",".join(row) for row in table.rows)
    return "\n".join(lines)


def write_csv(table: ExportTable, path: str, escape_values: bool = False) -> None:
    """
    Write a table to a UTF-8 CSV file.

    Args:
        table: Assembled table
        path: Output file path
        escape_values: Quote values with the csv module
    """
    logger.info(f"Writing CSV to {path}")
    save_bytes(render_csv(table, escape_values).encode("utf-8"), path)
    logger.info(f"Wrote {table.row_count} rows to {path}")


def column_widths(table: ExportTable, available: float, cfg: PdfConfig) -> List[float]:
    """
    Compute column widths in points.

    The first column has a fixed width; the others split the remaining width in
    proportion to their longest cell, but never drop below the minimum width
    unless the page is too narrow for every column.
    """
    count = table.column_count
    if count == 0:
        return []
    if count == 1:
        return [available]

    first = min(cfg.first_column_width * mm, available / count)
    remaining = available - first
    minimum = cfg.min_column_width * mm

    weights = []
    for index in range(1, count):
        longest = len(table.headers[index])
        for row in table.rows:
            longest = max(longest, len(row[index]))
        weights.append(max(1, min(longest, MAX_WEIGHT_CHARS)))

    total = float(sum(weights))
    widths = [max(minimum, remaining * weight / total) for weight in weights]

    # Minimum widths may overflow the page; scale back to fit
    overflow = sum(widths)
    if overflow > remaining:
        widths = [width * remaining / overflow for width in widths]

    return [first] + widths


def column_bands(table: ExportTable, available: float, cfg: PdfConfig) -> List[List[int]]:
    """
    Group column indexes into bands that fit the page at the minimum width.

    Every band starts with the first column so each printed slice of the
    table stays identifiable. A table that fits gives a single band.
    """
    count = table.column_count
    if count <= 1:
        return [list(range(count))]

    # The first column never takes more than first_column_width in a band
    per_band = max(1, int((available - cfg.first_column_width * mm) // (cfg.min_column_width * mm)))

    others = list(range(1, count))
    return [[0] + others[start:start + per_band] for start in range(0, len(others), per_band)]


def _band_table(table: ExportTable, band: List[int]) -> ExportTable:
    return ExportTable(
        fields=[table.fields[i] for i in band],
        headers=[table.headers[i] for i in band],
        rows=[[row[i] for i in band] for row in table.rows],
    )


def _paragraph_styles(cfg: PdfConfig):
    body = ParagraphStyle(
        "ExportCell",
        fontName="Helvetica",
        fontSize=cfg.font_size,
        leading=cfg.font_size + 2,
    )
    head = ParagraphStyle(
        "ExportHeader",
        parent=body,
        fontName="Helvetica-Bold",
        textColor=colors.white,
    )
    return head, body


def draw_brand(canvas, x: float, y: float, cfg: PdfConfig, font_size: int = 24) -> None:
    """
    Draw the two-tone brand text with its baseline at (x, y).
    """
    canvas.setFont("Helvetica", font_size)
    canvas.setFillColor(colors.HexColor(cfg.brand_primary_color))
    canvas.drawString(x, y, cfg.brand_primary)
    offset = canvas.stringWidth(cfg.brand_primary, "Helvetica", font_size)
    canvas.setFillColor(colors.HexColor(cfg.brand_secondary_color))
    canvas.drawString(x + offset, y, cfg.brand_secondary)
    canvas.setFillColor(colors.black)


def render_pdf(
    table: ExportTable,
    title: str,
    cfg: Optional[PdfConfig] = None,
    generated_at: Optional[datetime.datetime] = None,
) -> bytes:
    """
    Render a table as a landscape, paginated PDF.

    The first page carries the header band; every page carries a running
    header and the repeated table header row. Tables too wide for the page
    are printed in column bands, each led by the first column.

    Args:
        table: Assembled table
        title: List title
        cfg: PDF configuration
        generated_at: Timestamp printed in the header band (defaults to now)

    Returns:
        PDF bytes

    Raises:
        RenderError: If the document cannot be rendered
    """
    cfg = cfg or PdfConfig()
    generated_at = generated_at or datetime.datetime.now()
    page_width, page_height = landscape(A4)
    frame_width = page_width - 2 * MARGIN_X * mm

    logger.info(f"Rendering PDF for {title}: {table.row_count} rows, {table.column_count} columns")

    def draw_running_header(canvas, doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 10)
        canvas.drawString(
            MARGIN_X * mm,
            page_height - 10 * mm,
            f"{title} (Page {canvas.getPageNumber()})",
        )
        canvas.restoreState()

    def draw_first_page(canvas, doc):
        canvas.saveState()
        draw_brand(canvas, MARGIN_X * mm, page_height - 20 * mm, cfg)
        canvas.setFont("Helvetica", 18)
        canvas.drawString(MARGIN_X * mm, page_height - 35 * mm, title)
        canvas.setFont("Helvetica", 10)
        canvas.drawString(
            MARGIN_X * mm,
            page_height - 45 * mm,
            f"Generated on: {generated_at.strftime(cfg.timestamp_format)}",
        )
        canvas.drawString(MARGIN_X * mm, page_height - 52 * mm, f"Total voters: {table.row_count}")
        canvas.restoreState()
        draw_running_header(canvas, doc)

    buffer = io.BytesIO()
    try:
        doc = BaseDocTemplate(
            buffer,
            pagesize=landscape(A4),
            leftMargin=MARGIN_X * mm,
            rightMargin=MARGIN_X * mm,
            topMargin=RUNNING_HEADER * mm,
            bottomMargin=MARGIN_BOTTOM * mm,
            title=title,
            author=cfg.brand_primary + cfg.brand_secondary,
            invariant=1,
        )
        first_frame = Frame(
            MARGIN_X * mm,
            MARGIN_BOTTOM * mm,
            frame_width,
            page_height - (HEADER_BAND + MARGIN_BOTTOM) * mm,
            id="first",
            leftPadding=0,
            rightPadding=0,
        )
        later_frame = Frame(
            MARGIN_X * mm,
            MARGIN_BOTTOM * mm,
            frame_width,
            page_height - (RUNNING_HEADER + MARGIN_BOTTOM) * mm,
            id="later",
            leftPadding=0,
            rightPadding=0,
        )
        doc.addPageTemplates([
            PageTemplate(id="first", frames=[first_frame], onPage=draw_first_page, autoNextPageTemplate="later"),
            PageTemplate(id="later", frames=[later_frame], onPage=draw_running_header),
        ])

        story = []
        if not table.is_empty():
            head_style, body_style = _paragraph_styles(cfg)
            bands = column_bands(table, frame_width, cfg)
            if len(bands) > 1:
                logger.info(f"Splitting {table.column_count} columns into {len(bands)} page bands")

            for number, band in enumerate(bands):
                part = _band_table(table, band)
                data = [[Paragraph(escape(h), head_style) for h in part.headers]]
                data.extend([Paragraph(escape(v), body_style) for v in row] for row in part.rows)

                # Rows taller than a page continue on the next one
                pdf_table = Table(
                    data,
                    colWidths=column_widths(part, frame_width, cfg),
                    repeatRows=1,
                    splitInRow=1,
                )
                pdf_table.setStyle(TableStyle([
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(cfg.header_fill_color)),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("TOPPADDING", (0, 0), (-1, 0), 3 * mm),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 3 * mm),
                    ("TOPPADDING", (0, 1), (-1, -1), 2 * mm),
                    ("BOTTOMPADDING", (0, 1), (-1, -1), 2 * mm),
                    ("LEFTPADDING", (0, 0), (-1, -1), 2 * mm),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 2 * mm),
                ]))
                if number:
                    story.append(PageBreak())
                story.append(pdf_table)
        else:
            story.append(Paragraph("", ParagraphStyle("Empty")))

        doc.build(story)
    except Exception as e:
        logger.error(f"Error generating PDF for {title}: {e}")
        raise RenderError(f"Error generating PDF for {title}: {e}")

    return buffer.getvalue()


def write_pdf(
    table: ExportTable,
    title: str,
    path: str,
    cfg: Optional[PdfConfig] = None,
    generated_at: Optional[datetime.datetime] = None,
) -> None:
    """
    Render a table as PDF and write it to a file.

    Nothing is written when rendering fails.
    """
    logger.info(f"Writing PDF to {path}")
    data = render_pdf(table, title, cfg, generated_at)
    save_bytes(data, path)
    logger.info(f"Wrote {table.row_count} rows to {path}")


def run_export(
    job: ExportJob,
    cfg: Optional[Config] = None,
    output_dir: Optional[str] = None,
    generated_at: Optional[datetime.datetime] = None,
) -> Optional[str]:
    """
    Assemble and write one export job.

    Args:
        job: Export job
        cfg: Application configuration
        output_dir: Directory for the file (defaults to cfg.export.output_dir)
        generated_at: Timestamp for PDF headers

    Returns:
        Path of the written file, or None when there is nothing to export
    """
    cfg = cfg or Config()
    table = assemble_job(job, cfg.export.header_style)
    if table.is_empty():
        logger.warning(f"Nothing to export for {job.title}: no fields selected")
        return None

    path = os.path.join(output_dir or cfg.export.output_dir, output_filename(job.title, job.fmt))
    if job.fmt == ExportFormat.CSV:
        write_csv(table, path, cfg.export.csv_escape)
    else:
        write_pdf(table, job.title, path, cfg.pdf, generated_at)
    return path


def export_voters(
    records: Sequence[VoterRecord],
    selection: Selection,
    title: str,
    fmt: Union[ExportFormat, str] = ExportFormat.CSV,
    cfg: Optional[Config] = None,
    export_all: bool = False,
    output_dir: Optional[str] = None,
    generated_at: Optional[datetime.datetime] = None,
) -> Optional[str]:
    """
    Export voter records to CSV or PDF.

    Args:
        records: Voter records
        selection: Selected field keys or a FieldSelection
        title: List title, used in the file name and the PDF header
        fmt: "csv" or "pdf"
        cfg: Application configuration
        export_all: Export every field of the first record
        output_dir: Directory for the file
        generated_at: Timestamp for PDF headers

    Returns:
        Path of the written file, or None when there is nothing to export
    """
    try:
        fmt = ExportFormat(fmt)
    except ValueError:
        raise ExportError(f"Unsupported export format: {fmt}")

    job = ExportJob(records=records, selection=selection, title=title, export_all=export_all, fmt=fmt)
    return run_export(job, cfg, output_dir, generated_at)


def save_bytes(data: bytes, path: str) -> None:
    """
    Write bytes to path, creating parent directories.
    """
    try:
        # Create output directory if it doesn't exist
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        logger.error(f"Error writing {path}: {e}")
        raise ExportError(f"Error writing {path}: {e}")
