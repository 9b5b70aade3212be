import logging
from collections.abc import Iterable
from pathlib import Path

from exports import to_excel, to_pdf
from models import Branding, GeneratedReport, LineItem, ReportHeader, ReportSnapshot
from totals import compute_totals
from utils import build_report_filename, safe_filename, validate_header

logger = logging.getLogger(__name__)

FORMATS = ("pdf", "excel")


def capture_snapshot(header: ReportHeader, items: Iterable[LineItem]) -> ReportSnapshot:
    """Freeze header and items together with their totals."""
    items = tuple(items)
    return ReportSnapshot(header=header, items=items, totals=compute_totals(items))


class ReportGenerator:
    def __init__(self, branding: Branding | None = None):
        self.branding = branding

    def generate(
        self,
        header: ReportHeader,
        items: Iterable[LineItem],
        formats: Iterable[str] = FORMATS,
    ) -> GeneratedReport:
        """
        Render the requested artifacts from one snapshot of header + items.

        Raises ValueError before rendering anything if the buyer name is missing.
        """
        formats = tuple(formats)
        unknown = set(formats) - set(FORMATS)
        if unknown:
            raise ValueError(
                f"Unknown format(s) {', '.join(sorted(unknown))}. Allowed: {', '.join(FORMATS)}"
            )

        try:
            validate_header(header)
        except ValueError:
            logger.warning("Report generation aborted: buyer name missing")
            raise

        snapshot = capture_snapshot(header, items)
        base_filename = build_report_filename(snapshot.header, snapshot.totals)

        report = GeneratedReport(
            base_filename=base_filename,
            totals=snapshot.totals,
            item_count=len(snapshot.items),
            pdf=to_pdf(snapshot, self.branding) if "pdf" in formats else None,
            excel=to_excel(snapshot, self.branding) if "excel" in formats else None,
        )
        logger.info(
            "Generated %r: %d item(s), total value %.2f",
            base_filename, report.item_count, report.totals.total_value,
        )
        return report

    def save(self, report: GeneratedReport, output_dir: str | Path) -> list[Path]:
        """Write the rendered artifacts into output_dir. Returns the written paths."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for filename, content in (
            (report.pdf_filename, report.pdf),
            (report.excel_filename, report.excel),
        ):
            if content is None:
                continue
            path = output_dir / safe_filename(filename)
            path.write_bytes(content)
            logger.info("Saved %s", path)
            written.append(path)
        return written
