"""
inventory-report: build the printable bill and spreadsheet for a shipment.

    inventory-report template request.json
    inventory-report totals request.json
    inventory-report generate request.json --output-dir output --format both
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

import config
from models import ReportRequest
from report import ReportGenerator
from session import ReportSession
from utils import format_currency, format_plain_number

logger = logging.getLogger(__name__)

FORMAT_CHOICES = {
    "both": ("pdf", "excel"),
    "pdf": ("pdf",),
    "excel": ("excel",),
}


def setup_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level, logging.INFO),
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def load_request(path: str) -> ReportRequest:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ReportRequest.model_validate(data)


def cmd_generate(args: argparse.Namespace) -> int:
    request = load_request(args.input)
    generator = ReportGenerator()
    try:
        report = generator.generate(request.header, request.items, FORMAT_CHOICES[args.format])
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        paths = generator.save(report, args.output_dir)
    except OSError as e:
        logger.error("Could not save reports to %s: %s", args.output_dir, e)
        print(f"Error: could not save reports to {args.output_dir}: {e}", file=sys.stderr)
        return 3

    for path in paths:
        print(path)
    return 0


def cmd_totals(args: argparse.Namespace) -> int:
    session = ReportSession.from_request(load_request(args.input))
    totals = session.totals
    print(f"Items:        {len(session.items)}")
    print(f"Invoice Qty:  {format_plain_number(totals.total_invoice_qty)}")
    print(f"Rcvd Qty:     {format_plain_number(totals.total_rcvd_qty)}")
    print(f"Total Value:  {format_currency(totals.total_value)}")
    return 0


def cmd_template(args: argparse.Namespace) -> int:
    request = ReportSession().to_request()
    Path(args.output).write_text(
        json.dumps(request.model_dump(mode="json", by_alias=True), indent=2),
        encoding="utf-8",
    )
    print(f"Blank report written to {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inventory-report")
    sub = parser.add_subparsers(dest="command", required=True)

    p_generate = sub.add_parser("generate", help="Render the PDF and/or Excel report")
    p_generate.add_argument("input", help="Report JSON (header + items)")
    p_generate.add_argument("--output-dir", default=config.OUTPUT_DIR, help="Directory for the generated files")
    p_generate.add_argument("--format", choices=sorted(FORMAT_CHOICES), default="both")
    p_generate.set_defaults(func=cmd_generate)

    p_totals = sub.add_parser("totals", help="Print the totals of a report")
    p_totals.add_argument("input", help="Report JSON (header + items)")
    p_totals.set_defaults(func=cmd_totals)

    p_template = sub.add_parser("template", help="Write a blank report to fill in")
    p_template.add_argument("output", help="Where to write the JSON")
    p_template.set_defaults(func=cmd_template)

    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("Could not load %s: %s", getattr(args, "input", args.command), e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
