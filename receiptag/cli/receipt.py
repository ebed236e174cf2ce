"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from receiptag.application.receipts.listing import run_list_saved_receipts
from receiptag.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
from receiptag.application.receipts.submit import ReceiptForm
from receiptag.application.receipts.workflow import ReceiptWorkflow
from receiptag.domain.labels import display_name
from receiptag.receipt.field_extractor import extract
from receiptag.receipt.formatter import format_parsed_receipt, format_tagging_session
from receiptag.receipt.tagging import TaggingSession
from receiptag.runtime import get_logger, load_settings
from receiptag.runtime.ocr_client import OcrProgress, is_ocr_service_available, ocr_language_for_locale
from receiptag.runtime.receipt_storage import storage_root

logger = get_logger(__name__)

REVIEW_HELP = """Commands:
  a <key> <text>        assign text to a field (existing or new key)
  c <label> = <text>    create a custom field from a typed label
  e <key> <value>       edit a field value
  r <key>               remove a custom field
  u                     undo all edits (revert)
  d                     done"""


def cmd_parse(args: argparse.Namespace) -> None:
    """Extract fields from a text file (or stdin) and print them."""
    if args.file in (None, "-"):
        text = sys.stdin.read()
    else:
        path = Path(args.file)
        if not path.exists():
            print(f"Error: file not found: {path}")
            sys.exit(1)
        text = path.read_text(encoding="utf-8")

    parsed = extract(text)
    if args.json:
        print(json.dumps(parsed.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_parsed_receipt(parsed, locale=args.locale))


def apply_review_command(session: TaggingSession, line: str, locale: str = "en") -> str:
    """Apply one interactive review command and describe the outcome."""
    line = line.strip()
    if not line:
        return ""
    command, _, rest = line.partition(" ")
    rest = rest.strip()

    if command == "a":
        key, _, text = rest.partition(" ")
        text = text.strip()
        if not key or not text:
            return "Usage: a <key> <text>"
        if session.assign(key, text):
            return f"{display_name(key, locale)} = {text}"
        return f"Could not assign to {key}"

    if command == "c":
        label, sep, text = rest.partition("=")
        if not sep or not label.strip() or not text.strip():
            return "Usage: c <label> = <text>"
        if session.assign_custom_label(label, text.strip()):
            return f"Added custom field for '{label.strip()}'"
        return f"Field already exists: {label.strip()}"

    if command == "e":
        key, _, value = rest.partition(" ")
        if session.edit(key, value.strip()):
            return f"{display_name(key, locale)} = {value.strip()}"
        return f"Unknown field: {key}"

    if command == "r":
        if session.remove_custom(rest):
            return f"Removed {rest}"
        return f"Only custom fields can be removed: {rest}"

    if command == "u":
        session.revert()
        return "Reverted all changes"

    return REVIEW_HELP


def _interactive_review(session: TaggingSession, locale: str) -> None:
    print(REVIEW_HELP)
    while True:
        print()
        print(format_tagging_session(session, locale=locale))
        suggestions = session.available_suggestions()
        if suggestions:
            print(f"Suggested keys: {', '.join(suggestions)}")
        try:
            line = input("> ")
        except EOFError:
            return
        if line.strip() == "d":
            return
        message = apply_review_command(session, line, locale=locale)
        if message:
            print(message)


def _prompt_form(form: ReceiptForm, subjects: tuple[str, ...]) -> ReceiptForm:
    def ask(label: str, current: str) -> str:
        answer = input(f"{label} [{current}]: ").strip()
        return answer or current

    print(f"Subjects: {', '.join(subjects)}")
    return ReceiptForm(
        receipt_number=ask("Receipt number", form.receipt_number),
        project_name=ask("Project name", form.project_name),
        subject=ask("Subject", form.subject),
        amount=ask("Amount", form.amount),
    )


def _print_progress(progress: OcrProgress) -> None:
    print(f"  {progress.status}... {round(progress.progress * 100)}%")


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a receipt image, review fields, then save it locally."""
    settings = load_settings()
    language = ocr_language_for_locale(args.locale) if args.locale else settings.ocr_language

    workflow = ReceiptWorkflow()
    receipt_path = Path(args.image)
    result = run_receipt_scan(
        ReceiptScanRequest(
            image_path=receipt_path,
            ocr_url=args.ocr_url or settings.ocr_url,
            language=language,
            on_progress=_print_progress,
        )
    )

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        sys.exit(1)

    workflow.image_captured(result.image_bytes, image_ext=receipt_path.suffix.lstrip(".").lower() or "jpg")
    session = workflow.ocr_completed(result.ocr_text, parsed=result.parsed)
    locale = args.locale or "en"
    print(format_parsed_receipt(session.parsed, locale=locale))

    if args.interactive:
        _interactive_review(session, locale)

    form = workflow.continue_to_form()
    if args.no_save:
        print(json.dumps(workflow.fields, ensure_ascii=False, indent=2))
        return

    form = ReceiptForm(
        receipt_number=form.receipt_number,
        project_name=args.project or form.project_name,
        subject=args.subject or form.subject,
        amount=form.amount,
    )
    if args.interactive:
        form = _prompt_form(form, settings.subjects)

    submit_result = workflow.submit(form)
    if submit_result.status == "invalid":
        print(f"Missing or invalid fields: {', '.join(submit_result.invalid_fields)}")
        print("Pass --project/--subject or use --interactive to fill them in.")
        sys.exit(1)
    if submit_result.status == "storage_failed" or submit_result.entry is None:
        print(f"Save failed: {submit_result.error}")
        sys.exit(1)

    print(f"\nSaved receipt {submit_result.entry.receiptNumber} to {storage_root() / submit_result.entry.imagePath}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receipt parsing and uploads."""
    import uvicorn

    from receiptag.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Storage: {storage_root()}")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)


def cmd_list(args: argparse.Namespace) -> None:
    """List locally saved receipts."""
    listing = run_list_saved_receipts()
    if not listing.receipts:
        print(f"No saved receipts in {listing.storage_path}")
        return

    print(f"Saved receipts in {listing.storage_path}:")
    for entry in listing.receipts:
        print(f"  {entry.date}  {entry.receiptNumber:<14} {entry.projectName:<20} {entry.subject:<16} {entry.amount}")


def cmd_status(args: argparse.Namespace) -> None:
    """Show storage location and OCR service reachability."""
    settings = load_settings()
    available = is_ocr_service_available(settings.ocr_url)
    print("Mode: local")
    print(f"Storage: {storage_root()}")
    print(f"OCR service: {settings.ocr_url} ({'available' if available else 'unavailable'})")

