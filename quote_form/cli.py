"""Command-line entrypoint for pricing breakdowns and stored forms."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from quote_form.application.use_cases import LoadQuoteFormUseCase, QuoteFormContext
from quote_form.config import SETTINGS
from quote_form.domain.errors import QuoteFormError
from quote_form.domain.models import DiscountKind, PricingInput, PricingResult
from quote_form.domain.pricing import compute_pricing, is_valid_pricing_input, pricing_warnings
from quote_form.domain.services import line_total
from quote_form.infrastructure.parsing.numbers import format_number, parse_number
from quote_form.infrastructure.storage.json_store import JsonQuoteFormRepository
from quote_form.infrastructure.webhook import DocumentWebhookNotifier
from quote_form.logging_setup import configure_logging
from quote_form.presentation.offer_report import PRICING_LABELS


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Supplier quote form tools")
    parser.add_argument("--log-level", default=SETTINGS.log_level, help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    price = sub.add_parser("price", help="Compute the pricing breakdown for a net total")
    price.add_argument("net_total", type=str, help="Net total, e.g. 1.234,56")
    price.add_argument("--discount", type=str, default="0", help="Discount value")
    price.add_argument(
        "--discount-kind",
        choices=[kind.value for kind in DiscountKind],
        default=DiscountKind.PERCENTAGE.value,
    )
    price.add_argument("--vat", type=str, default=format_number(SETTINGS.default_vat_rate), help="VAT rate in percent")
    price.add_argument("--cash-discount", type=str, default="0", help="Cash discount rate in percent")
    price.add_argument("--cash-discount-days", type=int, default=0)

    show = sub.add_parser("show", help="Print a stored form with its totals")
    show.add_argument("form_id", type=str)
    show.add_argument("--store", type=Path, default=SETTINGS.store_path, help="Path to the JSON form store")
    return parser.parse_args(argv)


def print_pricing(result: PricingResult) -> None:
    width = max(len(label) for _, label in PRICING_LABELS)
    for field, label in PRICING_LABELS:
        print(f"{label:<{width}}  {format_number(getattr(result, field)):>16} €")


def run_price(args: argparse.Namespace) -> int:
    pricing_input = PricingInput(
        net_total=parse_number(args.net_total),
        discount_value=parse_number(args.discount),
        discount_kind=DiscountKind(args.discount_kind),
        vat_rate_percent=parse_number(args.vat),
        cash_discount_rate_percent=parse_number(args.cash_discount),
        cash_discount_days=args.cash_discount_days,
    )
    if not is_valid_pricing_input(pricing_input):
        print("Invalid input: percentages must lie between 0 and 100", file=sys.stderr)
        return 2
    print_pricing(compute_pricing(pricing_input))
    for warning in pricing_warnings(pricing_input):
        print(f"Warning: {warning}")
    return 0


def run_show(args: argparse.Namespace) -> int:
    context = QuoteFormContext(
        repository=JsonQuoteFormRepository(args.store),
        notifier=DocumentWebhookNotifier(SETTINGS.webhook_url, SETTINGS.webhook_timeout),
    )
    try:
        view = LoadQuoteFormUseCase(context).execute(args.form_id)
    except QuoteFormError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    meta = view.meta
    print(meta.supplier_name)
    print("=" * len(meta.supplier_name))
    print(f"Status: {'Abgegeben' if meta.is_submitted else 'Entwurf'}")
    for position in view.positions:
        print(
            f"- {position.oz or '':<8} {position.description}: "
            f"{format_number(position.unit_price_net or 0)} € x {position.quantity or 1} = {format_number(line_total(position))} €"
        )
    print()
    print_pricing(view.pricing)
    for warning in view.warnings:
        print(f"Warning: {warning}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level)
    if args.command == "price":
        return run_price(args)
    return run_show(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
