"""Main CLI entry point for the Dwolla toolkit."""

import argparse
import json
import logging
import sys
from datetime import date

from dwolla_toolkit.core import (
    ClientSettings,
    CustomerStatus,
    ConfigError,
    DwollaError,
    HttpError,
    save_settings,
    load_settings_or_default,
)
from dwolla_toolkit.core.config_store import describe_settings
from dwolla_toolkit.core.models import CUSTOMER_STATUSES
from dwolla_toolkit.client import generate_client

logger = logging.getLogger(__name__)

VARIANTS = [
    "receive-only",
    "unverified",
    "personal",
    "sole-proprietorship",
    "business-with-controller",
]

PERSONAL_FIELDS = [
    "address1", "city", "state", "postal_code", "ssn", "date_of_birth",
]
BUSINESS_FIELDS = PERSONAL_FIELDS + [
    "business_classification", "business_name", "ein",
]


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    # Suppress httpx INFO logs for cleaner output
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_status(value: str | None) -> CustomerStatus | None:
    """Map a --status argument to a CustomerStatus (None means no filter)."""
    if not value:
        return None
    status = CUSTOMER_STATUSES.get(value.lower())
    if status is None:
        raise argparse.ArgumentTypeError(f"Invalid status '{value}'")
    return status


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def cmd_configure(args):
    """Handle the configure command."""
    settings = load_settings_or_default()
    settings = ClientSettings(
        client_id=args.client_id or settings.client_id,
        sandbox=not args.production,
        timeout_seconds=args.timeout if args.timeout is not None else settings.timeout_seconds,
    )

    try:
        path = save_settings(settings)
    except ConfigError as e:
        _fail(str(e))

    print("Saved settings:")
    for key, value in describe_settings(settings).items():
        print(f"  {key}: {value}")
    print(f"Configuration saved to: {path}")


def cmd_token(args):
    """Handle the token command."""
    try:
        with generate_client() as client:
            token = client.refresh_token()
    except DwollaError as e:
        _fail(str(e))

    print(f"Token obtained, expires in {int(token.expires_in.total_seconds())}s")
    print(f"  Expires at: {token.expires_at.isoformat()}")


def cmd_list_customers(args):
    """Handle the list-customers command."""
    try:
        with generate_client() as client:
            client.refresh_token()
            customers = client.list_customers(
                offset=args.offset,
                limit=args.limit,
                search=args.search,
                status=args.status,
            )
    except HttpError as e:
        _fail(f"API request failed ({e.status_code}): {e.body}")
    except (DwollaError, ValueError) as e:
        _fail(str(e))

    if args.json:
        print(json.dumps([customer.to_dict() for customer in customers], indent=2))
        return

    if not customers:
        print("No customers found.")
        return

    print(f"Customers ({len(customers)}):")
    print()
    for customer in customers:
        print(f"  ID:      {customer.id}")
        print(f"  Name:    {customer.first_name} {customer.last_name}")
        print(f"  Email:   {customer.email}")
        print(f"  Type:    {customer.type.value}")
        print(f"  Status:  {customer.status.value}")
        print(f"  Created: {customer.created.isoformat() if customer.created else '-'}")
        print()


def _check_required(args, fields: list[str]):
    missing = [name for name in fields if getattr(args, name) in (None, "")]
    if missing:
        flags = ", ".join("--" + name.replace("_", "-") for name in missing)
        _fail(f"Variant '{args.variant}' requires: {flags}")


def cmd_create_customer(args):
    """Handle the create-customer command."""
    if args.variant == "personal":
        _check_required(args, PERSONAL_FIELDS)
    elif args.variant in ("sole-proprietorship", "business-with-controller"):
        _check_required(args, BUSINESS_FIELDS)

    names = (args.first_name, args.last_name, args.email)

    try:
        with generate_client() as client:
            client.refresh_token()

            if args.variant == "receive-only":
                created = client.create_receive_only_user(*names)
            elif args.variant == "unverified":
                created = client.create_unverified_customer(*names)
            else:
                kyc = (
                    args.address1, args.address2 or "", args.city, args.state,
                    args.postal_code, args.ssn, args.date_of_birth,
                )
                if args.variant == "personal":
                    created = client.create_verified_personal_customer(*names, *kyc)
                else:
                    business = (args.business_classification, args.business_name, args.ein)
                    if args.variant == "sole-proprietorship":
                        created = client.create_verified_sole_prop_customer(
                            *names, *kyc, *business
                        )
                    else:
                        created = client.create_verified_business_customer_with_controller(
                            *names, *kyc, *business
                        )
    except DwollaError as e:
        _fail(str(e))

    if not created:
        _fail(f"Failed to create {args.variant} customer '{args.email}'")

    print(f"Created {args.variant} customer '{args.email}'")


def cmd_list_classifications(args):
    """Handle the list-classifications command."""
    try:
        with generate_client() as client:
            client.refresh_token()
            classifications = client.list_business_classifications()
    except HttpError as e:
        _fail(f"API request failed ({e.status_code}): {e.body}")
    except DwollaError as e:
        _fail(str(e))

    print(f"Business classifications ({len(classifications)}):")
    for classification in classifications:
        print(f"  {classification.id}  {classification.name}")


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dwolla-toolkit",
        description="Dwolla API toolkit CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Configure command
    configure_parser = subparsers.add_parser("configure", help="Save client settings")
    configure_parser.add_argument("--client-id", help="Dwolla application client id")
    configure_parser.add_argument(
        "--production",
        action="store_true",
        help="Use the production API instead of the sandbox",
    )
    configure_parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    configure_parser.set_defaults(func=cmd_configure)

    # Token command
    token_parser = subparsers.add_parser("token", help="Obtain an access token")
    token_parser.set_defaults(func=cmd_token)

    # List customers command
    list_parser = subparsers.add_parser("list-customers", help="List customers")
    list_parser.add_argument("--offset", type=int, default=0, help="How many results to skip")
    list_parser.add_argument("--limit", type=int, default=30, help="How many results to return (max 200)")
    list_parser.add_argument("--search", default="", help="Search names and email")
    list_parser.add_argument(
        "--status",
        type=parse_status,
        help="Filter by status (unverified, retry, document, verified, suspended, deactivated)",
    )
    list_parser.add_argument("--json", action="store_true", help="Print customers as JSON")
    list_parser.set_defaults(func=cmd_list_customers)

    # Create customer command
    create_parser = subparsers.add_parser("create-customer", help="Create a customer")
    create_parser.add_argument("--variant", required=True, choices=VARIANTS, help="Customer variant")
    create_parser.add_argument("--first-name", required=True)
    create_parser.add_argument("--last-name", required=True)
    create_parser.add_argument("--email", required=True)
    create_parser.add_argument("--address1")
    create_parser.add_argument("--address2")
    create_parser.add_argument("--city")
    create_parser.add_argument("--state", help="Two-letter state abbreviation")
    create_parser.add_argument("--postal-code")
    create_parser.add_argument("--ssn")
    create_parser.add_argument("--date-of-birth", type=parse_date, help="YYYY-MM-DD")
    create_parser.add_argument("--business-classification", help="Industry classification id")
    create_parser.add_argument("--business-name")
    create_parser.add_argument("--ein")
    create_parser.set_defaults(func=cmd_create_customer)

    # List classifications command
    classifications_parser = subparsers.add_parser(
        "list-classifications", help="List business classifications"
    )
    classifications_parser.set_defaults(func=cmd_list_classifications)

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
