"""Atelier management CLI.

Usage:
    python src/manage.py setup-db               # Create all tables
    python src/manage.py drop-db                # Drop all tables
    python src/manage.py seed-counter [--base]  # Create the order counter row
"""

import argparse
import sys


def setup_database():
    from atelier.domain import atelier, init_domain
    from atelier.utils.db import setup_db

    print("Initializing atelier domain...")
    init_domain()
    print("Creating database schema...")
    providers = setup_db(atelier)
    print(f"  schema ready ({', '.join(providers) or 'no relational providers configured'}).")


def drop_database():
    from atelier.domain import atelier, init_domain
    from atelier.utils.db import drop_db

    print("Initializing atelier domain...")
    init_domain()
    print("Dropping database schema...")
    providers = drop_db(atelier)
    print(f"  schema dropped ({', '.join(providers) or 'no relational providers configured'}).")


def seed_order_counter(base=None):
    from atelier.domain import atelier, init_domain
    from atelier.ordering.order.counter import seed_counter

    init_domain()
    with atelier.domain_context():
        counter = seed_counter(base)
    print(f"Order counter ready: next order number is #{counter.last_issued + 1}.")


def main():
    parser = argparse.ArgumentParser(description="Atelier storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-counter", help="Create the order number counter if missing")
    seed_parser.add_argument(
        "--base",
        type=int,
        default=None,
        help="First order number to issue (default: ATELIER_ORDER_NUMBER_BASE or 1001)",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-counter":
        seed_order_counter(args.base)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
