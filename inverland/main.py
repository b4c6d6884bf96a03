#!/usr/bin/env python3
"""
Inverland CRM - Command Line Interface

Usage:
    inverland sync
    inverland dedupe
    inverland users
    inverland properties --location Monterrey --min-price 1000000
    inverland send-campaign <campaign_id>
    inverland store
    inverland serve --port 5000
"""
import argparse
import json
import logging
import sys

from inverland.container import build_container
from inverland.core.config import Settings
from inverland.services import InverlandError, PropertyFilters
from inverland.stores import RemoteStoreError


def print_json(data, indent=2):
    """Pretty print JSON data"""
    print(json.dumps(data, indent=indent, ensure_ascii=False, default=str))


def cmd_sync(args, container):
    """Show the result of startup user synchronisation"""
    print_json(container.sync_report.to_dict())


def cmd_dedupe(args, container):
    """Remove duplicate user records"""
    report = container.synchronizer.force_clean_duplicates()
    print(f"✓ Kept {report.kept} user(s), removed {len(report.removed)} duplicate(s)")
    if report.removed:
        print_json(report.removed)


def cmd_users(args, container):
    """List users"""
    users = container.users.all()
    print(f"Users ({len(users)}):")
    print("-" * 40)
    for user in users:
        print(f"  {user.username:<16} {user.role_name:<14} {user.name}")


def cmd_properties(args, container):
    """Search listings"""
    filters = PropertyFilters.from_dict({
        'type': args.type,
        'location': args.location,
        'operationType': args.operation,
        'minPrice': args.min_price,
        'maxPrice': args.max_price,
        'bedrooms': args.bedrooms,
        'bathrooms': args.bathrooms,
        'amenities': args.amenities,
        'agentId': args.agent,
    })
    page = container.properties.search(filters, page=args.page)
    print(f"Page {page.page}/{max(page.total_pages, 1)} - {page.total} listing(s)")
    print("-" * 40)
    for prop in page.items:
        price = prop.public_price
        shown = f"${price:,.0f}" if price is not None else "Precio a consultar"
        print(f"  [{prop.id}] {prop.title} ({prop.operation_type.value}) - {shown} - {prop.location}")


def cmd_send_campaign(args, container):
    """Send a Draft campaign"""
    campaign = container.campaigns.require(args.campaign_id)
    if campaign.is_sent:
        print(f"✗ Campaign '{campaign.name}' was already sent")
        sys.exit(1)
    recipients = container.campaigns.send(args.campaign_id, container.clients.all())
    print(f"✓ Campaign '{campaign.name}' sent to {len(recipients)} client(s)")
    for client in recipients:
        print(f"  - {client.name} <{client.email or 'sin correo'}>")


def cmd_store(args, container):
    """List local store keys"""
    print_json(container.local_store.entries())


def cmd_serve(args, container):
    """Run the dashboard API"""
    from inverland.dashboard import create_app

    app = create_app(container.settings, container=container)
    app.run(host=args.host, port=args.port, debug=container.settings.DEBUG)


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Inverland CRM',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show where users were loaded from
  inverland sync

  # Remove duplicate user records from the remote store
  inverland dedupe

  # Search rentals in Monterrey with at least 2 bedrooms
  inverland properties --operation Renta --location Monterrey --bedrooms 2

  # Send a campaign
  inverland send-campaign campaign-sample-1

  # Run the dashboard API
  inverland serve --port 5000
        """
    )

    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    subparsers.add_parser('sync', help='Synchronise users and show the result')
    subparsers.add_parser('dedupe', help='Remove duplicate user records')
    subparsers.add_parser('users', help='List users')
    subparsers.add_parser('store', help='List local store keys')

    # Properties command
    props_parser = subparsers.add_parser('properties', help='Search listings')
    props_parser.add_argument('--type', help='Property type (Casa, Departamento, ...)')
    props_parser.add_argument('--location', '-l', help='City, state or neighborhood')
    props_parser.add_argument('--operation', help='Venta, Renta or "Renta temporal"')
    props_parser.add_argument('--min-price', type=float)
    props_parser.add_argument('--max-price', type=float)
    props_parser.add_argument('--bedrooms', type=int, help='Minimum bedrooms')
    props_parser.add_argument('--bathrooms', type=float, help='Minimum bathrooms')
    props_parser.add_argument('--amenities', default='', help='Comma-separated amenities')
    props_parser.add_argument('--agent', help='Agent user id')
    props_parser.add_argument('--page', type=int, default=1, help='Page number')

    # Send campaign command
    send_parser = subparsers.add_parser('send-campaign', help='Send a Draft campaign')
    send_parser.add_argument('campaign_id', help='Campaign ID')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Run the dashboard API')
    serve_parser.add_argument('--host', default='127.0.0.1')
    serve_parser.add_argument('--port', type=int, default=5000)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    settings = Settings()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    commands = {
        'sync': cmd_sync,
        'dedupe': cmd_dedupe,
        'users': cmd_users,
        'properties': cmd_properties,
        'send-campaign': cmd_send_campaign,
        'store': cmd_store,
        'serve': cmd_serve,
    }

    try:
        container = build_container(settings)
        commands[args.command](args, container)
    except InverlandError as e:
        print(f"✗ Error: {e.message}")
        sys.exit(1)
    except RemoteStoreError as e:
        print(f"✗ Remote store error: {e.message}")
        sys.exit(1)


if __name__ == '__main__':
    main()
