"""
Command line client for the newsletter service.

    meetup-newsletter send-update [--url URL] [--admin-key KEY]

Triggers a broadcast on a running server. The admin key defaults to the
ADMIN_KEY environment variable (a .env file in the working directory is
loaded first).
"""

import sys

import click
import requests
from dotenv import load_dotenv

DEFAULT_SEND_UPDATE_URL = 'http://127.0.0.1:5000/send-update'


@click.group()
def cli():
    """Meetup newsletter tools."""
    load_dotenv()


@cli.command('send-update')
@click.option('--url', default=DEFAULT_SEND_UPDATE_URL, show_default=True,
              help='send-update endpoint of the running server.')
@click.option('--admin-key', envvar='ADMIN_KEY', help='Shared admin secret (default: $ADMIN_KEY).')
@click.option('--timeout', default=300, show_default=True, help='Seconds to wait for the broadcast.')
def send_update(url, admin_key, timeout):
    """Fetch the next upcoming event and email it to all verified subscribers."""
    if not admin_key:
        click.echo('Error: ADMIN_KEY not set (use --admin-key or the ADMIN_KEY environment variable)', err=True)
        sys.exit(1)

    click.echo('Fetching next upcoming event and sending update...')
    click.echo('')

    try:
        response = requests.post(
            url,
            headers={'x-admin-key': admin_key},
            json={},
            timeout=timeout,
        )
        data = response.json()
    except requests.RequestException as e:
        click.echo(f'Request failed: {e}', err=True)
        click.echo('Make sure the newsletter server is running.', err=True)
        sys.exit(1)
    except ValueError:
        click.echo(f'Error: unexpected response (HTTP {response.status_code})', err=True)
        sys.exit(1)

    if not (response.ok and data.get('success')):
        click.echo(f"Error: {data.get('message', 'unknown error')}", err=True)
        sys.exit(1)

    click.echo(f"Success: {data.get('message')}")
    if data.get('event'):
        click.echo(f"Event: {data['event']}")
    if data.get('sent') is not None:
        click.echo(f"Sent: {data['sent']}, Failed: {data.get('failed') or 0}")


if __name__ == '__main__':
    cli()
