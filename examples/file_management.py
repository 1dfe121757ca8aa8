#!/usr/bin/env python3
"""
File management example.

This example demonstrates reading, modifying and deleting stored files.
"""

import os
import sys

from waifuvault import WaifuVaultClient
from waifuvault.exceptions import ApiError


def show_info(client: WaifuVaultClient, token: str):
    """Show file metadata."""
    info = client.file_info(token, formatted=True)
    print(f"Token: {info.token}")
    print(f"  URL: {info.url}")
    print(f"  Views: {info.views}")
    print(f"  Expires in: {info.retention_period}")
    if info.bucket:
        print(f"  Bucket: {info.bucket}")
    if info.album:
        print(f"  Album: {info.album.name}")
    if info.options:
        print(f"  Password: {'Yes' if info.options.protected else 'No'}")
        print(f"  Hidden filename: {'Yes' if info.options.hide_filename else 'No'}")
        print(f"  One-time download: {'Yes' if info.options.one_time_download else 'No'}")


def set_password(client: WaifuVaultClient, token: str, password: str, previous: str = None):
    """Set or change the password of a file."""
    print(f"Setting password on {token}...")
    client.update_file(token, password=password, previous_password=previous)
    print("Done!")


def set_expiry(client: WaifuVaultClient, token: str, expiry: str):
    """Change when a file expires."""
    print(f"Setting expiry of {token} to {expiry}...")
    info = client.update_file(token, custom_expiry=expiry)
    print(f"Done! Retention is now {info.retention_period}")


def hide_filename(client: WaifuVaultClient, token: str, hide: bool):
    """Toggle hiding the filename in the URL."""
    client.update_file(token, hide_filename=hide)
    print("Done!")


def delete_file(client: WaifuVaultClient, token: str):
    """Delete a file."""
    print(f"Deleting file {token}...")
    if client.delete_file(token):
        print("Done!")
    else:
        print("The server did not delete the file.")


def main():
    # Get configuration from environment
    base_url = os.environ.get("WAIFUVAULT_BASE_URL")

    # Parse command
    if len(sys.argv) < 3:
        print("Usage: python file_management.py <command> <token> [args]")
        print("\nCommands:")
        print("  info <token>                         - Show file metadata")
        print("  password <token> <new> [previous]    - Set or change the password")
        print("  expire <token> <expiry>              - Change expiry (e.g. 10m, 2h, 1d)")
        print("  hide <token> <yes|no>                - Hide the filename in the URL")
        print("  delete <token>                       - Delete a file")
        print("\nEnvironment variables:")
        print("  WAIFUVAULT_BASE_URL - REST root (default: https://waifuvault.moe/rest)")
        sys.exit(1)

    command = sys.argv[1].lower()
    token = sys.argv[2]

    try:
        with WaifuVaultClient(base_url=base_url) as client:
            if command == "info":
                show_info(client, token)

            elif command == "password":
                if len(sys.argv) < 4:
                    print("Usage: python file_management.py password <token> <new> [previous]")
                    sys.exit(1)
                previous = sys.argv[4] if len(sys.argv) > 4 else None
                set_password(client, token, sys.argv[3], previous)

            elif command == "expire":
                if len(sys.argv) < 4:
                    print("Usage: python file_management.py expire <token> <expiry>")
                    sys.exit(1)
                set_expiry(client, token, sys.argv[3])

            elif command == "hide":
                if len(sys.argv) < 4:
                    print("Usage: python file_management.py hide <token> <yes|no>")
                    sys.exit(1)
                hide_filename(client, token, sys.argv[3].lower() in ("yes", "y", "true"))

            elif command == "delete":
                delete_file(client, token)

            else:
                print(f"Unknown command: {command}")
                sys.exit(1)

    except ApiError as e:
        print(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
