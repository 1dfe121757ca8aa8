#!/usr/bin/env python3
"""
File download example.

This example demonstrates downloading a file from WaifuVault by token.
"""

import os
import sys
from pathlib import Path
from urllib.parse import unquote, urlparse

from waifuvault import WaifuVaultClient
from waifuvault.exceptions import NotFoundError, PasswordRequiredError


def format_size(size_bytes: int) -> str:
    """Format byte size to human readable string."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def main():
    # Get configuration from environment
    base_url = os.environ.get("WAIFUVAULT_BASE_URL")

    # Parse arguments
    if len(sys.argv) < 2:
        print("Usage: python download_file.py <token> [destination] [password]")
        print("\nArguments:")
        print("  token        - File token to download")
        print("  destination  - Destination path (optional, uses the stored filename)")
        print("  password     - Password for protected files (optional)")
        print("\nEnvironment variables:")
        print("  WAIFUVAULT_BASE_URL - REST root (default: https://waifuvault.moe/rest)")
        sys.exit(1)

    token = sys.argv[1]
    destination = sys.argv[2] if len(sys.argv) > 2 else None
    password = sys.argv[3] if len(sys.argv) > 3 else None

    with WaifuVaultClient(base_url=base_url) as client:
        # First, get file info
        print(f"Getting file info for {token}...")
        try:
            info = client.file_info(token, formatted=True)
        except NotFoundError:
            print("Error: File not found or has expired.")
            sys.exit(1)

        print(f"\nURL: {info.url}")
        print(f"Expires in: {info.retention_period}")

        if destination is None:
            destination = unquote(Path(urlparse(info.url).path).name) or token

        dest_path = Path(destination)
        if dest_path.exists():
            response = input(f"\n{dest_path} already exists. Overwrite? [y/N] ")
            if response.lower() != "y":
                print("Cancelled.")
                sys.exit(0)

        print(f"\nDownloading to {dest_path}...")
        try:
            content = client.download_file(info.url, password=password)
        except PasswordRequiredError as e:
            print(f"\nError: {e.message}")
            sys.exit(1)
        except NotFoundError:
            print("\nError: File not found or expired.")
            sys.exit(1)

        dest_path.write_bytes(content)
        print("\nDownload complete!")
        print(f"Saved {format_size(len(content))} to: {dest_path.absolute()}")


if __name__ == "__main__":
    main()
