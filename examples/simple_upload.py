#!/usr/bin/env python3
"""
Simple file upload example.

This example demonstrates uploading a local file or a URL to WaifuVault.
"""

import os
import sys

from waifuvault import WaifuVaultClient
from waifuvault.exceptions import IoError, WaifuVaultError


def main():
    # Get configuration from environment
    base_url = os.environ.get("WAIFUVAULT_BASE_URL")
    password = os.environ.get("WAIFUVAULT_PASSWORD")

    # Check for file argument
    if len(sys.argv) < 2:
        print("Usage: python simple_upload.py <file_path_or_url> [expiry]")
        print("\nArguments:")
        print("  file_path_or_url - Local file, or an http(s) URL for the server to fetch")
        print("  expiry           - e.g. 30m, 1h, 7d (optional)")
        print("\nEnvironment variables:")
        print("  WAIFUVAULT_BASE_URL - REST root (default: https://waifuvault.moe/rest)")
        print("  WAIFUVAULT_PASSWORD - Password to protect the upload (optional)")
        sys.exit(1)

    target = sys.argv[1]
    expires = sys.argv[2] if len(sys.argv) > 2 else None
    is_url = target.startswith(("http://", "https://"))

    print(f"Uploading {target}...")

    try:
        with WaifuVaultClient(base_url=base_url) as client:
            if is_url:
                info = client.upload(url=target, expires=expires, password=password)
            else:
                info = client.upload(file=target, expires=expires, password=password)
    except IoError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except WaifuVaultError as e:
        print(f"Upload failed: {e}")
        sys.exit(1)

    print("\nUpload successful!")
    print(f"  Token: {info.token}")
    print(f"  URL: {info.url}")
    print(f"  Retention: {info.retention_period}")
    if info.options:
        print(f"  Protected: {'Yes' if info.options.protected else 'No'}")


if __name__ == "__main__":
    main()
