#!/usr/bin/env python3
"""
Bucket and album example.

This example creates a bucket, uploads files into it, groups them in an
album, shares the album and downloads it as a zip archive.
"""

import os
import sys
from pathlib import Path

from waifuvault import WaifuVaultClient


def main():
    # Get configuration from environment
    base_url = os.environ.get("WAIFUVAULT_BASE_URL")

    if len(sys.argv) < 3:
        print("Usage: python album_management.py <album_name> <file> [file ...]")
        print("\nEnvironment variables:")
        print("  WAIFUVAULT_BASE_URL - REST root (default: https://waifuvault.moe/rest)")
        sys.exit(1)

    album_name = sys.argv[1]
    paths = [Path(p) for p in sys.argv[2:]]

    with WaifuVaultClient(base_url=base_url) as client:
        bucket = client.create_bucket()
        print(f"Created bucket {bucket.token} (keep this token!)")

        # Files must be uploaded before they can be added to the album
        tokens = []
        for path in paths:
            info = client.upload(file=path, bucket=bucket.token, expires="1d")
            tokens.append(info.token)
            print(f"  Uploaded {path.name} -> {info.token}")

        album = client.create_album(bucket.token, album_name)
        album = client.associate_files(album.token, tokens)
        print(f"\nAlbum '{album.name}' ({album.token}) holds {len(album.files)} file(s)")

        public_url = client.share_album(album.token)
        print(f"Public URL: {public_url}")

        archive = client.download_album(album.token)
        zip_path = Path(f"{album_name}.zip")
        zip_path.write_bytes(archive)
        print(f"Saved album archive to {zip_path.absolute()}")

        result = client.revoke_album(album.token)
        print(f"Revoked public access: {result.description}")


if __name__ == "__main__":
    main()
