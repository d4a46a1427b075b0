#!/usr/bin/env python3
"""
S3 Presigned URL Generator

Run this script to generate SigV4 presigned URLs for S3-compatible
providers (AWS S3, Cloudflare R2, Backblaze B2, ...).

Usage:
    python run.py -k video.mp4                 # Use config.json
    python run.py -c custom.json -k a -k b     # Use custom config, two keys
    python run.py -p r2 -k video.mp4           # Sign for specific providers
    python run.py -k video.mp4 -e 3600         # Valid for one hour
    python run.py -k video.mp4 --cross-check   # Compare against botocore
    python run.py -k video.mp4 -j urls.json    # Output JSON results
    python run.py --stdin < request.json       # JSON message boundary
"""

import sys
from s3presign.cli import main

if __name__ == "__main__":
    sys.exit(main())
