#!/usr/bin/env python3
"""
Show what the shim would do with a Djatoka request, without running the server.

Prints the IIIF image URL the request would be redirected to, or with --metadata
the Djatoka metadata JSON. Talks to the IIIF server only when it has to
(metadata, or level/region requests).

Examples:
  python scripts/translate_legacy_url.py \
      --content-url http://fedora/fedora/objects/uva-lib:123/methods/djatoka:jp2SDef/getRegion \
      --level 2 --region 10,20,30,40
  python scripts/translate_legacy_url.py --content-url ... --scale 0.25
  python scripts/translate_legacy_url.py --content-url ... --metadata
"""
from __future__ import annotations

import argparse
import json
import sys

from common.logging_setup import setup_logging
from iiif_shim.config import load_config
from iiif_shim.iiif_client import IIIFClient
from iiif_shim.metadata import legacy_metadata
from iiif_shim.parsing import parse_region_request, resolve_identifier
from iiif_shim.translate import translate


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Translate a Djatoka request into its IIIF equivalent")
    ap.add_argument("--content-url", required=True, help="Fedora URL the pid is taken from")
    ap.add_argument("--level", default=None, help="Djatoka level (-1 = finest)")
    ap.add_argument("--region", default=None, help="Djatoka region y,x,h,w")
    ap.add_argument("--scale", default=None, help="fraction (0.5) or pixel box (200 or 300,200)")
    ap.add_argument("--metadata", action="store_true", help="print Djatoka metadata instead of a URL")
    ap.add_argument("--config", default=None, help="YAML config (default config/shim.yaml)")
    ap.add_argument("--server-root", default=None, help="override iiif.server_root")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    setup_logging(cfg.get("logging", {}).get("level"))
    iiif_cfg = cfg["iiif"]
    client = IIIFClient(
        args.server_root or iiif_cfg["server_root"],
        timeout=float(iiif_cfg.get("timeout_s", 10.0)),
    )

    try:
        pid = resolve_identifier(args.content_url, cfg["identifiers"]["pattern"])
        if not pid.ok:
            print(f"error: {pid.error.detail}", file=sys.stderr)
            return 1

        if args.metadata:
            info = client.fetch_info(pid.value)
            if not info.ok:
                print(f"error: {info.error.detail}", file=sys.stderr)
                return 1
            legacy = legacy_metadata(info.value)
            if not legacy.ok:
                print(f"error: {legacy.error.detail}", file=sys.stderr)
                return 1
            print(json.dumps(legacy.value.to_json(), indent=2))
            return 0

        request = parse_region_request(level=args.level, region=args.region, scale=args.scale)
        if not request.ok:
            print(f"error: {request.error.detail}", file=sys.stderr)
            return 1
        spec = translate(pid.value, request.value, client.fetch_descriptor)
        if not spec.ok:
            print(f"error: {spec.error.detail}", file=sys.stderr)
            return 1
        print(client.image_url(pid.value, spec.value))
        return 0
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
