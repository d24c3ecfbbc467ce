from __future__ import annotations

from typing import Dict, Optional

import uvicorn
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from common.errors import ShimError
from common.logging_setup import get_logger, setup_logging
from iiif_shim.config import load_config, merge_config, DEFAULT_CONFIG
from iiif_shim.iiif_client import IIIFClient
from iiif_shim.metadata import legacy_metadata
from iiif_shim.parsing import compile_pid_pattern, parse_region_request, resolve_identifier
from iiif_shim.translate import translate


log = get_logger("iiif_shim.server")


def _error_response(err: ShimError, **ctx) -> JSONResponse:
    log.warning("request failed: %s", err.detail, extra={"error": err.error, **ctx})
    return JSONResponse(err.to_dict(), status_code=err.status_code)


def create_app(config: Optional[Dict] = None, client: Optional[IIIFClient] = None) -> FastAPI:
    cfg = merge_config(DEFAULT_CONFIG, config)
    iiif_cfg = cfg["iiif"]
    pid_pattern = compile_pid_pattern(cfg["identifiers"]["pattern"])

    # Shared by every request for the life of the process.
    if client is None:
        client = IIIFClient(
            iiif_cfg["server_root"],
            timeout=float(iiif_cfg.get("timeout_s", 10.0)),
            pool_maxsize=int(iiif_cfg.get("pool_maxsize", 20)),
        )

    app = FastAPI(title="Djatoka IIIF Shim", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "iiif_server_root": client.server_root,
            "pid_pattern": pid_pattern.pattern,
        }

    @app.get("/djatoka-metadata.json")
    def djatoka_metadata(url: str = Query(...)):
        """Djatoka image metadata, derived from the IIIF info.json of the same image."""
        pid = resolve_identifier(url, pid_pattern)
        if not pid.ok:
            return _error_response(pid.error, url=url)
        info = client.fetch_info(pid.value)
        if not info.ok:
            return _error_response(info.error, pid=pid.value)
        legacy = legacy_metadata(info.value)
        if not legacy.ok:
            return _error_response(legacy.error, pid=pid.value)
        return JSONResponse(legacy.value.to_json())

    @app.get("/getRegionFromIIIF")
    def get_region_from_iiif(
        contentUrl: str = Query(...),
        level: Optional[str] = Query(None),
        region: Optional[str] = Query(None),
        scale: Optional[str] = Query(None),
    ):
        """
        Redirect (307) a Djatoka getRegion request to the equivalent IIIF image URL.

        Djatoka region is y,x,h,w at the requested level; IIIF gets x,y,w,h at full
        resolution plus pct:(100 / scale factor) for that level.
        """
        pid = resolve_identifier(contentUrl, pid_pattern)
        if not pid.ok:
            return _error_response(pid.error, url=contentUrl)
        request = parse_region_request(level=level, region=region, scale=scale)
        if not request.ok:
            return _error_response(request.error, pid=pid.value)
        spec = translate(pid.value, request.value, client.fetch_descriptor)
        if not spec.ok:
            return _error_response(spec.error, pid=pid.value, level=level, region=region, scale=scale)

        target = client.image_url(pid.value, spec.value)
        log.info("redirect %s", target, extra={"pid": pid.value, "level": level, "region": region, "scale": scale})
        return RedirectResponse(target, status_code=307)

    return app


P = load_config()
setup_logging(P.get("logging", {}).get("level"), force=True)

app = create_app(P)


# -------- local dev entrypoint --------
if __name__ == "__main__":
    srv = P.get("server", {})
    uvicorn.run(app, host=srv.get("host", "0.0.0.0"), port=int(srv.get("port", 8000)))
