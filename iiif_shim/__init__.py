"""
Djatoka -> IIIF shim

- Answers Djatoka `djatoka-metadata.json` queries from an IIIF `info.json`
- Rewrites Djatoka `getRegion` (level/region/scale) requests into IIIF
  region/size URLs and redirects (307) to the IIIF server
- Endpoints: /djatoka-metadata.json, /getRegionFromIIIF, /health
"""
