"""
Shared IIIF info.json documents for tests
"""

INFO_8421 = {
    "@context": "http://iiif.io/api/image/2/context.json",
    "@id": "http://iiif.lib.virginia.edu/iiif/uva-lib:1234",
    "protocol": "http://iiif.io/api/image",
    "width": 4000,
    "height": 3000,
    "tiles": [{"width": 512, "scaleFactors": [8, 4, 2, 1]}],
    "profile": ["http://iiif.io/api/image/2/level2.json"],
}

CONTENT_URL = "http://fedora.lib.virginia.edu/fedora/objects/uva-lib:1234/methods/djatoka:jp2SDef/getRegion"
