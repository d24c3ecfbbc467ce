"""
Djatoka IIIF shim test suite

Structure:
- unit/: parsing, descriptor types, metadata adapter, translator, IIIF client, CLI
- integration/: the FastAPI app end to end, with the IIIF server mocked out
"""
