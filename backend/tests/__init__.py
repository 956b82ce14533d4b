"""
Test suite for the Discord PFP NFT backend.

Test categories:
- unit: Image composition, pricing, storage and clients with faked transports
- api: Full FastAPI app with faked ledger, Pinata and Discord collaborators
"""
