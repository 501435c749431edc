"""HTTP surface of the MAI Scam dashboard backend."""
