"""maiscam: reporting backend for the MAI Scam admin dashboard.

This package turns scam-detection records (websites, emails, and social media
posts analysed upstream) into the statistics, language insights, and domain
rankings shown to analysts on the dashboard.
"""
