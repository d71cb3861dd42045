"""
Cross‑cutting infrastructure: settings, logging, storage, security
and the error taxonomy shared by services and endpoints.
"""
