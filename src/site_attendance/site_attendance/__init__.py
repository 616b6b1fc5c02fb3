"""Site attendance package.

Feature modules (checkin, attendance, compliance, tokens, ...) sit behind a thin
Flask controller layer; services depend on repository protocols, not on MySQL.
"""
