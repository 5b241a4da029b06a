"""Shared constants for the VHM ecosystem."""

from pathlib import Path

# Site record store (one JSON document per domain)
SITES_DIR = Path("/var/lib/vhm/sites")

# Apache layout (Debian/Ubuntu two-stage activation)
APACHE_SITES_AVAILABLE = Path("/etc/apache2/sites-available")
APACHE_SITES_ENABLED = Path("/etc/apache2/sites-enabled")

# TLS material referenced by the :443 block
SSL_CERT_DIR = Path("/etc/ssl/certs")
SSL_KEY_DIR = Path("/etc/ssl/private")

# Privileged commands (argv prefixes, overridable via VhmConfig / env vars)
ENABLE_SITE_CMD = ("sudo", "a2ensite")
DISABLE_SITE_CMD = ("sudo", "a2dissite")
RELOAD_CMD = ("sudo", "systemctl", "reload", "apache2")
CONFIGTEST_CMD = ("sudo", "apachectl", "configtest")
COMMAND_TIMEOUT = 30.0

# Audit / logging
LOG_DIR = Path("/var/log/vhm")
AUDIT_JSONL_PATH = LOG_DIR / "audit.jsonl"
AUDIT_DB_PATH = Path("/var/lib/vhm/audit.db")

# Virtual host defaults
DEFAULT_HTTP_PORT = 80
SSL_PORT = 443
