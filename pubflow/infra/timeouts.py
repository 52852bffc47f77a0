from __future__ import annotations

# GH / API operations
GH_TIMEOUT_SECONDS = 60.0

# Idempotent GH read retry policy
GH_READ_RETRY_ATTEMPTS = 3
GH_READ_RETRY_DELAY_SECONDS = 1.0

# Storage upload of a zipped build
UPLOAD_TIMEOUT_SECONDS = 10 * 60.0

# Serverless function calls (deploy finalization)
FUNCTION_TIMEOUT_SECONDS = 3 * 60.0

# Unique-name probing gives up after this many taken names
UNIQUE_NAME_MAX_PROBES = 100
