from __future__ import annotations

# gh read operations (auth status)
GH_TIMEOUT_SECONDS = 60.0

# gh release create uploads every archive in one call
GH_UPLOAD_TIMEOUT_SECONDS = 30 * 60.0
