# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import os


def is_local_run() -> bool:
    """
    Best-effort detection of local/dev runs without requiring extra configuration.
    """
    env = (os.getenv("CHECKMATE_ENV") or os.getenv("ENV") or "").strip().lower()
    return env in ("local", "dev", "development")
