# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Check Mate Core Engine
======================

Claim segmentation, bounded concurrent verification against the Sonar
oracle, and verdict resolution for short free-form text.
"""

__version__ = "0.3.0"
