# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
nadm core package.

``nadm-build`` inlines core.sh into the launcher; ``nadm`` runs it.
"""
from .embedder import embed as embed  # noqa: F401 (re-export)
from .launcher import launch as launch  # noqa: F401 (re-export)
