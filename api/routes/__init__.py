# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Route handlers following Single Responsibility Principle

- maintenance: sanitization discovery, cleanup and verification
- health: liveness and store status
"""
