# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Attendance backend: devadmin sessions and identity-provider auth proxy."""

__version__ = "0.1.0"
