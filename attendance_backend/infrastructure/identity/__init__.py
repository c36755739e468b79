# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .strapi_client import StrapiClient

__all__ = ["StrapiClient"]
