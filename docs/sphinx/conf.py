# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the jsonrevive documentation."""

project = "jsonrevive"
author = "jsonrevive Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"
napoleon_google_docstring = True

html_theme = "alabaster"
