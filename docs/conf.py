"""Sphinx build settings for the Courtside API reference."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

# autodoc imports ``courtside`` from the checkout rather than an installed copy.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from courtside import __version__  # noqa: E402

project = "Courtside Basketball Simulator"
author = "WelshDragon"
copyright = f"{datetime.now():%Y}, {author}"
version = release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

autosummary_generate = True
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}
autodoc_class_signature = "separated"

# Docstrings are numpydoc throughout, including the private engine helpers.
napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_include_private_with_doc = True
napoleon_use_rtype = False

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store", "debug_logs"]

html_theme = "sphinx_rtd_theme"
html_title = f"Courtside {release}"
