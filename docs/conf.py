# Sphinx configuration for the graphbinary documentation.

import os
import sys

sys.path.insert(0, os.path.abspath(".."))

from graphbinary import __version__  # noqa: E402

# -- Project information -----------------------------------------------------

project = "graphbinary"
copyright = "2026, graphbinary contributors"
author = "graphbinary contributors"
release = __version__

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

templates_path = ["_templates"]
exclude_patterns = ["_build"]

autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "show-inheritance": True,
}
autodoc_typehints = "description"
autosummary_generate = True

# Codec docstrings use Google style
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_use_admonition_for_examples = True

# -- HTML output -------------------------------------------------------------

html_theme = "alabaster"
html_theme_options = {
    "description": "Self-describing binary codec for graph data",
    "fixed_sidebar": True,
}

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
}
