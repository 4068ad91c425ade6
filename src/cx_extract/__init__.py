"""cx-extract core library.

This package fetches a web page, discovers the stylesheets and scripts it
references, and repackages the selected ones into a client extension bundle
(merged content file + ``client-extension.yaml`` manifest + zip archive).

Repo rules:
- One pipeline run per resource class (css, js); nothing is cached between runs.
- Generated bundles belong under the output directory, never in the repo.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
