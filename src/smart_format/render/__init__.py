"""HTML output for styled elements.

Submodules:
  markdown  -- HTML escaping and markdown artifact cleanup
  html      -- HtmlRenderer with widow-label suppression, keep-together wrapping and TOC
"""
