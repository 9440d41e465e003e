"""Pre-classification extraction of diagrams and tables.

Submodules:
  arena     -- append-only store of extracted payloads addressed by placeholder index
  diagrams  -- fenced mermaid, text-art flows, trees and bar charts
  tables    -- pipe-delimited markdown tables to HTML
  pipeline  -- runs every extractor in its fixed order
"""
