"""Text normalisation, block tokenizing and OCR / AI-boilerplate cleanup.

Submodules:
  tokenizer  -- line-ending normalisation, blank-line splitting and block merge repair
  cleanup    -- heading/body separation, citation repair, noise and filler removal
"""
