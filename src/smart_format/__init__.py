"""Turn noisy plain text (OCR scans, screen captures, AI-chat transcripts) into styled HTML.

Subpackages:
  cleaning    -- tokenizer and OCR / AI-boilerplate cleanup rules
  extraction  -- diagram and table extractors with the placeholder arena
  classify    -- remote, local and paragraph-only classifier strategies
  styling     -- style rule engine
  render      -- markdown cleanup and HTML output
  web         -- FastAPI formatting endpoint
"""
