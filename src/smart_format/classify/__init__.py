"""Classifier strategies that turn cleaned text into Elements.

Submodules:
  prompts  -- instruction sent to the remote classifier
  remote   -- Azure OpenAI structured-output classifier
  local    -- deterministic heuristic classifier
  chain    -- ordered fallback chain and the paragraph-only last resort
"""
