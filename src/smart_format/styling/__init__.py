"""Style rules: per-type CSS declarations merged with user overrides.

Submodules:
  rules  -- DEFAULT_RULES, RuleEngine and override loading
"""
