"""Response analysis and scoring.

  1. ranking_parser   : mention counting and rank extraction per response
  2. scoring          : per-platform score, overall score, trend
  3. recommendations  : platform-specific advice derived from the score
"""
