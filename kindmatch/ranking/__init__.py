"""Ranking Module - Filter, score, sort and paginate postings for a worker."""
from kindmatch.ranking.pipeline import RankingPipeline, dedupe_postings, sort_key

__all__ = ['RankingPipeline', 'dedupe_postings', 'sort_key']
