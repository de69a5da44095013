import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from kindmatch.cache import CachedRanker, MatchCacheService
from kindmatch.config_loader import load_config
from kindmatch.exceptions import MatchingException
from kindmatch.ingest import normalize_job_postings, normalize_worker_profile, parse_timestamp
from kindmatch.models import WorkerProfile
from kindmatch.ranking import RankingPipeline

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def load_json_file(path: str) -> Optional[Any]:
    """Load JSON data from a file."""
    logger.info(f"Loading {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"File not found: {path}")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        return None


def build_worker(data: Dict[str, Any]) -> WorkerProfile:
    """
    Worker files hold either raw rows ({"preferences", "profile", "user"})
    or an already canonical WorkerProfile document.
    """
    if any(key in data for key in ("preferences", "profile", "user")):
        return normalize_worker_profile(
            data.get("preferences"), data.get("profile"), data.get("user")
        )
    return WorkerProfile.model_validate(data)


def parse_exclusions(values: Optional[List[str]]) -> List[str]:
    excluded: List[str] = []
    for value in values or []:
        excluded.extend(part.strip() for part in value.split(",") if part.strip())
    return excluded


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Rank job postings for a worker")
    parser.add_argument('worker', help='Path to the worker JSON file')
    parser.add_argument('jobs', help='Path to a JSON array of job posting rows')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to a matching config YAML (default: config.yaml)')
    parser.add_argument('--profile', type=str, default=None,
                        help='Weighting profile name (default: ranking.default_profile)')
    parser.add_argument('--limit', type=int, default=None, help='Page size')
    parser.add_argument('--offset', type=int, default=0, help='Page offset')
    parser.add_argument('--exclude', action='append',
                        help='Job ids the worker already interacted with (repeatable, comma-separated)')
    parser.add_argument('--now', type=str, default=None,
                        help='Reference time (ISO-8601); defaults to the current UTC time')
    parser.add_argument('--no-cache', action='store_true', help='Bypass the match cache')
    args = parser.parse_args(argv)

    worker_data = load_json_file(args.worker)
    job_rows = load_json_file(args.jobs)
    if worker_data is None or job_rows is None:
        return 1
    if not isinstance(job_rows, list):
        logger.error(f"Expected a JSON array of job postings in {args.jobs}")
        return 1

    now = None
    if args.now:
        now = parse_timestamp(args.now, "--now")
        if now is None:
            logger.error(f"Could not parse --now value: {args.now}")
            return 1

    try:
        config = load_config(args.config)
        worker = build_worker(worker_data)
        postings = normalize_job_postings(job_rows)
        pipeline = RankingPipeline.from_config(config)

        ranker = pipeline
        if config.cache.enabled and not args.no_cache:
            ranker = CachedRanker(pipeline, MatchCacheService.from_config(config.cache))

        limit = args.limit if args.limit is not None else config.ranking.default_limit
        results = ranker.rank(
            worker,
            postings,
            exclusion=parse_exclusions(args.exclude),
            profile_name=args.profile,
            limit=limit,
            offset=args.offset,
            now=now,
        )
    except (MatchingException, ValidationError) as e:
        logger.error(f"Ranking failed: {e}")
        return 2

    json.dump([r.to_dict() for r in results], sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
