"""Management command to print blended recommendations from the command line."""

import json

from django.core.management.base import BaseCommand, CommandError
from recommendations.serializers import parse_id_list
from recommendations.services import RecommendationEngine
from recommendations.services.recommendation_engine import DEFAULT_LIMIT
from recommendations.services.strategies import parse_search_terms
from rest_framework.exceptions import ValidationError


class Command(BaseCommand):
    help = "Print blended recommendations for the given liked movies, genres and search terms"

    def add_arguments(self, parser):
        parser.add_argument(
            "--liked",
            type=str,
            default="",
            help="Comma-separated TMDB ids of liked movies",
        )
        parser.add_argument(
            "--genres",
            type=str,
            default="",
            help="Comma-separated TMDB genre ids",
        )
        parser.add_argument(
            "--search",
            type=str,
            default="",
            help="Comma-separated search-history terms",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=DEFAULT_LIMIT,
            help=f"Number of recommendations (default: {DEFAULT_LIMIT})",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the full response as JSON",
        )

    def handle(self, *args, **options):
        if options["limit"] < 1:
            raise CommandError("--limit must be at least 1")
        try:
            liked = parse_id_list(options["liked"], "INVALID_MOVIE_ID", "movie id")
            genres = parse_id_list(options["genres"], "INVALID_GENRE_ID", "genre id")
        except ValidationError as e:
            raise CommandError(str(e.detail[0]))

        result = RecommendationEngine().get_recommendations(
            liked_movie_ids=liked,
            genre_ids=genres,
            search_terms=parse_search_terms(options["search"]),
            limit=options["limit"],
        )

        if options["json"]:
            self.stdout.write(json.dumps(result, indent=2, default=str))
            return

        self.stdout.write(f"Strategies: {', '.join(result['strategies_used'])}")
        for rank, movie in enumerate(result["recommendations"], start=1):
            self.stdout.write(
                f"{rank:>3}. {movie.get('title', '?')} ({(movie.get('release_date') or '')[:4] or 'n/a'}) "
                f"[{movie['recommendation_type']}] score={movie['final_score']} confidence={movie['confidence']}"
            )
            self.stdout.write(f"     {'; '.join(movie['reasons'])}")

        self.stdout.write(
            self.style.SUCCESS(f"{result['total']} recommendations, average confidence {result['avg_confidence']}")
        )
