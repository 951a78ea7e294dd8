"""Management command to back-fill achievements for existing users."""

import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from users.achievements import check_and_award_achievements

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Run the achievement check for every user and award anything newly earned"

    def add_arguments(self, parser):
        parser.add_argument(
            "--batch-size",
            type=int,
            default=500,
            help="Number of users loaded per query (default: 500)",
        )

    def handle(self, *args, **options):
        batch_size = options["batch_size"]
        if batch_size < 1:
            self.stderr.write(self.style.ERROR("--batch-size must be at least 1"))
            return

        users = get_user_model().objects.order_by("pk")
        total = users.count()
        self.stdout.write(f"Checking achievements for {total} users")

        checked = 0
        awarded_total = 0
        for user in users.iterator(chunk_size=batch_size):
            awarded = check_and_award_achievements(user)
            if awarded:
                self.stdout.write(f"  {user.get_username()}: {', '.join(awarded)}")
            awarded_total += len(awarded)
            checked += 1
            if checked % batch_size == 0:
                self.stdout.write(f"Processed {checked}/{total} users...")

        self.stdout.write(self.style.SUCCESS(f"Checked {checked} users, awarded {awarded_total} achievements"))
