"""Management command to load the achievement catalog."""

from django.core.management.base import BaseCommand
from users.achievements import ACHIEVEMENT_CATALOG, seed_achievement_catalog


class Command(BaseCommand):
    help = "Create or refresh the built-in achievement catalog"

    def handle(self, *args, **options):
        created = seed_achievement_catalog()
        updated = len(ACHIEVEMENT_CATALOG) - created
        self.stdout.write(self.style.SUCCESS(f"Achievements seeded: {created} created, {updated} updated"))
