from django.core.management.base import BaseCommand

from apps.discounts.services.usage import get_statistics


class Command(BaseCommand):
    help = "Print discount usage and savings totals"

    def add_arguments(self, parser):
        parser.add_argument("--top", type=int, default=None, help="How many most-used codes to list")

    def handle(self, *args, **options):
        stats = get_statistics(top=options["top"])

        self.stdout.write(f"Total usage:   {stats.total_usage}")
        self.stdout.write(f"Total savings: {stats.total_savings}")
        for row in stats.most_used:
            self.stdout.write(f"  {row['code']}: {row['usage_count']}")

        self.stdout.write(self.style.SUCCESS("done"))
