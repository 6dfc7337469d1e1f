import argparse
import csv
import os

from htamin import create_app
from htamin.services.catalog_import import import_catalog_rows

DEFAULT_CSV = os.path.join(os.getcwd(), "myanmar_food_database.csv")


def import_ingredients(csv_path: str):
    app = create_app()

    if not os.path.exists(csv_path):
        print(f"Error: CSV file not found at {csv_path}")
        return

    with app.app_context():
        print("Starting ingredient import...")
        with open(csv_path, "r", encoding="utf-8") as f:
            summary = import_catalog_rows(csv.DictReader(f))

        print("\nImport complete!")
        print(f"Rows processed: {summary['rows']}")
        print(f"Added: {summary['added']}")
        print(f"Updated: {summary['updated']}")
        print(f"Cooking methods: {summary['cooking_methods']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import the Myanmar food database CSV")
    parser.add_argument("csv_path", nargs="?", default=DEFAULT_CSV)
    import_ingredients(parser.parse_args().csv_path)
