"""Creates the DynamoDB tables and loads sample data.

Usage:
    python -m data_layer.scripts.setup_tables                # create + generate + load
    python -m data_layer.scripts.setup_tables --no-seed      # tables only
    python -m data_layer.scripts.setup_tables --delete       # drop all tables
    python -m data_layer.scripts.setup_tables --region eu-west-1
"""
import os
import sys

# Project root on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import env_loader  # noqa: F401
from bms.config import Settings
from data_layer.generators.generators import generate_all
from data_layer.infrastructure.dynamodb_setup import create_tables, delete_tables, load_all_data

DATA_DIR = "data_layer/data"


def main(argv=None):
    settings = Settings.from_env()
    delete_mode = False
    seed = True

    args = sys.argv[1:] if argv is None else argv
    for i, arg in enumerate(args):
        if arg == "--delete":
            delete_mode = True
        elif arg == "--no-seed":
            seed = False
        elif arg == "--region" and i + 1 < len(args):
            settings.region = args[i + 1]

    if delete_mode:
        print("🗑️  Deleting tables...\n")
        delete_tables(settings)
        return 0

    print("=" * 60)
    print("🚀 Talent BMS - DynamoDB setup")
    print(f"   Region: {settings.region}")
    print("=" * 60)

    print("\n📊 STEP 1: Tables")
    print("-" * 40)
    create_tables(settings)

    if seed:
        print("\n🏭 STEP 2: Sample data")
        print("-" * 40)
        if not os.path.exists(os.path.join(DATA_DIR, "sales.json")):
            generate_all(output_dir=DATA_DIR)
        load_all_data(settings, data_dir=DATA_DIR)

    print("\n" + "=" * 60)
    print("✅ Ready")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
