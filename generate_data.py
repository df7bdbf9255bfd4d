# generate_data.py
import argparse
import json
from pathlib import Path

from sales_api.generate_data import generate_dataset

if __name__ == "__main__":
    # Setup argument parser
    parser = argparse.ArgumentParser(description="Generate a dummy product transactions dataset.")
    parser.add_argument("--rows", type=int, default=60, help="Number of transactions to generate")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    parser.add_argument("--output", default="product_transaction.json", help="Where to write the JSON array")
    args = parser.parse_args()

    output_file = Path(args.output)
    with output_file.open(mode="w") as file:
        json.dump(generate_dataset(rows=args.rows, seed=args.seed), file, indent=2)

    # Serve it with `python -m http.server` and point SEED_URL at it
    print(f"Wrote {args.rows} transactions to {output_file}")
